# engine/network.py
"""
Session-level network state: which actor number belongs to this client.
"""
from typing import Dict


class NetworkPlayer:
    def __init__(self, actor_number: int, nickname: str = ""):
        self.actor_number = actor_number
        self.nickname = nickname or f"Player{actor_number}"

    def __repr__(self) -> str:
        return f"NetworkPlayer({self.actor_number}, {self.nickname!r})"


class NetworkSession:
    def __init__(self, local_actor_number: int = 1, nickname: str = ""):
        self.local_player = NetworkPlayer(local_actor_number, nickname)
        self.players: Dict[int, NetworkPlayer] = {local_actor_number: self.local_player}

    def join(self, actor_number: int, nickname: str = "") -> NetworkPlayer:
        player = self.players.get(actor_number)
        if player is None:
            player = NetworkPlayer(actor_number, nickname)
            self.players[actor_number] = player
        return player
