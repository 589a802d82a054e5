import argparse
import os

# The demo host never opens a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from engine.config import (
    DEMO_CHARACTER_SPAWN_DELAY, DEMO_CUSTOMIZATION_BOOT_DELAY, DEMO_SESSION_SECONDS, LOG_LEVEL_NAME
)
from engine.core.game_manager import GameManager
from engine.utils.logger import LogLevel, Logger


def main():
    parser = argparse.ArgumentParser(description='Headless host session with plugins')
    parser.add_argument('--seconds', '-s', type=float, default=DEMO_SESSION_SECONDS,
                        help='How long to run the session (default: %(default)s)')
    parser.add_argument('--log-level', default=LOG_LEVEL_NAME,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument('--with-more-customizations', action='store_true',
                        help='Also load the More Customizations plugin (hats then go to its registry)')
    args = parser.parse_args()

    Logger.set_level(getattr(LogLevel, args.log_level))

    game = GameManager()
    game.load_plugins()
    if args.with_more_customizations:
        game.plugin_manager.load_plugin("more_customizations_plugin", force=True)

    # The host finishes booting on its own schedule; plugins must cope
    game.schedule(DEMO_CUSTOMIZATION_BOOT_DELAY, game.boot_customization)
    game.schedule(DEMO_CHARACTER_SPAWN_DELAY, lambda: game.spawn_character("Scout", 1, is_local=True))
    game.schedule(DEMO_CHARACTER_SPAWN_DELAY + 5.0, lambda: game.spawn_character("Visitor", 2))

    try:
        game.run(args.seconds)
    finally:
        report(game)
        game.shutdown()


def report(game: GameManager):
    hats = game.customization.hats if game.customization else []
    print(f"Catalog hats: {len(hats or [])}")
    for character in game.characters.all_characters:
        rig_hats = character.refs.customization.refs.player_hats or []
        print(f"{character.describe()}: {len(rig_hats)} hat renderers")

    bridge = game.plugin_manager.get_plugin("MoreCustomizations")
    if bridge is not None:
        print(f"More Customizations hats: {bridge.count('Hat')}")


if __name__ == "__main__":
    main()
