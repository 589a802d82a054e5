"""
plugins/custom_hats_plugin/scheduler.py
Keeps retrying an integration attempt until the plugin is told to stop.

The host finishes booting whenever it likes, so the plugin can't know when its
hats can go in. Instead it attempts the merge over and over: quickly while
attempts complete (most of them just find something not ready yet and return),
slowly after one raises. Once everything is in place each attempt is a no-op.

The scheduler is driven by host ticks (`update`) or by its own loop (`run`);
either way only one attempt runs at a time and nothing waits inside an attempt.
"""
import threading
import time
from typing import Callable, Optional

from engine.utils.logger import Logger


class RetryScheduler:
    def __init__(self, attempt: Callable[[], None], success_delay: float = 3.0, failure_delay: float = 12.0,
                 cancel_event: Optional[threading.Event] = None, clock: Callable[[], float] = time.monotonic,
                 name: str = "RetryScheduler"):
        self.attempt = attempt
        self.success_delay = success_delay
        self.failure_delay = failure_delay
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock
        self.name = name

        self.running = False
        self.next_attempt_at: Optional[float] = None
        self.attempts = 0
        self.failures = 0
        self.last_error: Optional[BaseException] = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def start(self, now: Optional[float] = None) -> None:
        """Arms the scheduler; the first attempt is due straight away."""
        if self.running:
            return
        self.running = True
        self.next_attempt_at = self.clock() if now is None else now

    def cancel(self) -> None:
        self.cancel_event.set()

    def stop(self) -> None:
        """Stops scheduling without raising the (possibly shared) cancellation signal."""
        if not self.running:
            return
        self.running = False
        self.next_attempt_at = None
        Logger.info(self.name, f"Stopped after {self.attempts} attempts ({self.failures} failed).")

    def run_attempt(self) -> float:
        """Runs one attempt and returns the delay before the next one."""
        self.attempts += 1
        try:
            self.attempt()
        except Exception as e:
            self.failures += 1
            self.last_error = e
            Logger.exception(self.name, f"Attempt #{self.attempts} failed", e)
            return self.failure_delay
        return self.success_delay

    def update(self, now: Optional[float] = None) -> bool:
        """
        Tick entry point. Runs an attempt if one is due.

        Returns:
            True if an attempt ran during this call.
        """
        if not self.running:
            return False

        now = self.clock() if now is None else now
        if self.next_attempt_at is not None and now < self.next_attempt_at:
            return False

        # Checked after every wait; the first attempt has no wait before it
        if self.attempts and self.cancelled:
            self.stop()
            return False

        delay = self.run_attempt()
        self.next_attempt_at = now + delay
        return True

    def run(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Blocking loop: attempt, wait, check for cancellation, repeat."""
        self.running = True
        while True:
            delay = self.run_attempt()
            sleep(delay)
            if self.cancelled:
                break
        self.stop()
