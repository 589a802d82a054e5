# tests/test_scheduler.py
import threading
import unittest

from engine.utils.logger import LogLevel, Logger
from plugins.custom_hats_plugin.insertion import InsertIndexOutOfRange
from plugins.custom_hats_plugin.scheduler import RetryScheduler


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRetryScheduler(unittest.TestCase):

    def setUp(self):
        Logger.set_level(LogLevel.CRITICAL)
        self.clock = FakeClock()
        self.calls = 0
        self.fail_next = False

    def tearDown(self):
        Logger.set_level(LogLevel.DEBUG)

    def attempt(self):
        self.calls += 1
        if self.fail_next:
            self.fail_next = False
            raise InsertIndexOutOfRange(30, 23)

    def make(self, **kwargs) -> RetryScheduler:
        return RetryScheduler(self.attempt, clock=self.clock, **kwargs)

    def test_nothing_runs_until_started(self):
        scheduler = self.make()
        self.assertFalse(scheduler.update())
        self.assertEqual(self.calls, 0)

    def test_first_attempt_is_immediate_then_short_delay(self):
        scheduler = self.make()
        scheduler.start()

        self.assertTrue(scheduler.update())
        self.assertEqual(self.calls, 1)

        self.clock.now += 2.9
        self.assertFalse(scheduler.update())
        self.clock.now += 0.1
        self.assertTrue(scheduler.update())
        self.assertEqual(self.calls, 2)

    def test_failure_is_contained_and_backs_off(self):
        scheduler = self.make()
        scheduler.start()
        self.fail_next = True

        self.assertTrue(scheduler.update())
        self.assertEqual(scheduler.failures, 1)
        self.assertIsInstance(scheduler.last_error, InsertIndexOutOfRange)
        self.assertTrue(scheduler.running)

        self.clock.now += 11.9
        self.assertFalse(scheduler.update())
        self.clock.now += 0.1
        self.assertTrue(scheduler.update())
        self.assertEqual(self.calls, 2)
        self.assertEqual(scheduler.failures, 1)

    def test_cancellation_checked_after_wait(self):
        scheduler = self.make()
        scheduler.start()
        scheduler.update()

        scheduler.cancel()
        # Still waiting: nothing happens yet
        self.clock.now += 1.0
        self.assertFalse(scheduler.update())
        self.assertTrue(scheduler.running)

        self.clock.now += 2.0
        self.assertFalse(scheduler.update())
        self.assertFalse(scheduler.running)
        self.assertEqual(self.calls, 1)

    def test_shared_cancel_event(self):
        event = threading.Event()
        scheduler = self.make(cancel_event=event)
        scheduler.start()
        scheduler.update()
        event.set()
        self.clock.now += 3.0
        scheduler.update()
        self.assertFalse(scheduler.running)

    def test_stop_does_not_raise_signal(self):
        event = threading.Event()
        scheduler = self.make(cancel_event=event)
        scheduler.start()
        scheduler.stop()
        self.assertFalse(scheduler.running)
        self.assertFalse(event.is_set())

    def test_custom_delays(self):
        scheduler = self.make(success_delay=0.5, failure_delay=2.0)
        scheduler.start()
        scheduler.update()
        self.clock.now += 0.5
        self.assertTrue(scheduler.update())

    def test_blocking_run_uses_both_delays(self):
        scheduler = self.make()
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            if len(sleeps) == 1:
                self.fail_next = True
            if len(sleeps) == 3:
                scheduler.cancel()

        scheduler.run(sleep=fake_sleep)

        self.assertEqual(sleeps, [3.0, 12.0, 3.0])
        self.assertEqual(self.calls, 3)
        self.assertEqual(scheduler.failures, 1)
        self.assertFalse(scheduler.running)


if __name__ == '__main__':
    unittest.main()
