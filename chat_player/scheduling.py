"""Timer facility and delayed delivery of chat records."""

import itertools
import sched
import time

from .debugging import log


class Timers():
    """Cooperative timer facility shared by the tasks of a video.

    All tasks run one at a time on the thread which calls `run`.
    """

    def __init__(self, timefunc=time.time, delayfunc=time.sleep):
        """Create a Timers object

        :param timefunc: Function returning the current UNIX time in seconds,
            defaults to time.time
        :type timefunc: function, optional
        :param delayfunc: Function which waits a number of seconds, defaults
            to time.sleep
        :type delayfunc: function, optional
        """
        self._scheduler = sched.scheduler(timefunc, delayfunc)

        # Tasks due at the same time run in the order they were added
        self._sequence = itertools.count()
        self.time = timefunc

    def call_later(self, delay, action, *args):
        """Run `action(*args)` after `delay` seconds

        :return: A handle which can be passed to `cancel`
        :rtype: sched.Event
        """
        return self._scheduler.enter(
            max(delay, 0), next(self._sequence), action, args)

    def cancel(self, event):
        """Cancel a task that has not run yet

        :param event: The handle returned by `call_later`
        :type event: sched.Event
        :return: True if the task was cancelled, False if it had already run
        :rtype: bool
        """
        try:
            self._scheduler.cancel(event)
        except ValueError:
            return False
        return True

    def empty(self):
        return self._scheduler.empty()

    def run(self):
        """Run tasks as they become due, until there are none left."""
        self._scheduler.run()


class PlaybackScheduler():
    """Delivers chat records when they should appear, relative to their
    timestamp, delayed by a configurable number of milliseconds."""

    def __init__(self, timers, delay_ms=0):
        """Create a PlaybackScheduler object

        :param timers: The timer facility to schedule deliveries on
        :type timers: Timers
        :param delay_ms: Number of milliseconds to delay each record by. A
            negative delay delivers records early, defaults to 0
        :type delay_ms: int, optional
        """
        self.timers = timers
        self.delay_ms = delay_ms
        self._pending = {}

    def delivery_time_ms(self, record, now_ms=None):
        """Get the UNIX time (in milliseconds) at which a record is due

        :param record: The chat record
        :type record: ChatRecord
        :param now_ms: Current time in milliseconds, defaults to None (use
            the clock of the timer facility)
        :type now_ms: float, optional
        :return: The delivery time in milliseconds
        :rtype: float
        """
        if now_ms is None:
            now_ms = self.timers.time() * 1000
        return now_ms + (record.timestamp_ms - (now_ms - self.delay_ms))

    def schedule(self, record, callback):
        """Arrange for `callback(record)` to be called when the record is due.
        Records which are already due are delivered as soon as possible.

        :param record: The chat record
        :type record: ChatRecord
        :param callback: Function called with the record
        :type callback: function
        """
        now_ms = self.timers.time() * 1000
        wait_ms = self.delivery_time_ms(record, now_ms) - now_ms

        log('debug', f'Delivering {record.id} in {max(wait_ms, 0):.0f}ms.')
        self._pending[record.id] = (
            self.timers.call_later(wait_ms / 1000, self._deliver, record, callback), record)

    def _deliver(self, record, callback):
        self._pending.pop(record.id, None)
        callback(record)

    def cancel_pending(self):
        """Cancel every delivery which has not happened yet

        :return: The records which will no longer be delivered
        :rtype: list[ChatRecord]
        """
        cancelled = []
        for event, record in self._pending.values():
            if self.timers.cancel(event):
                cancelled.append(record)
        self._pending.clear()

        if cancelled:
            log('debug', f'Cancelled {len(cancelled)} pending deliveries.')
        return cancelled

    @property
    def pending(self):
        return len(self._pending)
