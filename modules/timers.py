# Timer Queue
# Deferred and repeating callbacks pumped by the UI loop

import heapq
import itertools
import time

from shared.logging import get_logger

logger = get_logger(__name__)


class TimerHandle:
    """A scheduled callback; cancel() guarantees it never fires again"""

    def __init__(self, when, callback, interval=None, name=None):
        self.when = when
        self.callback = callback
        self.interval = interval
        self.name = name or getattr(callback, "__name__", "callback")
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return not self.cancelled

    def __repr__(self):
        state = "cancelled" if self.cancelled else "armed"
        return f"<TimerHandle {self.name} at={self.when:.3f} {state}>"


class TimerQueue:
    """Single-threaded timer queue; nothing fires until tick() is called"""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._heap = []
        self._counter = itertools.count()

    def now(self):
        return self._clock()

    def call_later(self, delay, callback, name=None) -> TimerHandle:
        handle = TimerHandle(self._clock() + max(0.0, delay), callback, name=name)
        self._push(handle)
        return handle

    def call_every(self, interval, callback, name=None) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(self._clock() + interval, callback, interval=interval, name=name)
        self._push(handle)
        return handle

    def _push(self, handle):
        heapq.heappush(self._heap, (handle.when, next(self._counter), handle))

    def pending(self):
        return [h for _, _, h in self._heap if h.active]

    def __len__(self):
        return len(self.pending())

    def tick(self, now=None):
        """Fire every callback due at now, in due order; returns how many fired"""
        now = self._clock() if now is None else now
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            if handle.interval is not None:
                handle.when = handle.when + handle.interval
                # A slow pump should not replay every missed interval
                if handle.when <= now:
                    handle.when = now + handle.interval
                self._push(handle)
            else:
                handle.cancelled = True
            try:
                handle.callback()
            except Exception:
                logger.exception("timer_callback_failed", timer=handle.name)
            fired += 1
        return fired
