import logging
import itertools
from threading import Timer, Lock


class TimerScheduler:
    """One-shot delayed callbacks with the same after()/after_cancel() interface as a Tk root.

    Used when the calculator runs without a Tk event loop. Callbacks run on a
    timer thread, so whatever they touch must be guarded by the caller.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._ids = itertools.count(1)
        self._timers = {}
        self._lock = Lock()

    def after(self, ms, callback):
        timer_id = f"after#{next(self._ids)}"

        def fire():
            with self._lock:
                if self._timers.pop(timer_id, None) is None: return
            callback()

        timer = Timer(ms / 1000.0, fire)
        timer.daemon = True
        with self._lock:
            self._timers[timer_id] = timer
        timer.start()
        return timer_id

    def after_cancel(self, timer_id):
        with self._lock:
            timer = self._timers.pop(timer_id, None)
        if timer is not None:
            timer.cancel()
            self.logger.debug(f"Cancelled {timer_id}")

    def cancel_all(self):
        with self._lock:
            timers, self._timers = list(self._timers.values()), {}
        for timer in timers: timer.cancel()
