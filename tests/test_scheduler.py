import threading

from techsolve.scheduler import TimerScheduler


class TestTimerScheduler:
    def test_callback_fires(self):
        scheduler = TimerScheduler()
        fired = threading.Event()
        scheduler.after(10, fired.set)
        assert fired.wait(2)

    def test_cancelled_callback_does_not_fire(self):
        scheduler = TimerScheduler()
        fired = threading.Event()
        timer_id = scheduler.after(50, fired.set)
        scheduler.after_cancel(timer_id)
        assert not fired.wait(0.2)

    def test_cancel_unknown_id_is_harmless(self):
        TimerScheduler().after_cancel("after#999")
