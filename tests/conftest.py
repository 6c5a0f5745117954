import datetime

import pytest

from techsolve.calculator import Calculator
from techsolve.settings import MemorySettingsStore


class FakeScheduler:
    """Collects after() callbacks so tests decide when time passes."""

    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 0

    def after(self, ms, callback):
        self._next += 1
        timer_id = f"fake#{self._next}"
        self.pending[timer_id] = (ms, callback)
        return timer_id

    def after_cancel(self, timer_id):
        if self.pending.pop(timer_id, None) is not None:
            self.cancelled.append(timer_id)

    def fire_all(self):
        due, self.pending = list(self.pending.values()), {}
        for _ms, callback in due:
            callback()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def store():
    return MemorySettingsStore()


@pytest.fixture
def calc(store, scheduler):
    return Calculator(store=store, scheduler=scheduler, today=lambda: datetime.date(2024, 6, 14))


def press(calc, keys):
    """Feed a key sequence such as '12+3=' to the calculator."""
    for key in keys:
        if key == '=': calc.equals()
        elif key in '+-*/': calc.press_operator(key)
        elif key in '()': calc.press_paren(key)
        else: calc.press_digit(key)
