"""
Display/expression state machine behind the calculator UI.

Every input event (digit, operator, equals, mode switch, ...) is a method on
`Calculator`. Events run one at a time and are the only code that mutates
`Calculator.state`. Numeric work is delegated to the pure modules
(evaluator, bases, scientific, bitwise, dates).

A failed evaluation shows "Error" and schedules a one-shot reset to "0"
ERROR_RESET_MS later. The reset carries the event epoch it was scheduled in;
every later accepted event bumps the epoch (and cancels the timer), so a stale
reset never overwrites newer input. Rejected events (a digit invalid for the
base, an operator in the wrong mode) change nothing, not even a shown "Error".
Events and the reset share one lock, since a headless scheduler fires the
reset from a timer thread.
"""

import math
import logging
import functools
import threading
from enum import Enum
from dataclasses import dataclass

import pyperclip

from . import bitwise, dates, scientific
from .bases import NumberBase, convert, format_int, is_valid_digit, parse_int
from .errors import InvalidExpression, OutOfRange, ParseFailure
from .evaluator import evaluate
from .history import HistoryEntry, HistoryStore
from .scheduler import TimerScheduler
from .scientific import AngleMode, format_number, parse_float
from .settings import DEFAULTS, THEMES, MemorySettingsStore

ERROR_TEXT = "Error"
ERROR_RESET_MS = 1000
OPERATORS = ("+", "-", "*", "/")
PARENS = ("(", ")")
DECIMAL_KEYS = set("0123456789.")


class Mode(Enum):
    STANDARD = "standard"
    SCIENTIFIC = "scientific"
    PROGRAMMER = "programmer"
    DATE = "date"


@dataclass
class CalculatorState:
    display: str = "0"
    expression: str = ""
    mode: Mode = Mode.STANDARD
    angle_mode: AngleMode = AngleMode.DEG
    number_base: NumberBase = NumberBase.DEC


def _event(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            finally:
                self._changed()
    return wrapper


class Calculator:
    def __init__(self, store=None, scheduler=None, on_change=None, today=None):
        """
        store     -- persistence port with load()/save(settings); in-memory by default
        scheduler -- object with after(ms, callback)/after_cancel(id), e.g. a Tk root
        on_change -- called with the calculator after every state change
        today     -- callable returning the current date, used by age calculation
        """
        self.logger = logging.getLogger(__name__)
        self.store = store if store is not None else MemorySettingsStore()
        self.scheduler = scheduler if scheduler is not None else TimerScheduler()
        self.on_change = on_change
        self.today = today

        self.state = CalculatorState()
        settings = self.store.load()
        self.theme = settings.get("theme", DEFAULTS["theme"])
        if self.theme not in THEMES: self.theme = DEFAULTS["theme"]
        self.history = HistoryStore.from_list(settings.get("history"))
        self.show_history = False

        self.start_date = ""
        self.end_date = ""
        self.birth_date = ""

        self._pending_bitwise = None # (left operand, "AND"|"OR"|"XOR")
        self._epoch = 0
        self._reset_id = None
        self._lock = threading.RLock()

    # --- read side ---------------------------------------------------------

    @property
    def display(self): return self.state.display

    @property
    def expression(self): return self.state.expression

    @property
    def mode(self): return self.state.mode

    @property
    def epoch(self): return self._epoch

    def base_readouts(self):
        """The display rendered in every base, for the programmer panel."""
        if self.state.display == ERROR_TEXT:
            return {base.name: ERROR_TEXT for base in NumberBase}
        return {base.name: convert(self.state.display, self.state.number_base, base) for base in NumberBase}

    # --- event plumbing ----------------------------------------------------

    def _accept(self):
        """Mark the running event as accepted: supersede any pending error reset."""
        self._epoch += 1
        if self._reset_id is not None:
            self.scheduler.after_cancel(self._reset_id)
            self._reset_id = None
        if self.state.display == ERROR_TEXT:
            self.state.display = "0"

    def _changed(self):
        if self.on_change: self.on_change(self)

    def _fail(self, error):
        self.logger.warning(f"Calculation failed ({type(error).__name__}): {error}")
        self.state.display = ERROR_TEXT
        epoch = self._epoch
        self._reset_id = self.scheduler.after(ERROR_RESET_MS, lambda: self._reset_after_error(epoch))

    def _reset_after_error(self, epoch):
        with self._lock:
            if epoch != self._epoch or self.state.display != ERROR_TEXT:
                self.logger.debug(f"Skipping stale error reset (epoch {epoch}, now {self._epoch})")
                return
            self._reset_id = None
            self.state.display = "0"
            self._changed()

    def _save(self):
        self.store.save({"theme": self.theme, "history": self.history.to_list()})

    def _ignored(self, event, reason):
        self.logger.debug(f"Ignored {event}: {reason}")

    def close(self):
        if self._reset_id is not None:
            self.scheduler.after_cancel(self._reset_id)
            self._reset_id = None

    # --- entry -------------------------------------------------------------

    @_event
    def press_digit(self, digit):
        s = self.state
        if s.mode is Mode.PROGRAMMER:
            if not is_valid_digit(digit, s.number_base):
                return self._ignored(f"digit {digit!r}", f"not a {s.number_base.name} digit")
            digit = digit.upper()
        else:
            if len(digit) != 1 or digit not in DECIMAL_KEYS:
                return self._ignored(f"digit {digit!r}", "not a decimal digit")
            if digit == "." and s.display != ERROR_TEXT and "." in s.display:
                return self._ignored("'.'", "display already has a decimal point")
        self._accept()
        if digit == "." and s.display == "0":
            s.display = "0."; return
        s.display = digit if s.display == "0" else s.display + digit

    @_event
    def press_operator(self, op):
        s = self.state
        if op in PARENS:
            return self._append_paren(op)
        if op not in OPERATORS:
            raise ValueError(f"Unknown operator: {op!r}")
        if s.mode not in (Mode.STANDARD, Mode.SCIENTIFIC):
            return self._ignored(f"operator {op!r}", f"{s.mode.value} mode")
        self._accept()
        s.expression += s.display + op
        s.display = "0"

    @_event
    def press_paren(self, paren):
        if paren not in PARENS:
            raise ValueError(f"Not a parenthesis: {paren!r}")
        self._append_paren(paren)

    def _append_paren(self, paren):
        s = self.state
        if s.mode is not Mode.SCIENTIFIC:
            return self._ignored(f"parenthesis {paren!r}", f"{s.mode.value} mode")
        self._accept()
        s.display = paren if s.display == "0" else s.display + paren

    @_event
    def clear(self):
        self._accept()
        self.state.display = "0"
        self.state.expression = ""
        self._pending_bitwise = None

    @_event
    def backspace(self):
        self._accept()
        trimmed = self.state.display[:-1]
        self.state.display = trimmed if trimmed not in ("", "-") else "0"

    # --- evaluation --------------------------------------------------------

    @_event
    def equals(self):
        s = self.state
        if s.mode is Mode.DATE:
            return self._ignored("equals", "date mode")
        self._accept()
        full_expression = s.expression + s.display
        try:
            if s.mode is Mode.PROGRAMMER:
                value = parse_int(s.display, s.number_base)
                if self._pending_bitwise:
                    left, op = self._pending_bitwise
                    value = bitwise.apply_binary(op, left, value)
                result = str(value)
            else:
                result = format_number(evaluate(full_expression))
        except (InvalidExpression, ParseFailure) as e:
            return self._fail(e)

        self.logger.debug(f"{full_expression} = {result}")
        self.history.push(HistoryEntry.now(full_expression, result))
        s.display = result
        s.expression = ""
        self._pending_bitwise = None
        self._save()

    @_event
    def apply_function(self, name):
        s = self.state
        if name not in scientific.FUNCTIONS:
            raise ValueError(f"Unknown function: {name!r}")
        if s.mode is not Mode.SCIENTIFIC:
            return self._ignored(f"function {name}", f"{s.mode.value} mode")
        self._accept()
        x = parse_float(s.display)
        try:
            result = scientific.apply(name, x, s.angle_mode)
            if not math.isfinite(result):
                raise InvalidExpression(f"{name}({s.display}) is not a finite number")
        except (InvalidExpression, OutOfRange) as e:
            return self._fail(e)
        s.display = format_number(result)

    @_event
    def apply_bitwise(self, op):
        s = self.state
        if op not in bitwise.UNARY_OPS and op not in bitwise.BINARY_OPS:
            raise ValueError(f"Unknown bitwise operation: {op!r}")
        if s.mode is not Mode.PROGRAMMER:
            return self._ignored(f"bitwise {op}", f"{s.mode.value} mode")
        self._accept()
        try:
            value = parse_int(s.display, s.number_base)
        except ParseFailure as e:
            return self._fail(e)

        if op in bitwise.UNARY_OPS:
            result = bitwise.apply_unary(op, value)
            s.display = convert(str(result), NumberBase.DEC, s.number_base)
            return

        if self._pending_bitwise:
            left, pending_op = self._pending_bitwise
            value = bitwise.apply_binary(pending_op, left, value)
        self._pending_bitwise = (value, op)
        s.expression = f"{format_int(value, s.number_base)} {op} "
        s.display = "0"

    # --- modes -------------------------------------------------------------

    @_event
    def switch_mode(self, mode):
        mode = Mode(mode)
        self._accept()
        s = self.state
        s.mode = mode
        s.display = "0"
        s.expression = ""
        self._pending_bitwise = None
        self.logger.debug(f"Mode -> {mode.value}")

    @_event
    def toggle_angle_mode(self):
        s = self.state
        if s.mode is not Mode.SCIENTIFIC:
            return self._ignored("angle toggle", f"{s.mode.value} mode")
        self._accept()
        s.angle_mode = s.angle_mode.toggled()

    @_event
    def switch_base(self, base):
        base = base if isinstance(base, NumberBase) else NumberBase[base]
        s = self.state
        if s.mode is not Mode.PROGRAMMER:
            return self._ignored(f"base {base.name}", f"{s.mode.value} mode")
        self._accept()
        s.display = convert(s.display, s.number_base, base)
        s.number_base = base
        if self._pending_bitwise:
            left, op = self._pending_bitwise
            s.expression = f"{format_int(left, base)} {op} "

    # --- dates -------------------------------------------------------------

    def set_start_date(self, value): self.start_date = value or ""
    def set_end_date(self, value): self.end_date = value or ""
    def set_birth_date(self, value): self.birth_date = value or ""

    @_event
    def calculate_difference(self):
        if self.state.mode is not Mode.DATE:
            return self._ignored("date difference", f"{self.state.mode.value} mode")
        if not self.start_date or not self.end_date:
            return self._ignored("date difference", "both dates are required")
        self._accept()
        try:
            result = dates.difference(self.start_date, self.end_date)
        except InvalidExpression as e:
            return self._fail(e)
        self.state.display = str(result)

    @_event
    def calculate_age(self):
        if self.state.mode is not Mode.DATE:
            return self._ignored("age", f"{self.state.mode.value} mode")
        if not self.birth_date:
            return self._ignored("age", "no birth date")
        self._accept()
        try:
            result = dates.age(self.birth_date, self.today() if self.today else None)
        except InvalidExpression as e:
            return self._fail(e)
        self.state.display = str(result)

    # --- session -----------------------------------------------------------

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        self._save()
        self._changed()

    def toggle_history(self):
        self.show_history = not self.show_history
        self._changed()

    def clear_history(self):
        self.history.clear()
        self._save()
        self._changed()

    def copy_display(self):
        return self._copy(self.state.display)

    def copy_history_entry(self, index, part="result"):
        entry = self.history[index]
        text = entry.expression if part == "expression" else f"{entry.expression} = {entry.result}" if part == "line" else entry.result
        return self._copy(text)

    def _copy(self, text):
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            self.logger.error(f"Pyperclip error: {e}. Clipboard access might be unavailable.")
            return False
        self.logger.info(f"Copied to clipboard: {text[:70]}")
        return True
