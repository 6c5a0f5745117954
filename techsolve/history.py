import time
import logging
from collections import deque
from dataclasses import dataclass, asdict

HISTORY_LIMIT = 10


@dataclass(frozen=True)
class HistoryEntry:
    expression: str
    result: str
    timestamp: int # ms since the epoch

    @classmethod
    def now(cls, expression, result):
        return cls(expression=expression, result=str(result), timestamp=int(time.time() * 1000))


class HistoryStore:
    """Recent results, newest first. Pushing past the limit evicts the oldest entry."""

    def __init__(self, entries=(), maxlen=HISTORY_LIMIT):
        self.logger = logging.getLogger(__name__)
        self._entries = deque(entries, maxlen=maxlen)

    @property
    def maxlen(self):
        return self._entries.maxlen

    def push(self, entry: HistoryEntry):
        self._entries.appendleft(entry)
        self.logger.debug(f"History += {entry.expression} = {entry.result} ({len(self._entries)} entries)")

    def clear(self):
        self._entries.clear()
        self.logger.info("Calculation history cleared.")

    def __len__(self): return len(self._entries)
    def __iter__(self): return iter(self._entries)
    def __getitem__(self, index): return self._entries[index]

    def to_list(self):
        return [asdict(entry) for entry in self._entries]

    @classmethod
    def from_list(cls, items, maxlen=HISTORY_LIMIT):
        store = cls(maxlen=maxlen)
        for item in items or []:
            try:
                entry = HistoryEntry(expression=str(item["expression"]), result=str(item["result"]),
                                     timestamp=int(item["timestamp"]))
            except (KeyError, TypeError, ValueError) as e:
                store.logger.warning(f"Skipping malformed history record {item!r}: {e}")
                continue
            if len(store) < store.maxlen:
                store._entries.append(entry) # stored newest first already
        return store
