"""Bounded history of emitted events.

Two window policies share one interface: append, prune, clear, snapshot.
Records are kept in arrival order and evicted oldest-first.
"""

from collections import deque


class CountWindow:
    """Keeps the `max_count` most recent records."""

    def __init__(self, max_count):
        if max_count < 1:
            raise ValueError(f"max_count must be at least 1, got {max_count}")
        self.max_count = int(max_count)
        self._records = deque(maxlen=self.max_count)

    def append(self, record):
        self._records.append(record)

    def prune(self, now):
        """Nothing to do: the count cap is enforced on append."""

    def clear(self):
        self._records.clear()

    def snapshot(self):
        """Records in arrival order, as an immutable tuple."""
        return tuple(self._records)

    def __len__(self):
        return len(self._records)


class TimeWindow:
    """Keeps records whose `time` is at least `now - span`.

    Records must be appended with non-decreasing times, so expired records
    always sit at the old end.
    """

    def __init__(self, span):
        if span <= 0:
            raise ValueError(f"span must be positive, got {span}")
        self.span = float(span)
        self._records = deque()

    def append(self, record):
        if self._records and record.time < self._records[-1].time:
            raise ValueError(
                f"Out-of-order record at t={record.time}, "
                f"last was t={self._records[-1].time}"
            )
        self._records.append(record)

    def prune(self, now):
        cutoff = now - self.span
        while self._records and self._records[0].time < cutoff:
            self._records.popleft()

    def clear(self):
        self._records.clear()

    def snapshot(self):
        """Records in arrival order, as an immutable tuple."""
        return tuple(self._records)

    def __len__(self):
        return len(self._records)
