"""Thread-safe, append-only bucket of statistics.

A bucket is the output of one collection cycle. The cycle creates it, adds
statistics while collecting (possibly from a probe's own completion thread),
then hands it to the reporters, which only read it.
"""

from collections.abc import Iterator

from ispmonitor.core.locks import ReadWriteLock
from ispmonitor.core.models import Statistic, is_statistic


class StatisticsBucket:
    """Ordered collection of statistics.

    ``add`` takes the write lock; ``snapshot`` takes the read lock and
    returns a copy, so a snapshot never reflects later additions.
    """

    def __init__(self) -> None:
        self._statistics: list[Statistic] = []
        self._lock = ReadWriteLock()

    def add(self, statistic: Statistic) -> None:
        """Append a statistic.

        Raises:
            TypeError: If ``statistic`` is neither a Metric nor an Event.
        """
        if not is_statistic(statistic):
            raise TypeError(
                f"expected a Metric or Event, got {type(statistic).__name__}"
            )
        with self._lock.write_locked():
            self._statistics.append(statistic)

    def snapshot(self) -> list[Statistic]:
        """Return the statistics added so far, in append order."""
        with self._lock.read_locked():
            return list(self._statistics)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._statistics)

    def __iter__(self) -> Iterator[Statistic]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"StatisticsBucket(size={len(self)})"
