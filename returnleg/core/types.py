"""Core value types: UtcDatetime, FrozenMap, BusinessDayConvention."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal, final

from returnleg.core.result import Err, Ok

type BusinessDayConvention = Literal[
    "MOD_FOLLOWING", "FOLLOWING", "PRECEDING", "NONE",
]


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC timestamp, used to stamp error values."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def now() -> UtcDatetime:
        return UtcDatetime(value=datetime.now(tz=UTC))


@final
@dataclass(frozen=True, slots=True)
class FrozenMap[K, V]:
    """Immutable mapping stored as a key-sorted tuple of pairs.

    Holds market snapshots (date -> price) that cross the workflow
    boundary. Keys are sorted, so lookups bisect and serialization is
    deterministic.
    """

    _entries: tuple[tuple[K, V], ...]

    @staticmethod
    def create(items: dict[K, V] | Iterable[tuple[K, V]]) -> Ok[FrozenMap[K, V]] | Err[str]:
        """Duplicate keys: last value wins. Non-comparable keys: Err."""
        d = dict(items)
        try:
            entries = tuple(sorted(d.items(), key=lambda kv: kv[0]))
        except TypeError as e:
            return Err(f"FrozenMap keys must be comparable: {e}")
        return Ok(FrozenMap(_entries=entries))

    def get(self, key: K, default: V | None = None) -> V | None:
        i = bisect_left(self._entries, key, key=lambda kv: kv[0])
        if i < len(self._entries) and self._entries[i][0] == key:
            return self._entries[i][1]
        return default

    def __iter__(self) -> Iterator[K]:
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> tuple[tuple[K, V], ...]:
        return self._entries
