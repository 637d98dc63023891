"""
Failure models for the validation system.

This module defines the records produced when a rule is violated and the
ordered collection the graph validator accumulates them in.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Tuple, overload

DEFAULT_PATH_SEPARATOR = " -> "


@dataclass(frozen=True)
class FailureRecord:
    """
    A single rule violation.

    The message starts out as the violated rule's own message. Each time the
    record travels up one level of the object graph it is prefixed with the
    name of the property it was found under, so by the time it reaches the
    caller the message reads outermost property first.

    Attributes:
        message (str): Human-readable message, path prefixes included
        member_names (Tuple[str, ...]): Raw member names of the originating rule
        path (Tuple[str, ...]): Property names from the root to the failing node
    """

    message: str
    member_names: Tuple[str, ...] = ()
    path: Tuple[str, ...] = field(default=())

    @property
    def member_path(self) -> Tuple[str, ...]:
        """Full chain of names from the root down to the violated member."""
        return self.path + self.member_names

    def prefixed(self, name: str, separator: str = DEFAULT_PATH_SEPARATOR) -> "FailureRecord":
        """
        Return a copy of this record nested one level deeper under ``name``.

        The first prefix quotes both the property and the rule message
        (``'Child' -> 'The Name field is required.'``); later prefixes only
        quote the property they add.
        """
        if self.path:
            message = f"'{name}'{separator}{self.message}"
        else:
            message = f"'{name}'{separator}'{self.message}'"
        return replace(self, message=message, path=(name,) + self.path)


class FailureSet:
    """
    Ordered collection of failure records.

    Records keep the order in which they were discovered: depth first, and in
    property declaration order within each object.
    """

    def __init__(self, records: Iterable[FailureRecord] = ()):
        self._records: List[FailureRecord] = list(records)

    def add(self, record: FailureRecord) -> None:
        """Append a single record."""
        self._records.append(record)

    def extend(self, records: Iterable[FailureRecord]) -> None:
        """Append records, preserving their order."""
        self._records.extend(records)

    def prefixed(self, name: str, separator: str = DEFAULT_PATH_SEPARATOR) -> "FailureSet":
        """Return a new set with every record nested under ``name``."""
        return FailureSet(record.prefixed(name, separator) for record in self._records)

    @property
    def messages(self) -> List[str]:
        return [record.message for record in self._records]

    @property
    def member_names(self) -> List[str]:
        """Member names of every record, flattened in order."""
        return [name for record in self._records for name in record.member_names]

    def __iter__(self) -> Iterator[FailureRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    @overload
    def __getitem__(self, index: int) -> FailureRecord: ...

    @overload
    def __getitem__(self, index: slice) -> List[FailureRecord]: ...

    def __getitem__(self, index):
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FailureSet):
            return self._records == other._records
        if isinstance(other, list):
            return self._records == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"FailureSet({self._records!r})"
