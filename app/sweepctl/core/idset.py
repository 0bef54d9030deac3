"""Numeric id sets for exemption lists.

An IdSet is an immutable union of discrete ids and inclusive ranges. It is
built from the loosely-typed values found in manifests: comma-separated
strings such as ``"10,20..25,30"``, plain integers, ``range`` objects, or
sequences mixing all of those.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from sweepctl.core.errors import InvalidIdSpecError

_INT_RE = re.compile(r"\d+", re.ASCII)
_RANGE_RE = re.compile(r"(\d+)\s*\.\.\s*(\d+)", re.ASCII)


@dataclass(frozen=True, slots=True)
class IdSet:
    """Immutable set of non-negative ids.

    Attributes:
        values: Discrete ids.
        ranges: Inclusive ``(lo, hi)`` ranges, sorted by lower bound.
    """

    values: frozenset[int] = field(default_factory=frozenset)
    ranges: tuple[tuple[int, int], ...] = ()

    def __post_init__(self) -> None:
        """Validate ids and range bounds after initialization."""
        for value in self.values:
            if value < 0:
                msg = f"Ids must be non-negative, got {value}"
                raise InvalidIdSpecError(msg)
        for lo, hi in self.ranges:
            if lo < 0:
                msg = f"Ids must be non-negative, got range {lo}..{hi}"
                raise InvalidIdSpecError(msg)
            if lo > hi:
                msg = f"Inverted id range {lo}..{hi}"
                raise InvalidIdSpecError(msg)

    def contains(self, ident: int) -> bool:
        """Check whether an id is a discrete member or inside any range."""
        if ident in self.values:
            return True
        return any(lo <= ident <= hi for lo, hi in self.ranges)

    def __contains__(self, ident: object) -> bool:
        return isinstance(ident, int) and self.contains(ident)

    def is_empty(self) -> bool:
        """Check if no ids and no ranges were supplied."""
        return not self.values and not self.ranges

    @property
    def lowest(self) -> int | None:
        """Smallest id reachable from the set, or None if empty."""
        candidates = [*self.values, *(lo for lo, _hi in self.ranges)]
        return min(candidates) if candidates else None

    def __str__(self) -> str:
        items: list[tuple[int, str]] = [(v, str(v)) for v in self.values]
        items.extend((lo, f"{lo}..{hi}") for lo, hi in self.ranges)
        return ",".join(text for _start, text in sorted(items))


# Accepted input shapes for parse_id_set()
IdSpec = IdSet | str | int | range | list[object] | tuple[object, ...] | None


def parse_id_set(spec: IdSpec) -> IdSet:
    """Normalize a manifest id specification into an IdSet.

    Accepts a comma-separated string of ids and ``lo..hi`` ranges, a single
    integer, a ``range`` with step 1, an existing IdSet, or a list/tuple of
    any of those. Nested lists are flattened one level only.

    Args:
        spec: The raw id specification. None and "" give an empty set.

    Returns:
        The parsed IdSet.

    Raises:
        InvalidIdSpecError: If any token is not an id or a well-formed range.
    """
    if spec is None:
        return IdSet()
    if isinstance(spec, IdSet):
        return spec

    values: set[int] = set()
    ranges: set[tuple[int, int]] = set()

    for item in _flatten(spec):
        if isinstance(item, IdSet):
            values.update(item.values)
            ranges.update(item.ranges)
            continue

        lo, hi = _parse_item(item)
        if lo == hi:
            values.add(lo)
        else:
            ranges.add((lo, hi))

    return IdSet(values=frozenset(values), ranges=tuple(sorted(ranges)))


def _flatten(spec: object) -> Iterator[object]:
    """Yield scalar items from a spec, flattening one level of nesting."""
    if isinstance(spec, (list, tuple)):
        for item in spec:
            if isinstance(item, (list, tuple)):
                for sub in item:
                    if isinstance(sub, (list, tuple)):
                        msg = f"Id lists may only be nested one level deep: {spec!r}"
                        raise InvalidIdSpecError(msg)
                    yield from _split(sub)
            else:
                yield from _split(item)
    else:
        yield from _split(spec)


def _split(item: object) -> Iterator[object]:
    """Split comma-separated strings into tokens; pass other items through."""
    if not isinstance(item, str):
        yield item
        return

    if not item.strip():
        return

    for token in item.split(","):
        token = token.strip()
        if not token:
            msg = f"Empty id in {item!r}"
            raise InvalidIdSpecError(msg)
        yield token


def _parse_item(item: object) -> tuple[int, int]:
    """Parse one scalar item into an inclusive (lo, hi) pair."""
    # bool is an int subclass but never a meaningful id
    if isinstance(item, bool):
        msg = f"Invalid id {item!r}"
        raise InvalidIdSpecError(msg)

    if isinstance(item, int):
        if item < 0:
            msg = f"Ids must be non-negative, got {item}"
            raise InvalidIdSpecError(msg)
        return item, item

    if isinstance(item, range):
        if item.step != 1:
            msg = f"Id ranges must have step 1, got {item!r}"
            raise InvalidIdSpecError(msg)
        if item.start < 0 or len(item) == 0:
            msg = f"Invalid id range {item!r}"
            raise InvalidIdSpecError(msg)
        return item.start, item.stop - 1

    if isinstance(item, str):
        if _INT_RE.fullmatch(item):
            value = int(item)
            return value, value

        match = _RANGE_RE.fullmatch(item)
        if match:
            lo, hi = int(match.group(1)), int(match.group(2))
            if lo > hi:
                msg = f"Inverted id range {item!r}"
                raise InvalidIdSpecError(msg)
            return lo, hi

    msg = f"Invalid id or range {item!r}"
    raise InvalidIdSpecError(msg)
