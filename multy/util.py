"""Small collection helpers shared across the resource code."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, MutableSequence
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
V2 = TypeVar("V2")


def sort_resources_by_id(
    resources: MutableSequence[T], id_getter: Callable[[T], str]
) -> MutableSequence[T]:
    """Sort ``resources`` in place by the id returned by ``id_getter`` and return them."""
    resources.sort(key=id_getter)
    return resources


def get_sorted_map_values(mapping: Mapping[str, V]) -> list[V]:
    """Return the values of ``mapping`` ordered by their keys."""
    return [mapping[key] for key in sorted(mapping)]


def max_by(mapping: Mapping[K, V], selector: Callable[[V], Any]) -> K | None:
    """Return the key whose value has the largest selected value.

    Ties are broken in favour of the largest key. An empty mapping gives None.
    """
    if not mapping:
        return None
    return max(mapping, key=lambda key: (selector(mapping[key]), key))


def contains(items: Iterable[T], item: T) -> bool:
    """Tell whether ``item`` is one of ``items``."""
    return any(candidate == item for candidate in items)


def sorted_keys(mapping: Mapping[K, Any]) -> list[K]:
    """Return the keys of ``mapping`` in ascending order."""
    return sorted(mapping)


def map_values(mapping: Mapping[K, V], mapper: Callable[[V], V2]) -> dict[K, V2]:
    """Return a new mapping with ``mapper`` applied to every value."""
    return {key: mapper(value) for key, value in mapping.items()}


def map_slice_values(values: Iterable[V], mapper: Callable[[V], V2]) -> list[V2]:
    """Apply ``mapper`` to each value; an exception from ``mapper`` stops the mapping."""
    return [mapper(value) for value in values]


def flat_map_slice_values(
    values: Iterable[V], mapper: Callable[[V], Iterable[V2]]
) -> list[V2]:
    """Apply ``mapper`` to each value and concatenate the results."""
    return [item for value in values for item in mapper(value)]