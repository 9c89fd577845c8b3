"""Small general-purpose helpers for errors, intervals, collections and paths."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def join_errors(*args: BaseException | None) -> Exception | None:
    """Combine the messages of all non-None errors into one, or return None."""
    messages = [str(err) for err in args if err is not None]
    if not messages:
        return None
    return Exception(", ".join(messages))


def interval_intersection(a1: T, a2: T, b1: T, b2: T) -> tuple[T, T]:
    """Intersect the intervals [a1, a2] and [b1, b2].

    The bounds come back in the wrong order when the intervals are disjoint.
    """
    return max(a1, b1), min(a2, b2)


def array_to_map(items: Iterable[T], key_func: Callable[[T], K]) -> dict[K, T]:
    """Index ``items`` by ``key_func``; later items win on duplicate keys."""
    return {key_func(item): item for item in items}


def cast_array(items: Iterable[object], cls: type[T]) -> list[T]:
    """Return the items as a list, checking each is an instance of ``cls``."""
    result: list[T] = []
    for i, item in enumerate(items):
        if not isinstance(item, cls):
            raise TypeError(f"error casting item {i}")
        result.append(item)
    return result


def join_paths(path1: str, path2: str) -> str:
    """Join two path pieces, inserting "/" only if ``path1`` lacks one."""
    if path1.endswith("/"):
        return path1 + path2
    return path1 + "/" + path2