"""Collection helpers."""

from __future__ import annotations

from typing import Hashable
from typing import Iterable
from typing import Sequence
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


def in_array(subset: Sequence[T], candidates: Iterable[T], check_all: bool) -> bool:
    """Test whether ``subset`` is contained in ``candidates``.

    Args:
        subset: Values to look for.
        candidates: Collection to look in.
        check_all: When True every value of ``subset`` must appear in
            ``candidates``; otherwise a single shared value is enough.

    Returns:
        Whether the subset matched. An empty subset always matches.

    Examples:
        >>> in_array(["a", "b"], ["a"], check_all=True)
        False
        >>> in_array(["a", "b"], ["a"], check_all=False)
        True
    """
    if not subset:
        return True
    pool = set(candidates)
    if check_all:
        return all(value in pool for value in subset)
    return any(value in pool for value in subset)
