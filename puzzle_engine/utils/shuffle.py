"""Unbiased Fisher-Yates shuffles that never touch their input."""

import random
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def shuffle_array(values: Sequence[T]) -> List[T]:
    """Return a uniformly shuffled copy of ``values``."""
    shuffled = list(values)
    for i in range(len(shuffled) - 1, 0, -1):
        j = random.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffle_arrays_in_sync(*arrays: Sequence) -> List[list]:
    """Shuffle parallel arrays with one shared permutation.

    Element ``i`` of every returned list comes from the same original index.
    Raises ValueError when the arrays differ in length.
    """
    if not arrays:
        return []

    length = len(arrays[0])
    if any(len(array) != length for array in arrays):
        raise ValueError("All arrays must have the same length")

    order = shuffle_array(range(length))
    return [[array[index] for index in order] for array in arrays]
