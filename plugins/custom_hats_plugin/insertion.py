"""
plugins/custom_hats_plugin/insertion.py
Splicing hats into host hat lists.

Host lists are index-aligned (option N in the catalog is renderer N on every rig),
so custom hats always go in at the same fixed index on every list. Everything at
or after that index is where earlier custom hats would already be, which is what
`tail_has_hats` looks at to keep merges idempotent.
"""
from typing import Collection, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class InsertIndexOutOfRange(IndexError):
    """The insert index doesn't fit the target list. A configuration error, not a timing one."""

    def __init__(self, insert_index: int, length: int):
        super().__init__(f"Insert index ({insert_index}) is out of bounds for a list of length {length}.")
        self.insert_index = insert_index
        self.length = length


def array_insert(array: Optional[Sequence[T]], insert_index: int, to_add: Optional[Sequence[T]]) -> Optional[List[T]]:
    """
    Returns a new list with `to_add` spliced in at `insert_index`.

    - Nothing to add: `array` is returned as-is.
    - `array` None or empty: a new list holding just `to_add` (the index is irrelevant).
    - Otherwise head and tail keep their order: array[:i] + to_add + array[i:].

    Inputs are never mutated; the caller writes the result back.

    Raises:
        InsertIndexOutOfRange: if insert_index < 0 or > len(array).
    """
    if not to_add:
        return array  # type: ignore[return-value]

    if not array:
        return list(to_add)

    if insert_index < 0 or insert_index > len(array):
        raise InsertIndexOutOfRange(insert_index, len(array))

    if insert_index == len(array):
        # append
        return list(array) + list(to_add)

    return list(array[:insert_index]) + list(to_add) + list(array[insert_index:])


def tail_has_hats(entries: Optional[Sequence], insert_index: int, hat_names: Collection[str]) -> bool:
    """True if any entry from insert_index onward is named after a known hat."""
    if not entries:
        return False
    return any(getattr(entry, "name", None) in hat_names for entry in entries[max(insert_index, 0):])
