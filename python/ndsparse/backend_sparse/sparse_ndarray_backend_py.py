from typing import Iterable, Iterator

import numpy as np

_datatype = np.float64


####################
### SPARSE ARRAY ###
####################
class SparseArray:
    """
    Storage handle: a dict from flat offset to value. Offsets missing from
    the dict hold zero. Bounds are checked by the caller, which owns the
    shape; the handle only knows how many offsets exist.
    """

    def __init__(self, size: int, values: dict = None):
        self.size = size
        self.values = {} if values is None else values

    @property
    def nnz(self):
        return len(self.values)


#################
### UTILITIES ###
#################
def nnz(a: SparseArray) -> int:
    return a.nnz


def copy(a: SparseArray) -> SparseArray:
    return SparseArray(a.size, dict(a.values))


def items(a: SparseArray) -> Iterator[tuple[int, float]]:
    for offset in sorted(a.values):
        yield offset, a.values[offset]


def from_items(size: int, pairs: Iterable[tuple[int, float]]) -> SparseArray:
    out = SparseArray(size)
    for offset, val in pairs:
        if val != 0:
            out.values[int(offset)] = float(val)
    return out


def from_numpy(flat: np.ndarray) -> SparseArray:
    flat = np.asarray(flat, dtype=_datatype).reshape(-1)
    (offsets,) = np.nonzero(flat)
    return SparseArray(flat.size, {int(i): float(flat[i]) for i in offsets})


def to_numpy(a: SparseArray) -> np.ndarray:
    out = np.zeros(a.size, dtype=_datatype)
    for offset, val in a.values.items():
        out[offset] = val
    return out


######################
### ELEMENT ACCESS ###
######################
def get(a: SparseArray, offset: int) -> float:
    return a.values.get(offset, 0.0)


def set_item(a: SparseArray, offset: int, val: float):
    # zeros are never stored
    if val == 0:
        a.values.pop(offset, None)
    else:
        a.values[offset] = float(val)


def add_item(a: SparseArray, offset: int, val: float):
    set_item(a, offset, a.values.get(offset, 0.0) + val)


#################
### WHOLE OPS ###
#################
def scale(a: SparseArray, factor: float):
    if factor == 0:
        a.values.clear()
        return
    scaled = {offset: val * factor for offset, val in a.values.items()}
    # products may underflow to zero
    a.values = {offset: val for offset, val in scaled.items() if val != 0}


def total(a: SparseArray) -> float:
    return float(sum(a.values.values()))


#################
### EWISE OPS ###
#################
def ewise_add_inplace(a: SparseArray, pairs: Iterable[tuple[int, float]]):
    if isinstance(pairs, SparseArray):
        # snapshot, a and pairs may be the same handle
        pairs = list(pairs.values.items())
    for offset, val in pairs:
        add_item(a, offset, val)


def ewise_mul(a: SparseArray, b: SparseArray) -> SparseArray:
    assert a.size == b.size
    # only offsets stored in both operands can be non-zero
    small, large = (a, b) if a.nnz <= b.nnz else (b, a)
    out = SparseArray(a.size)
    for offset, val in small.values.items():
        other = large.values.get(offset)
        if other is not None:
            set_item(out, offset, val * other)
    return out
