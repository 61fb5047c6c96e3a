from typing import Iterable, Iterator

import numpy as np

_datatype = np.float64
_indextype = np.int64


####################
### SPARSE ARRAY ###
####################
class SparseArray:
    """
    Storage handle: parallel numpy arrays of strictly increasing flat offsets
    and their (non-zero) values. Lookups go through np.searchsorted.
    """

    def __init__(self,
                 size: int,
                 offsets: np.ndarray = None,
                 values: np.ndarray = None):
        self.size = size

        if offsets is None:
            self.offsets = np.empty((0,), dtype=_indextype)
        else:
            self.offsets = offsets

        if values is None:
            self.values = np.empty((0,), dtype=_datatype)
        else:
            self.values = values

        SparseArray.check(self.offsets, self.values)

    @property
    def nnz(self):
        return self.values.size

    @staticmethod
    def check(offsets, values):
        assert offsets.dtype == _indextype
        assert values.dtype == _datatype
        assert offsets.ndim == 1 and values.ndim == 1
        assert offsets.shape[0] == values.shape[0]


def _find(a: SparseArray, offset: int):
    """Position of offset in a.offsets and whether it is actually stored there"""
    pos = int(np.searchsorted(a.offsets, offset))
    return pos, pos < a.offsets.size and a.offsets[pos] == offset


def _sparsify(offsets: np.ndarray, values: np.ndarray):
    mask = values != 0
    return offsets[mask], values[mask]


#################
### UTILITIES ###
#################
def nnz(a: SparseArray) -> int:
    return a.nnz


def copy(a: SparseArray) -> SparseArray:
    return SparseArray(a.size, a.offsets.copy(), a.values.copy())


def items(a: SparseArray) -> Iterator[tuple[int, float]]:
    return zip(a.offsets.tolist(), a.values.tolist())


def from_items(size: int, pairs: Iterable[tuple[int, float]]) -> SparseArray:
    pairs = sorted((int(o), float(v)) for o, v in pairs)
    if not pairs:
        return SparseArray(size)
    offsets = np.array([o for o, _ in pairs], dtype=_indextype)
    values = np.array([v for _, v in pairs], dtype=_datatype)
    return SparseArray(size, *_sparsify(offsets, values))


def from_numpy(flat: np.ndarray) -> SparseArray:
    flat = np.asarray(flat, dtype=_datatype).reshape(-1)
    (offsets,) = np.nonzero(flat)
    return SparseArray(flat.size, offsets.astype(_indextype), flat[offsets].copy())


def to_numpy(a: SparseArray) -> np.ndarray:
    out = np.zeros(a.size, dtype=_datatype)
    out[a.offsets] = a.values
    return out


######################
### ELEMENT ACCESS ###
######################
def get(a: SparseArray, offset: int) -> float:
    pos, found = _find(a, offset)
    return float(a.values[pos]) if found else 0.0


def set_item(a: SparseArray, offset: int, val: float):
    pos, found = _find(a, offset)
    if found:
        if val == 0:
            a.offsets = np.delete(a.offsets, pos)
            a.values = np.delete(a.values, pos)
        else:
            a.values[pos] = val
    elif val != 0:
        a.offsets = np.insert(a.offsets, pos, offset)
        a.values = np.insert(a.values, pos, val)


def add_item(a: SparseArray, offset: int, val: float):
    set_item(a, offset, get(a, offset) + val)


#################
### WHOLE OPS ###
#################
def scale(a: SparseArray, factor: float):
    a.values = a.values * factor
    a.offsets, a.values = _sparsify(a.offsets, a.values)


def total(a: SparseArray) -> float:
    return float(a.values.sum())


#################
### EWISE OPS ###
#################
def ewise_add_inplace(a: SparseArray, pairs: Iterable[tuple[int, float]]):
    other = pairs if isinstance(pairs, SparseArray) else from_items(a.size, pairs)

    offsets = np.concatenate([a.offsets, other.offsets])
    values = np.concatenate([a.values, other.values])
    unique, inverse = np.unique(offsets, return_inverse=True)
    summed = np.zeros(unique.shape, dtype=_datatype)
    np.add.at(summed, inverse.reshape(-1), values)

    a.offsets, a.values = _sparsify(unique.astype(_indextype), summed)


def ewise_mul(a: SparseArray, b: SparseArray) -> SparseArray:
    assert a.size == b.size
    # only offsets stored in both operands can be non-zero
    common, a_idx, b_idx = np.intersect1d(
        a.offsets, b.offsets, assume_unique=True, return_indices=True
    )
    values = a.values[a_idx] * b.values[b_idx]
    return SparseArray(a.size, *_sparsify(common.astype(_indextype), values))
