"""
Dense counterpart of SparseNDArray. Every element is stored, in row-major
order, in a flat numpy float64 buffer exposed as `elements`, so element i of
the buffer is the element at flat offset i.
"""

import numpy as np

from ..errors import OutOfRange
from ..index_space import IndexSpace, _is_int

_datatype = np.float64


class DenseNDArray:
    """
    A dense N-dimensional array of float64 values.

    Positional access by flat offset is a plain lookup into `elements`;
    access by coordinate goes through the array's IndexSpace.
    """

    def __init__(self, shape, elements=None):
        self._space = IndexSpace(shape)
        if elements is None:
            self.elements = np.zeros(self._space.size, dtype=_datatype)
        else:
            elements = np.array(elements, dtype=_datatype).reshape(-1)
            assert elements.size == self._space.size
            self.elements = elements

    @staticmethod
    def from_numpy(other):
        """Copy a numpy array (or nested sequence) into a new DenseNDArray"""
        other = np.asarray(other, dtype=_datatype)
        return DenseNDArray(other.shape, other)

    @property
    def space(self):
        return self._space

    @property
    def shape(self):
        return self._space.shape

    @property
    def ndim(self):
        return self._space.ndim

    @property
    def size(self):
        return self._space.size

    def __repr__(self) -> str:
        return "DenseNDArray(" + self.numpy().__str__() + ")"

    def __str__(self) -> str:
        return self.numpy().__str__()

    ############################
    ### GET AND SET ELEMENTS ###
    ############################
    def index_1d(self, *coord):
        return self._space.index_1d(*coord)

    def index_nd(self, offset):
        return self._space.index_nd(offset)

    def get(self, *coord):
        return float(self.elements[self._space.index_1d(*coord)])

    def set(self, value, *coord):
        self.elements[self._space.index_1d(*coord)] = value

    def __getitem__(self, coord):
        if not isinstance(coord, tuple):
            coord = (coord,)
        return self.get(*coord)

    def __setitem__(self, coord, value):
        if not isinstance(coord, tuple):
            coord = (coord,)
        self.set(value, *coord)

    ##################
    ### CONVERSION ###
    ##################
    def numpy(self):
        """Copy out as a numpy array of this array's shape"""
        return self.elements.reshape(self.shape).copy()

    def copy(self):
        return DenseNDArray(self.shape, self.elements.copy())

    def to_sparse(self, device=None):
        """Convert to a SparseNDArray, storing only the non-zero elements"""
        from ..backend_sparse import SparseNDArray
        return SparseNDArray.from_dense(self, device=device)

    ##################
    ### OPERATIONS ###
    ##################
    def sum(self):
        return float(self.elements.sum())

    def subset(self, start, end):
        """
        Extract the hyper-rectangle [start, end) into a new, independent array.

        Args:
            start (sequence of int): inclusive lower corner.
            end (sequence of int): exclusive upper corner.

        Raises:
            OutOfRange: If either corner has the wrong arity, or
                start[d] < 0, end[d] > shape[d] or start[d] > end[d].
            InvalidShape: If the rectangle is empty along some dimension.

        Returns:
            DenseNDArray: Array of shape end - start in row-major order.
        """
        start, end = tuple(start), tuple(end)
        if len(start) != self.ndim or len(end) != self.ndim:
            raise OutOfRange(
                f"subset corners {start}, {end} must both have {self.ndim} components"
            )
        for s, e, dim in zip(start, end, self.shape):
            if not _is_int(s) or not _is_int(e):
                raise OutOfRange(f"subset corners {start}, {end} must contain integers")
            if s < 0 or e > dim or s > e:
                raise OutOfRange(
                    f"subset [{start}, {end}) out of range for shape {self.shape}"
                )

        new_shape = tuple(e - s for s, e in zip(start, end))
        idxs = tuple(slice(s, e) for s, e in zip(start, end))
        # the constructor rejects zero-width extents before anything is copied
        out = DenseNDArray(new_shape)
        out.elements[:] = self.elements.reshape(self.shape)[idxs].reshape(-1)
        return out


def zeros_dense(*shape):
    """Create a zero-filled DenseNDArray"""
    return DenseNDArray(shape)


def array(a):
    """Convenience method for creating dense arrays"""
    return DenseNDArray.from_numpy(a)
