"""
Index bookkeeping shared by the sparse and dense arrays.

An IndexSpace is nothing more than a validated shape. It converts between a
coordinate (one integer per dimension) and the flat row-major offset used as
the storage key, with the last dimension varying fastest.
"""

from math import prod
from numbers import Integral

from .errors import InvalidShape, OutOfRange


def compact_strides(shape: tuple[int, ...]) -> tuple[int, ...]:
    """Utility function to compute compact (row-major) strides"""
    stride = 1
    res = []
    for i in range(1, len(shape) + 1):
        res.append(stride)
        stride *= shape[-i]
    return tuple(res[::-1])


def _is_int(x) -> bool:
    return isinstance(x, Integral) and not isinstance(x, bool)


class IndexSpace:
    """
    The bijection between coordinates and flat offsets for one shape.

    IndexSpace is immutable and compares equal by shape, so two arrays can be
    checked for compatibility with `a.space == b.space`.
    """

    __slots__ = ("shape", "strides", "ndim", "size")

    def __init__(self, shape):
        shape = tuple(shape)
        if len(shape) == 0:
            raise InvalidShape("shape must have at least one dimension")
        for s in shape:
            if not _is_int(s) or s <= 0:
                raise InvalidShape(f"invalid extent {s!r} in shape {shape}")

        shape = tuple(int(s) for s in shape)
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "strides", compact_strides(shape))
        object.__setattr__(self, "ndim", len(shape))
        object.__setattr__(self, "size", prod(shape))

    def __setattr__(self, name, value):
        raise AttributeError("IndexSpace is immutable")

    def __eq__(self, other):
        if not isinstance(other, IndexSpace):
            return NotImplemented
        return self.shape == other.shape

    def __hash__(self):
        return hash(self.shape)

    def __repr__(self):
        return f"IndexSpace({self.shape})"

    def index_1d(self, *coord) -> int:
        """
        Flat row-major offset of a coordinate.

        Raises:
            OutOfRange: If the arity does not match the shape, or any
                component is negative or not below its extent.
        """
        if len(coord) != self.ndim:
            raise OutOfRange(
                f"coordinate {coord} has {len(coord)} components, shape {self.shape} needs {self.ndim}"
            )
        pos = 0
        for ind, dim, stride in zip(coord, self.shape, self.strides):
            if not _is_int(ind):
                raise OutOfRange(f"coordinate {coord} must contain integers")
            if ind < 0 or ind >= dim:
                raise OutOfRange(f"coordinate {coord} out of range for shape {self.shape}")
            pos += int(ind) * stride
        return pos

    def index_nd(self, offset: int) -> tuple[int, ...]:
        """
        Inverse of index_1d: recover the coordinate of a flat offset by
        successive division, innermost dimension first.
        """
        self.check_offset(offset)
        offset = int(offset)
        idx = [0] * self.ndim
        for p in range(self.ndim - 1, -1, -1):
            idx[p] = offset % self.shape[p]
            offset //= self.shape[p]
        return tuple(idx)

    def check_offset(self, offset: int) -> None:
        if not _is_int(offset) or offset < 0 or offset >= self.size:
            raise OutOfRange(f"offset {offset!r} out of range for shape {self.shape}")

    def indices(self):
        """Every coordinate of the space, in row-major order."""
        for i in range(self.size):
            yield self.index_nd(i)
