"""
This file is the main entry point for sparse arrays. We define a
SparseBackendDevice class that wraps the storage backend modules (a plain
python dict keyed by flat offset, or sorted numpy offset/value arrays).
SparseNDArray owns the shape and does all coordinate bookkeeping through its
IndexSpace; the backend handle only ever sees flat offsets.
"""

import logging

import numpy as np

from . import sparse_ndarray_backend_py
from . import sparse_ndarray_backend_np
from .. import backend_selection
from ..backend_dense import DenseNDArray
from ..errors import ShapeMismatch
from ..index_space import IndexSpace

logger = logging.getLogger(__name__)


class SparseBackendDevice:
    """
    SparseBackendDevice wraps an underlying storage module. Every module
    exposes the same functions (get, set_item, add_item, scale, total, ...),
    all of which operate on flat offsets.
    """

    def __init__(self, name, mod):
        self.name = name
        self.mod = mod

    def __eq__(self, other):
        return isinstance(other, SparseBackendDevice) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return "sparse_" + self.name + "()"

    def __getattr__(self, name):
        return getattr(self.mod, name)


def sparse_py():
    """Return dict-backed device"""
    return SparseBackendDevice("py", sparse_ndarray_backend_py)


def sparse_np():
    """Return numpy-backed device"""
    return SparseBackendDevice("np", sparse_ndarray_backend_np)


def sparse_default_device():
    """Device selected by the NDSPARSE_BACKEND environment variable"""
    if backend_selection.BACKEND == "np":
        return sparse_np()
    return sparse_py()


def sparse_all_devices():
    """return a list of all available devices"""
    return [sparse_py(), sparse_np()]


def _check_same_shape(a, b, op):
    if not isinstance(b, SparseNDArray):
        raise TypeError(f"{op} expects a SparseNDArray, got {type(b).__name__}")
    if a.space != b.space:
        raise ShapeMismatch(f"{op}: shapes {a.shape} and {b.shape} differ")


class SparseNDArray:
    """
    A sparse N-dimensional array: a shape plus a mapping from flat row-major
    offset to value. Offsets with no stored value read as 0.0, and the
    backends never keep explicit zeros around.

    Mutating methods (set, add_val, subtract_val, scale, add_sparse) change
    only the receiver; scale_copy, to_dense and to return arrays with their
    own storage.
    """

    def __init__(self, other, device=None):
        """
        We can initialize by copying from another sparse array, or by
        converting from a DenseNDArray, numpy array or nested sequence.
        """
        if isinstance(other, SparseNDArray):
            # copy constructor
            if device is None:
                device = other._device
            self._init(other.to(device))

        else:
            device = device if device is not None else sparse_default_device()
            if isinstance(other, DenseNDArray):
                shape, flat = other.shape, other.elements
            else:
                other = np.asarray(other, dtype=np.float64)
                shape, flat = other.shape, other.reshape(-1)

            array = SparseNDArray.__new__(SparseNDArray)
            array._space = IndexSpace(shape)
            array._device = device
            array._handle = device.from_numpy(flat)
            self._init(array)

    def _init(self, other):
        self._space = other._space
        self._device = other._device
        self._handle = other._handle

    @staticmethod
    def make(shape, device=None):
        """Create a new, empty (all zero) sparse array with the given shape."""
        space = shape if isinstance(shape, IndexSpace) else IndexSpace(shape)
        if device is None:
            device = sparse_default_device()

        array = SparseNDArray.__new__(SparseNDArray)
        array._space = space
        array._device = device
        array._handle = device.SparseArray(space.size)
        return array

    @staticmethod
    def from_dense(other, device=None):
        """Build a sparse array holding the non-zero elements of a dense one"""
        if not isinstance(other, DenseNDArray):
            other = DenseNDArray.from_numpy(other)
        logger.debug("Converting dense array of shape %s to sparse", other.shape)
        return SparseNDArray(other, device=device)

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
    def device(self):
        return self._device

    @property
    def size(self):
        """
        Total number of elements in the array. The number of values actually
        stored is `nnz`.
        """
        return self._space.size

    @property
    def nnz(self):
        return self._device.nnz(self._handle)

    def __repr__(self) -> str:
        return f"SparseNDArray(shape={self.shape}, nnz={self.nnz}, device={self._device})"

    def __str__(self) -> str:
        return self.numpy().__str__()

    ########################
    ### INDEX CONVERSION ###
    ########################
    def index_1d(self, *coord):
        return self._space.index_1d(*coord)

    def index_nd(self, offset):
        return self._space.index_nd(offset)

    ############################
    ### GET AND SET ELEMENTS ###
    ############################
    def get(self, *coord):
        return self._device.get(self._handle, self._space.index_1d(*coord))

    def set(self, value, *coord):
        """Overwrite the value at coord. Setting zero drops the stored entry."""
        self._device.set_item(self._handle, self._space.index_1d(*coord), value)

    def add_val(self, value, *coord):
        self._device.add_item(self._handle, self._space.index_1d(*coord), value)

    def subtract_val(self, value, *coord):
        self._device.add_item(self._handle, self._space.index_1d(*coord), -value)

    def __getitem__(self, coord):
        if not isinstance(coord, tuple):
            coord = (coord,)
        return self.get(*coord)

    def __setitem__(self, coord, value):
        if not isinstance(coord, tuple):
            coord = (coord,)
        self.set(value, *coord)

    def items(self):
        """(offset, value) pairs of the stored entries, by increasing offset"""
        return self._device.items(self._handle)

    #######################
    ### MATH OPERATIONS ###
    #######################
    def scale(self, factor):
        """Multiply every stored value by factor, in place"""
        self._device.scale(self._handle, factor)

    def scale_copy(self, factor):
        out = self.copy()
        out.scale(factor)
        return out

    def sum(self):
        return self._device.total(self._handle)

    def add_sparse(self, other):
        """
        Add other's stored values into this array, in place.

        Raises:
            ShapeMismatch: If the shapes differ. Nothing is modified.
        """
        _check_same_shape(self, other, "add_sparse")
        if other._device == self._device:
            src = other._handle
        else:
            src = list(other.items())
        self._device.ewise_add_inplace(self._handle, src)

    ##################
    ### CONVERSION ###
    ##################
    def copy(self):
        out = SparseNDArray.__new__(SparseNDArray)
        out._space = self._space
        out._device = self._device
        out._handle = self._device.copy(self._handle)
        return out

    def to(self, device):
        """Copy onto another sparse device"""
        if device == self._device:
            return self.copy()
        out = SparseNDArray.__new__(SparseNDArray)
        out._space = self._space
        out._device = device
        out._handle = device.from_items(self.size, self.items())
        return out

    def numpy(self):
        """Convert to a numpy array"""
        return self._device.to_numpy(self._handle).reshape(self.shape)

    def to_dense(self):
        """Convert to a DenseNDArray of the same shape"""
        logger.debug("Converting sparse array of shape %s (nnz=%d) to dense", self.shape, self.nnz)
        return DenseNDArray(self.shape, self._device.to_numpy(self._handle))


def array_multiply(a, b):
    """
    Elementwise product of two sparse arrays of the same shape.

    Only offsets stored in both operands can give a non-zero product, so only
    those are visited. The result lives on a's device and neither input is
    modified.

    Raises:
        ShapeMismatch: If the shapes differ.
    """
    _check_same_shape(a, b, "array_multiply")
    if b.device != a.device:
        b = b.to(a.device)
    out = SparseNDArray.__new__(SparseNDArray)
    out._space = a.space
    out._device = a.device
    out._handle = a.device.ewise_mul(a._handle, b._handle)
    return out


###########################
### CONVENIENCE METHODS ###
###########################

def zeros_sparse(*shape, device=None):
    """Create an empty (all zero) sparse array"""
    return SparseNDArray.make(shape, device=device)


def array(a, device=None):
    """Convenience method for creating sparse arrays"""
    return SparseNDArray(a, device=device)
