"""
ndsparse: N-dimensional float arrays in a sparse (offset -> value mapping)
and a dense (contiguous buffer) layout, sharing one row-major indexing scheme.

    >>> import ndsparse as nds
    >>> a = nds.zeros_sparse(5, 10, 15, 20)
    >>> a.add_val(30., 2, 3, 0, 0)
    >>> a.to_dense().get(2, 3, 0, 0)
    30.0
"""

from .errors import NDArrayError, InvalidShape, OutOfRange, ShapeMismatch
from .index_space import IndexSpace, compact_strides
from .backend_selection import BACKEND
from .backend_dense import DenseNDArray, zeros_dense
from .backend_sparse import (
    SparseNDArray,
    SparseBackendDevice,
    array_multiply,
    zeros_sparse,
    sparse_py,
    sparse_np,
    sparse_default_device,
    sparse_all_devices,
)

__version__ = "0.1.0"
