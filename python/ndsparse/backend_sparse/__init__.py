"""
Entry point for the sparse backend. The sparse_ndarray.py file contains the
main endpoints: the SparseNDArray class, the devices it can be stored on and
the cross-array operations (array_multiply).

The sparse_ndarray_backend_*.py modules hold the storage itself and only
deal with flat offsets; all coordinate handling happens in SparseNDArray.
"""

from .sparse_ndarray import *
