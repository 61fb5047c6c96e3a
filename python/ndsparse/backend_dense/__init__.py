"""
Dense backend: a single DenseNDArray class holding every element of the
array in a contiguous numpy buffer.
"""

from .dense_ndarray import DenseNDArray, zeros_dense, array
