import importlib

import numpy as np
import pytest
import ndsparse as nds
from ndsparse import backend_dense as ndd
from ndsparse import backend_sparse as nd


SPARSE_DEVICES = [nd.sparse_py(), nd.sparse_np()]
SPARSE_IDS = ["sparse_py", "sparse_np"]


@pytest.mark.parametrize(
    "shape,i,result",
    [
        ((3, 3), 0, (0, 0)),
        ((3, 3), 1, (0, 1)),
        ((3, 3), 2, (0, 2)),
        ((3, 3), 3, (1, 0)),
        ((3, 3), 4, (1, 1)),
        ((2, 2, 2, 2), 1, (0, 0, 0, 1)),
        ((2, 2, 2, 2), 2, (0, 0, 1, 0)),
        ((2, 2, 2, 2), 4, (0, 1, 0, 0)),
        ((2, 2, 2, 2), 8, (1, 0, 0, 0)),
        ((2, 2, 2, 2), 15, (1, 1, 1, 1)),
    ],
)
def test_dense_index_nd(shape, i, result):
    a = ndd.zeros_dense(*shape)
    assert a.index_nd(i) == result


@pytest.mark.parametrize("shape", [(1,), (3, 3), (4, 5, 6)])
def test_zeros_dense(shape):
    a = ndd.zeros_dense(*shape)
    assert a.shape == shape
    assert a.elements.shape == (int(np.prod(shape)),)
    assert a.elements.dtype == np.float64
    assert not a.elements.any()


@pytest.mark.parametrize("shape", [(), (0,), (3, 0)])
def test_zeros_dense_invalid_shape(shape):
    with pytest.raises(nds.InvalidShape):
        ndd.zeros_dense(*shape)


def test_dense_get_set():
    a = ndd.zeros_dense(3, 4)
    a.set(7., 1, 2)
    assert a.get(1, 2) == 7.
    assert a.elements[a.index_1d(1, 2)] == 7.
    assert a.elements[6] == 7.
    a[2, 3] = 1.
    assert a[2, 3] == 1.
    assert a.sum() == 8.
    with pytest.raises(nds.OutOfRange):
        a.set(1., 3, 0)
    with pytest.raises(nds.OutOfRange):
        a.get(0, 4)


def test_subset():
    a = ndd.zeros_dense(3, 3)
    for i in range(a.size):
        a.elements[i] = float(i)
    result = a.subset([0, 0], [2, 2])
    assert result.shape == (2, 2)
    np.testing.assert_array_equal(result.elements, [0, 1, 3, 4])


@pytest.mark.parametrize(
    "start,end",
    [
        ((0, 0, 0), (4, 5, 6)),
        ((1, 2, 3), (3, 5, 6)),
        ((3, 4, 5), (4, 5, 6)),
        ((0, 1, 0), (4, 2, 6)),
    ],
)
def test_subset_matches_numpy(start, end):
    _A = np.random.randn(4, 5, 6)
    A = ndd.array(_A)
    B = A.subset(start, end)
    idxs = tuple(slice(s, e) for s, e in zip(start, end))
    np.testing.assert_allclose(B.numpy(), _A[idxs])
    # the subset uses its own row-major layout
    for coord in np.ndindex(*B.shape):
        assert B.get(*coord) == _A[tuple(c + s for c, s in zip(coord, start))]


def test_subset_is_independent():
    a = ndd.array(np.arange(9.).reshape(3, 3))
    b = a.subset((1, 1), (3, 3))
    b.set(100., 0, 0)
    a.set(-1., 2, 2)
    assert a.get(1, 1) == 4.
    assert b.get(1, 1) == 8.


@pytest.mark.parametrize(
    "start,end",
    [
        ((-1, 0), (2, 2)),
        ((0, 0), (4, 2)),
        ((2, 0), (1, 2)),
        ((0,), (2,)),
        ((0, 0), (2, 2, 2)),
        ((0.0, 0), (2, 2)),
        ((0, 0), (2, 2.0)),
        ((True, 0), (2, 2)),
    ],
    ids=["start_neg", "end_high", "start_after_end", "arity", "arity_end",
         "start_float", "end_float", "start_bool"],
)
def test_subset_out_of_range(start, end):
    a = ndd.zeros_dense(3, 3)
    with pytest.raises(nds.OutOfRange):
        a.subset(start, end)


def test_subset_empty_extent():
    a = ndd.zeros_dense(3, 3)
    with pytest.raises(nds.InvalidShape):
        a.subset((1, 0), (1, 3))


@pytest.mark.parametrize("device", SPARSE_DEVICES, ids=SPARSE_IDS)
@pytest.mark.parametrize("shape", [(1,), (4, 5, 6), (2, 3, 4, 5)])
def test_to_dense_fidelity(shape, device):
    _A = np.random.randn(*shape) * (np.random.rand(*shape) < 0.3)
    A = nd.array(_A, device=device)
    D = A.to_dense()
    assert isinstance(D, ndd.DenseNDArray)
    assert D.shape == A.shape
    np.testing.assert_allclose(D.numpy(), _A)
    np.testing.assert_allclose(D.elements.sum(), A.sum(), atol=1e-10)
    for offset in range(A.size):
        assert D.elements[offset] == A.get(*A.index_nd(offset))


@pytest.mark.parametrize("device", SPARSE_DEVICES, ids=SPARSE_IDS)
def test_to_dense_is_independent(device):
    a = nd.zeros_sparse(2, 2, device=device)
    a.set(1., 0, 0)
    d = a.to_dense()
    d.set(5., 1, 1)
    a.set(3., 0, 1)
    assert a.get(1, 1) == 0.
    assert d.get(0, 1) == 0.


@pytest.mark.parametrize("device", SPARSE_DEVICES, ids=SPARSE_IDS)
def test_dense_to_sparse(device):
    _A = np.zeros((3, 4))
    _A[0, 1] = 2.
    _A[2, 3] = -1.
    S = ndd.array(_A).to_sparse(device=device)
    assert S.device == device
    assert S.nnz == 2
    assert S.get(0, 1) == 2. and S.get(2, 3) == -1.
    np.testing.assert_allclose(nd.SparseNDArray.from_dense(_A, device=device).numpy(), _A)


def test_unknown_backend(monkeypatch):
    from ndsparse import backend_selection
    monkeypatch.setenv("NDSPARSE_BACKEND", "bogus")
    with pytest.raises(RuntimeError):
        importlib.reload(backend_selection)
    monkeypatch.undo()
    importlib.reload(backend_selection)


def test_env_backend(monkeypatch):
    from ndsparse import backend_selection
    monkeypatch.setenv("NDSPARSE_BACKEND", "np")
    importlib.reload(backend_selection)
    try:
        assert nd.sparse_default_device() == nd.sparse_np()
    finally:
        monkeypatch.undo()
        importlib.reload(backend_selection)


if __name__ == "__main__":
    print("You have to run the tests with pytest due to parameterization.")
