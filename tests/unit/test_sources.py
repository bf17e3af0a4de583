import numpy as np
import pytest

from sgdnet.core.errors import InvalidRange, OutOfRange, SizeMismatch
from sgdnet.data.sources import ArrayDataSource, ShuffledDataSource, SubsetDataSource


def _source(n: int) -> ArrayDataSource:
    inputs = np.arange(n * 2, dtype=np.float64).reshape(n, 2)
    return ArrayDataSource.from_labels(inputs, np.arange(n) % 3, num_classes=3)


def test_array_source_get_and_bounds():
    source = _source(5)
    sample = source.get(4)
    assert np.array_equal(sample.inputs, [8.0, 9.0])
    assert sample.highest_output_index == 1
    assert len(list(source)) == 5
    with pytest.raises(OutOfRange):
        source.get(5)
    with pytest.raises(OutOfRange):
        source.get(-1)
    with pytest.raises(SizeMismatch):
        ArrayDataSource(np.ones((3, 2)), np.ones((2, 1)))


@pytest.mark.parametrize("size", [0, 1, 2, 7, 100])
def test_shuffle_is_a_bijection(size):
    source = _source(size)
    view = ShuffledDataSource(source)
    view.shuffle(np.random.default_rng(size))
    assert sorted(view.permutation.tolist()) == list(range(size))
    for i in range(size):
        assert view.get(i).inputs[0] == source.get(int(view.permutation[i])).inputs[0]


def test_shuffle_does_not_touch_source():
    source = _source(10)
    before = source.inputs.copy()
    view = ShuffledDataSource(source)
    view.shuffle(np.random.default_rng(0))
    view.shuffle(np.random.default_rng(1))
    assert np.array_equal(source.inputs, before)


def test_subset_maps_onto_source():
    source = _source(10)
    subset = SubsetDataSource(source, 3, 4)
    assert len(subset) == 4
    for i in range(4):
        assert np.array_equal(subset.get(i).inputs, source.get(3 + i).inputs)
    with pytest.raises(OutOfRange):
        subset.get(4)


@pytest.mark.parametrize("start,length", [(-1, 2), (0, 0), (8, 3), (10, 1)])
def test_subset_rejects_invalid_ranges(start, length):
    with pytest.raises(InvalidRange):
        SubsetDataSource(_source(10), start, length)


def test_highest_output_index_without_precomputed_label():
    source = ArrayDataSource(np.zeros((1, 2)), np.array([[0.1, 0.9, 0.3]]))
    assert source.get(0).label is None
    assert source.get(0).highest_output_index == 1
