import numpy as np

from sgdnet.core.network import Network
from sgdnet.data.synthetic import make_blobs
from sgdnet.data.sources import ArrayDataSource


def _train(init_seed: int, shuffle_seed: int) -> Network:
    inputs, labels = make_blobs(60, 3, seed=0)
    data = ArrayDataSource.from_labels(inputs, labels, num_classes=3)
    network = Network([2, 5, 3])
    network.init(np.random.default_rng(init_seed))
    network.train(data, 3, 7, 3.0, rng=np.random.default_rng(shuffle_seed))
    return network


def test_identical_seeds_give_bit_identical_weights():
    first = _train(11, 22).state_dict()
    second = _train(11, 22).state_dict()
    assert sorted(first) == sorted(second)
    for key in first:
        assert np.array_equal(first[key], second[key])


def test_shuffle_seed_changes_the_result():
    first = _train(11, 22).state_dict()
    other = _train(11, 23).state_dict()
    assert any(not np.array_equal(first[k], other[k]) for k in first)
