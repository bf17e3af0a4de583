from __future__ import annotations

import numpy as np
import pytest

from sgdnet.core.errors import InvalidConfiguration
from sgdnet.core.network import Network
from sgdnet.data.registry import get_dataset
from sgdnet.reporting.metrics import MetricsCapture
from sgdnet.training.trainer import Trainer, TrainerConfig


def test_trainer_config_defaults():
    config = TrainerConfig()
    assert (config.epochs, config.mini_batch_size, config.learning_rate) == (30, 10, 3.0)
    assert config.rng is None and config.test_data is None
    assert isinstance(config.make_rng(), np.random.Generator)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"epochs": 0},
        {"epochs": 201},
        {"mini_batch_size": 0},
        {"learning_rate": 0.0},
        {"learning_rate": float("inf")},
        {"epochs": 2.5},
        {"mini_batch_size": 1.5},
        {"learning_rate": "fast"},
    ],
)
def test_trainer_config_validation(kwargs):
    with pytest.raises(InvalidConfiguration):
        TrainerConfig(**kwargs)


def test_trainer_config_from_mapping_aliases():
    config = TrainerConfig.from_mapping(
        {"epochs": "5", "batch_size": 4, "eta": 0.5, "seed": 3, "run_dir": "ignored"}
    )
    assert config.as_dict() == {
        "epochs": 5,
        "mini_batch_size": 4,
        "learning_rate": 0.5,
        "seed": 3,
    }
    first = config.make_rng().random()
    assert first == np.random.default_rng(3).random()


def test_xor_cost_decreases():
    dataset = get_dataset("xor", repeat=50)
    rng = np.random.default_rng(7)
    network = Network([2, 4, 2])
    network.init(rng)
    before = np.mean([network.cost(sample) for sample in dataset.test])
    capture = MetricsCapture()
    config = TrainerConfig(
        epochs=100, mini_batch_size=4, learning_rate=3.0, rng=rng, test_data=dataset.test
    )
    result = Trainer(network, config, callbacks=[capture]).run(dataset.train)
    after = np.mean([network.cost(sample) for sample in dataset.test])
    assert result.epochs == 100
    assert len(capture.history) == 100
    assert capture.history[-1][1]["eval_total"] == 4
    assert after < before


def test_blobs_accuracy_improves(tmp_path):
    dataset = get_dataset("blobs", n_points=300, num_classes=3, seed=0)
    rng = np.random.default_rng(1)
    network = Network([2, 8, 3])
    network.init(rng)
    before = network.evaluate(dataset.test)
    config = TrainerConfig(
        epochs=30, mini_batch_size=10, learning_rate=3.0, rng=rng, test_data=dataset.test
    )
    result = Trainer(network, config).run(dataset.train, checkpoint_dir=tmp_path)
    after = result.final_metrics["eval_correct"]
    assert after >= before
    assert after / len(dataset.test) > 0.6
    assert (tmp_path / "params.npz").exists()
