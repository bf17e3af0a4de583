"""Feedforward network trained by mini-batch stochastic gradient descent."""

from __future__ import annotations

import math
import numbers
import time
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..data.sources import ShuffledDataSource, SubsetDataSource, TrainingDataSource
from .activations import index_of_highest, sigmoid, sigmoid_prime
from .errors import InvalidConfiguration, OutOfRange, SizeMismatch, size_mismatch
from .layers import DenseLayer, InputLayer, Layer, is_count
from .linalg import add_in_place, dot, multiply_in_place, outer, transpose
from .types import Array, EpochMetrics, TrainingSample

MIN_EPOCHS = 1
MAX_EPOCHS = 200

Gradients = Tuple[List[Array], List[Array]]


class Network:
    """An input layer followed by one or more dense sigmoid layers.

    The last dense layer is the output layer. Layers are evaluated strictly
    in order because each one consumes the complete output of its
    predecessor.
    """

    def __init__(self, layer_sizes: Sequence[int]) -> None:
        sizes = list(layer_sizes)
        if len(sizes) < 2:
            raise InvalidConfiguration("Must have 2 or more layers")
        for size in sizes:
            if not is_count(size) or size <= 0:
                raise InvalidConfiguration(f"Layer sizes must be positive integers, got {sizes}")
        self.input_layer = InputLayer(int(sizes[0]))
        self.dense_layers: List[DenseLayer] = []
        previous: Layer = self.input_layer
        for size in sizes[1:]:
            layer = DenseLayer(previous, int(size))
            self.dense_layers.append(layer)
            previous = layer

    # ------------------------------------------------------------------
    # Structure

    @property
    def layer_sizes(self) -> List[int]:
        return [self.input_layer.size] + [layer.size for layer in self.dense_layers]

    @property
    def num_layers(self) -> int:
        return 1 + len(self.dense_layers)

    @property
    def output_layer(self) -> DenseLayer:
        return self.dense_layers[-1]

    def layer(self, index: int) -> Layer:
        if not 0 <= index < self.num_layers:
            raise OutOfRange(f"Layer {index} not in range [0, {self.num_layers})")
        return self.input_layer if index == 0 else self.dense_layers[index - 1]

    def parameter_count(self) -> int:
        return sum(layer.parameter_count() for layer in self.dense_layers)

    def init(self, rng: np.random.Generator | None = None) -> None:
        """Initialise every dense layer from ``rng`` (unseeded when ``None``)."""

        rng = rng if rng is not None else np.random.default_rng()
        for layer in self.dense_layers:
            layer.init(rng)

    # ------------------------------------------------------------------
    # Inference

    def set_input(self, index: int, value: float) -> None:
        self.input_layer.set_value(index, value)

    def set_inputs(self, values: Array) -> None:
        self.input_layer.set_values(values)

    def outputs(self) -> Array:
        return self.output_layer.outputs()

    def forward(self, inputs: Array) -> Array:
        """Run inference; the returned vector is overwritten by the next call."""

        self.set_inputs(inputs)
        for layer in self.dense_layers:
            layer.forward()
        return self.outputs()

    def classify(self, inputs: Array) -> int:
        return index_of_highest(self.forward(inputs))

    def evaluate(self, test_data: TrainingDataSource) -> int:
        """Count the samples whose classification matches the expected index."""

        correct = 0
        for sample in test_data:
            if self.classify(sample.inputs) == sample.highest_output_index:
                correct += 1
        return correct

    def cost(self, sample: TrainingSample) -> float:
        """Quadratic cost ``0.5 * ||a - y||^2`` for a single sample."""

        diff = self.cost_derivative(self.forward(sample.inputs), sample.outputs)
        return float(0.5 * np.dot(diff, diff))

    @staticmethod
    def cost_derivative(output_activations: Array, expected: Array) -> Array:
        output_activations = np.asarray(output_activations, dtype=np.float64)
        expected = np.asarray(expected, dtype=np.float64)
        if output_activations.shape != expected.shape:
            raise size_mismatch(output_activations.shape, expected.shape)
        return output_activations - expected

    # ------------------------------------------------------------------
    # Training

    def backprop(self, sample: TrainingSample) -> Gradients:
        """Return ``(nabla_b, nabla_w)`` for one sample, one entry per dense layer."""

        activation = np.asarray(sample.inputs, dtype=np.float64)
        if activation.shape != (self.input_layer.size,):
            raise size_mismatch((self.input_layer.size,), activation.shape)

        # feedforward, recording z and activation for every layer
        activations = [activation]
        zs: List[Array] = []
        for layer in self.dense_layers:
            z = dot(layer.weights, activation)
            add_in_place(z, layer.biases)
            zs.append(z)
            activation = sigmoid(z)
            activations.append(activation)

        # backward pass
        count = len(self.dense_layers)
        nabla_b: List[Array] = [None] * count  # type: ignore[list-item]
        nabla_w: List[Array] = [None] * count  # type: ignore[list-item]
        delta = self.cost_derivative(activations[-1], sample.outputs)
        multiply_in_place(delta, sigmoid_prime(zs[-1]))
        nabla_b[-1] = delta
        nabla_w[-1] = outer(delta, activations[-2])
        for l in range(2, count + 1):
            delta = dot(transpose(self.dense_layers[-l + 1].weights), delta)
            multiply_in_place(delta, sigmoid_prime(zs[-l]))
            nabla_b[-l] = delta
            nabla_w[-l] = outer(delta, activations[-l - 1])
        return nabla_b, nabla_w

    def update_mini_batch(self, batch: TrainingDataSource, learning_rate: float) -> None:
        """Apply one SGD step averaged over ``batch``."""

        batch_size = len(batch)
        if batch_size == 0:
            raise InvalidConfiguration("Mini-batch must contain at least one sample")
        nabla_b = [layer.zero_biases() for layer in self.dense_layers]
        nabla_w = [layer.zero_weights() for layer in self.dense_layers]
        for sample in batch:
            delta_b, delta_w = self.backprop(sample)
            for idx in range(len(self.dense_layers)):
                add_in_place(nabla_b[idx], delta_b[idx])
                add_in_place(nabla_w[idx], delta_w[idx])

        step = learning_rate / batch_size
        for layer, grad_b, grad_w in zip(self.dense_layers, nabla_b, nabla_w):
            biases = layer.biases  # live array, updated in place
            weights = layer.weights
            biases -= step * grad_b
            weights -= step * grad_w

    def train(
        self,
        training_data: TrainingDataSource,
        epochs: int,
        mini_batch_size: int,
        learning_rate: float,
        rng: np.random.Generator | None = None,
        test_data: TrainingDataSource | None = None,
        callbacks: Sequence[object] = (),
    ) -> List[EpochMetrics]:
        """Run stochastic gradient descent and return per-epoch metrics.

        Each epoch reshuffles the training data, splits it into consecutive
        mini-batches of ``mini_batch_size`` (the last one truncated to the
        remaining samples) and applies :meth:`update_mini_batch` to each.
        ``test_data``, when given, is evaluated after every epoch purely for
        reporting.
        """

        if training_data is None:
            raise InvalidConfiguration("Training data is required")
        self._validate_training(
            training_data, epochs, mini_batch_size, learning_rate, test_data
        )
        rng = rng if rng is not None else np.random.default_rng()
        shuffled = ShuffledDataSource(training_data)
        total = len(shuffled)

        _emit(
            callbacks,
            "on_train_begin",
            {
                "network": repr(self),
                "training_size": total,
                "epochs": epochs,
                "mini_batch_size": mini_batch_size,
                "learning_rate": learning_rate,
            },
        )

        history: List[EpochMetrics] = []
        start = time.perf_counter()
        for epoch in range(1, epochs + 1):
            shuffled.shuffle(rng)
            for offset in range(0, total, mini_batch_size):
                batch = SubsetDataSource(
                    shuffled, offset, min(mini_batch_size, total - offset)
                )
                self.update_mini_batch(batch, learning_rate)

            now = time.perf_counter()
            metrics: Dict[str, float] = {"elapsed_s": now - start}
            start = now
            if test_data is not None:
                correct = self.evaluate(test_data)
                now = time.perf_counter()
                test_total = len(test_data)
                metrics.update(
                    {
                        "eval_correct": correct,
                        "eval_total": test_total,
                        "eval_accuracy": correct / test_total if test_total else 0.0,
                        "eval_elapsed_s": now - start,
                    }
                )
                start = now
            history.append(metrics)
            _emit(callbacks, "on_epoch", epoch, metrics)
        return history

    def _validate_training(
        self,
        training_data: TrainingDataSource,
        epochs: int,
        mini_batch_size: int,
        learning_rate: float,
        test_data: TrainingDataSource | None = None,
    ) -> None:
        if not is_count(epochs) or not MIN_EPOCHS <= epochs <= MAX_EPOCHS:
            raise InvalidConfiguration(
                f"number of epochs must be an integer in range {MIN_EPOCHS}..{MAX_EPOCHS}, "
                f"got {epochs!r}"
            )
        if not is_count(mini_batch_size) or mini_batch_size < 1:
            raise InvalidConfiguration(
                f"mini-batch size must be an integer >= 1, got {mini_batch_size!r}"
            )
        if (
            not isinstance(learning_rate, numbers.Real)
            or not math.isfinite(learning_rate)
            or learning_rate <= 0
        ):
            raise InvalidConfiguration(
                f"learning rate must be a positive finite number, got {learning_rate}"
            )
        self._check_sample_shapes(training_data, "Training")
        if test_data is not None:
            self._check_sample_shapes(test_data, "Test")

    def _check_sample_shapes(self, source: TrainingDataSource, kind: str) -> None:
        if len(source) == 0:
            return
        sample = source.get(0)
        if np.shape(sample.inputs) != (self.input_layer.size,):
            raise SizeMismatch(
                f"{kind} inputs have shape {np.shape(sample.inputs)}, "
                f"network expects ({self.input_layer.size},)"
            )
        if np.shape(sample.outputs) != (self.output_layer.size,):
            raise SizeMismatch(
                f"{kind} outputs have shape {np.shape(sample.outputs)}, "
                f"network produces ({self.output_layer.size},)"
            )

    # ------------------------------------------------------------------
    # Raw parameter access

    def state_dict(self) -> Dict[str, Array]:
        state: Dict[str, Array] = {}
        for idx, layer in enumerate(self.dense_layers):
            state[f"W{idx}"] = layer.weights.copy()
            state[f"b{idx}"] = layer.biases.copy()
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx, layer in enumerate(self.dense_layers):
            for key in (f"W{idx}", f"b{idx}"):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
            layer.set_weights(state[f"W{idx}"])
            layer.set_biases(state[f"b{idx}"])

    def __repr__(self) -> str:
        return "Network[" + ",".join(str(size) for size in self.layer_sizes) + "]"


def _emit(callbacks: Sequence[object], event: str, *args: object) -> None:
    for callback in callbacks:
        handler = getattr(callback, event, None)
        if handler is not None:
            handler(*args)
        elif event == "on_epoch" and callable(callback):
            callback(*args)


__all__ = ["Network", "MIN_EPOCHS", "MAX_EPOCHS"]
