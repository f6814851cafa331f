import logging
import numbers

import numpy as np

from minigrad.config import get_default_dtype
from minigrad.engine import Value
from minigrad.errors import InvalidTopologyError
from minigrad.module import Module

logger = logging.getLogger(__name__)


def _as_generator(rng):
    if isinstance(rng, np.random.Generator):
        return rng
    # None or an int seed
    return np.random.default_rng(rng)


class Neuron(Module):
    """
    A single neuron: one weight per input plus a bias.

    Weights are drawn uniformly from [-1, 1), the bias starts at 0.
    `nonlin` records whether the neuron's output goes through ReLU.
    """

    def __init__(self, nin, nonlin=True, dtype=None, rng=None):
        super().__init__()
        rng = _as_generator(rng)
        dtype = dtype or get_default_dtype()
        self.nin = nin
        self.nonlin = nonlin
        self.weights = [Value(w, dtype=dtype) for w in rng.uniform(-1.0, 1.0, size=nin)]
        self.bias = Value(0, dtype=dtype)

    def __repr__(self):
        return f"Neuron({self.nin}, {'relu' if self.nonlin else 'linear'})"


class Layer(Module):
    """A row of `nout` neurons that all take the same `nin` inputs."""

    def __init__(self, nin, nout, nonlin=True, dtype=None, rng=None):
        super().__init__()
        rng = _as_generator(rng)
        self.nin = nin
        self.nout = nout
        self.neurons = [Neuron(nin, nonlin=nonlin, dtype=dtype, rng=rng) for _ in range(nout)]

    def __repr__(self):
        return f"Layer([{', '.join(str(n) for n in self.neurons)}])"


class MLP(Module):
    """
    Multi-layer perceptron built from layer widths.

    MLP([2, 16, 16, 1]) owns three layers: 2->16, 16->16, 16->1.
    Every layer but the last is flagged for ReLU; the last one is linear.
    """

    def __init__(self, sizes, dtype=None, rng=None):
        super().__init__()
        sizes = list(sizes)
        if len(sizes) < 2:
            raise InvalidTopologyError(
                f"An MLP needs at least two layer widths (inputs and outputs), got {sizes}"
            )
        for size in sizes:
            if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size < 1:
                raise InvalidTopologyError(f"Layer widths must be positive integers, got {sizes}")

        rng = _as_generator(rng)
        self.sizes = [int(s) for s in sizes]
        self.dtype = dtype or get_default_dtype()
        last = len(sizes) - 2
        self.layers = [
            Layer(nin, nout, nonlin=i != last, dtype=self.dtype, rng=rng)
            for i, (nin, nout) in enumerate(zip(self.sizes, self.sizes[1:]))
        ]
        logger.debug("Built MLP %s with %d parameters", self.sizes, sum(1 for _ in self.parameters()))

    def __repr__(self):
        return f"MLP({self.sizes})"
