import unittest
import numpy as np
from minigrad.engine import Value
from minigrad.errors import InvalidTopologyError
from minigrad.module import Module
from minigrad.nn import Neuron, Layer, MLP


def expected_parameter_count(sizes):
    return sum((nin + 1) * nout for nin, nout in zip(sizes, sizes[1:]))


class TestModule(unittest.TestCase):
    """Test the Module base class"""

    def test_parameter_registration(self):
        """Test automatic parameter registration"""
        class TestModule(Module):
            def __init__(self):
                super().__init__()
                self.scale = Value(2.0)
                self.offsets = [Value(1.0), Value(2.0)]
                self.label = "not a parameter"

        module = TestModule()
        params = list(module.parameters())
        self.assertEqual(len(params), 3)
        self.assertIs(params[0], module.scale)
        self.assertIs(params[1], module.offsets[0])
        self.assertIs(params[2], module.offsets[1])

    def test_submodule_registration(self):
        """Test automatic submodule registration"""
        class TestModule(Module):
            def __init__(self):
                super().__init__()
                self.first = Neuron(2)
                self.rest = [Neuron(3), Neuron(1)]

        module = TestModule()
        self.assertEqual(len(list(module.parameters())), 3 + 4 + 2)
        names = [name for name, _ in module.named_parameters()]
        self.assertEqual(names[:3], ["first.weights.0", "first.weights.1", "first.bias"])
        self.assertEqual(names[-1], "rest.1.bias")

    def test_parameters_is_restartable(self):
        """Test that parameters() can be iterated more than once"""
        layer = Layer(2, 3)
        params = layer.parameters()
        self.assertFalse(isinstance(params, list))
        self.assertEqual(len(list(params)), 9)
        self.assertEqual(len(list(layer.parameters())), 9)


class TestNeuron(unittest.TestCase):
    """Test the Neuron"""

    def test_initialisation(self):
        neuron = Neuron(5, rng=0)
        self.assertEqual(len(neuron.weights), 5)
        for w in neuron.weights:
            self.assertTrue(w.is_leaf)
            self.assertGreaterEqual(w.data, -1.0)
            self.assertLess(w.data, 1.0)
            self.assertEqual(w.grad, 0)
        self.assertEqual(neuron.bias.data, 0)
        self.assertTrue(neuron.nonlin)

    def test_parameter_order(self):
        """Test that weights come before the bias"""
        neuron = Neuron(3, nonlin=False)
        params = list(neuron.parameters())
        self.assertEqual(len(params), 4)
        self.assertIs(params[-1], neuron.bias)
        for p, w in zip(params, neuron.weights):
            self.assertIs(p, w)

    def test_dtype(self):
        neuron = Neuron(2, dtype=np.float32)
        for p in neuron.parameters():
            self.assertIsInstance(p.data, np.float32)
            self.assertIsInstance(p.grad, np.float32)

    def test_zero_grad(self):
        neuron = Neuron(3)
        for p in neuron.parameters():
            p.grad = np.float64(5.0)
        neuron.zero_grad()
        for p in neuron.parameters():
            self.assertEqual(p.grad, 0)

    def test_repr(self):
        self.assertEqual(repr(Neuron(3)), "Neuron(3, relu)")
        self.assertEqual(repr(Neuron(2, nonlin=False)), "Neuron(2, linear)")


class TestLayer(unittest.TestCase):
    """Test the Layer"""

    def test_neurons(self):
        layer = Layer(4, 3, nonlin=False)
        self.assertEqual(len(layer.neurons), 3)
        for neuron in layer.neurons:
            self.assertEqual(len(neuron.weights), 4)
            self.assertFalse(neuron.nonlin)

    def test_parameters_are_neuron_major(self):
        layer = Layer(2, 2)
        expected = [p for n in layer.neurons for p in n.parameters()]
        params = list(layer.parameters())
        self.assertEqual(len(params), len(expected))
        for p, e in zip(params, expected):
            self.assertIs(p, e)


class TestMLP(unittest.TestCase):
    """Test the MLP"""

    def test_layers_and_activation_flags(self):
        """Test that every layer but the last is flagged for ReLU"""
        model = MLP([3, 4, 4, 1])
        self.assertEqual(len(model.layers), 3)
        self.assertEqual([(l.nin, l.nout) for l in model.layers], [(3, 4), (4, 4), (4, 1)])
        self.assertTrue(all(n.nonlin for n in model.layers[0].neurons))
        self.assertTrue(all(n.nonlin for n in model.layers[1].neurons))
        self.assertFalse(any(n.nonlin for n in model.layers[2].neurons))

    def test_single_layer_is_linear(self):
        model = MLP([2, 3])
        self.assertEqual(len(model.layers), 1)
        self.assertFalse(any(n.nonlin for n in model.layers[0].neurons))

    def test_parameter_count(self):
        for sizes in ([2, 1], [3, 4, 4, 1], [1, 16, 16, 2], [5, 1, 5]):
            model = MLP(sizes)
            self.assertEqual(len(list(model.parameters())), expected_parameter_count(sizes))

    def test_parameter_order_is_layer_major(self):
        model = MLP([2, 3, 1])
        expected = [p for layer in model.layers for p in layer.parameters()]
        params = list(model.parameters())
        for p, e in zip(params, expected):
            self.assertIs(p, e)

    def test_seed_reproducibility(self):
        """Test that the same seed builds the same parameters"""
        a = [p.data for p in MLP([3, 5, 2], rng=42).parameters()]
        b = [p.data for p in MLP([3, 5, 2], rng=42).parameters()]
        c = [p.data for p in MLP([3, 5, 2], rng=7).parameters()]
        np.testing.assert_array_equal(a, b)
        self.assertFalse(np.array_equal(a, c))

    def test_generator_rng(self):
        model = MLP([2, 2], rng=np.random.default_rng(1))
        self.assertEqual(len(list(model.parameters())), 6)

    def test_zero_grad(self):
        """Test that zero_grad clears gradients from a backward pass"""
        model = MLP([2, 3, 1], rng=0)
        for p in model.parameters():
            p.grad = np.float64(3.0)

        weight = model.layers[0].neurons[0].weights[0]
        out = weight * Value(2.0)
        out.backward()
        self.assertEqual(weight.grad, 3.0 + 2.0)

        model.zero_grad()
        for p in model.parameters():
            self.assertEqual(p.grad, 0)

    def test_invalid_topology(self):
        """Test that degenerate widths are rejected"""
        for sizes in ([], [3], [2, 0, 1], [2, -1], [2.5, 1], [True, 1]):
            with self.assertRaises(InvalidTopologyError):
                MLP(sizes)

    def test_invalid_topology_is_value_error(self):
        with self.assertRaises(ValueError):
            MLP([4])

    def test_repr(self):
        self.assertEqual(repr(MLP([2, 3, 1])), "MLP([2, 3, 1])")


if __name__ == "__main__":
    unittest.main()
