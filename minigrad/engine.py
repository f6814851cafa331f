import logging
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np

from minigrad.config import get_default_dtype
from minigrad.errors import ConsumedValueError

logger = logging.getLogger(__name__)


class Op(Enum):
    ADD = "+"
    MUL = "*"
    RELU = "ReLU"
    POW = "**"


class Origin(NamedTuple):
    """How a derived Value was produced: the op and the operands it consumed."""
    op: Op
    lhs: "Value"
    rhs: Optional["Value"] = None
    exponent: Optional[np.generic] = None


class Value:
    """
    Stores a scalar, its gradient, and the operation that produced it.

    Building a new Value consumes its operands: a consumed Value can still be
    read, but it cannot be used in another expression. The graph behind any
    output is therefore a tree, and backward() visits each node exactly once.
    Use clone() when the same quantity is needed twice.
    """

    def __init__(self, data, dtype=None):
        if isinstance(data, Value):
            raise TypeError("Value() takes a number; use clone() to copy a Value")
        if dtype is None:
            dtype = type(data) if isinstance(data, np.generic) else get_default_dtype()
        self.data = np.dtype(dtype).type(data)
        self.grad = self._type(0)
        self.origin: Optional[Origin] = None
        self._consumed = False

    @property
    def _type(self):
        return type(self.data)

    @property
    def is_leaf(self) -> bool:
        return self.origin is None

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def op(self) -> Optional[Op]:
        return None if self.origin is None else self.origin.op

    def zero_grad(self):
        self.grad = self._type(0)

    def clone(self) -> "Value":
        """
        Deep-copy this Value and the tree below it.
        The copy is unconsumed and shares no gradient with the original.
        """
        if self._consumed:
            raise ConsumedValueError(f"Cannot clone {self!r}: it was consumed by another expression")

        order = []
        stack = [self]
        while stack:
            node = stack.pop()
            order.append(node)
            if node.origin is not None:
                stack.extend(v for v in (node.origin.lhs, node.origin.rhs) if v is not None)

        # children are copied before their parents
        copies = {}
        for node in reversed(order):
            copy = Value(node.data, dtype=node._type)
            copy.grad = node.grad
            if node.origin is not None:
                op, lhs, rhs, exponent = node.origin
                lhs_copy = copies[id(lhs)]
                rhs_copy = copies[id(rhs)] if rhs is not None else None
                for operand in (lhs_copy, rhs_copy):
                    if operand is not None:
                        operand._consumed = True
                copy.origin = Origin(op, lhs_copy, rhs_copy, exponent)
            copies[id(node)] = copy
        return copies[id(self)]

    def backward(self):
        backward(self)

    def relu(self):
        return relu(self)

    def __add__(self, other):
        return add(self, _lift(other, self))

    def __radd__(self, other):
        return add(_lift(other, self), self)

    def __mul__(self, other):
        return multiply(self, _lift(other, self))

    def __rmul__(self, other):
        return multiply(_lift(other, self), self)

    def __pow__(self, exponent):
        return power(self, exponent)

    def __neg__(self):
        return negate(self)

    def __sub__(self, other):
        return subtract(self, _lift(other, self))

    def __rsub__(self, other):
        return subtract(_lift(other, self), self)

    def __truediv__(self, other):
        return divide(self, _lift(other, self))

    def __rtruediv__(self, other):
        return divide(_lift(other, self), self)

    def __repr__(self):
        return f"Value(data={self.data}, grad={self.grad})"


def _lift(other, like):
    # plain numbers become fresh leaves of the same scalar type
    return other if isinstance(other, Value) else Value(other, dtype=like._type)


def _check_available(operands):
    for i, operand in enumerate(operands):
        if not isinstance(operand, Value):
            raise TypeError(f"Expected a Value operand, got {type(operand).__name__}")
        if operand._consumed:
            raise ConsumedValueError(f"{operand!r} was already consumed by another expression")
        if any(operand is seen for seen in operands[:i]):
            raise ConsumedValueError(
                f"{operand!r} is used twice in one expression; clone() it for the second use"
            )


def _derive(op, operands, forward, exponent=None):
    _check_available(operands)
    data = forward()
    for operand in operands:
        operand._consumed = True
    out = Value(data, dtype=type(data))
    rhs = operands[1] if len(operands) == 2 else None
    out.origin = Origin(op, operands[0], rhs, exponent)
    return out


def add(a, b):
    return _derive(Op.ADD, (a, b), lambda: a.data + b.data)


def multiply(a, b):
    return _derive(Op.MUL, (a, b), lambda: a.data * b.data)


def relu(a):
    return _derive(Op.RELU, (a,), lambda: a._type(0) if a.data < 0 else a.data)


def power(a, exponent):
    """
    Raise a to a constant exponent. The exponent is a plain number and gets no gradient.
    Domain errors are not intercepted: 0 ** -1 gives inf, (-x) ** 0.5 gives nan.
    """
    if isinstance(exponent, Value):
        raise TypeError("power() takes a plain number as exponent, not a Value")
    _check_available((a,))
    exponent = a._type(exponent)
    return _derive(Op.POW, (a,), lambda: a.data ** exponent, exponent=exponent)


def negate(a):
    _check_available((a,))
    return multiply(a, Value(-1, dtype=a._type))


def subtract(a, b):
    _check_available((a, b))
    return add(a, negate(b))


def divide(a, b):
    _check_available((a, b))
    return multiply(a, power(b, -1))


def _local_gradients(node, upstream):
    """Chain rule for one node: (operand, contribution) pairs for the gradient flowing into it."""
    op, lhs, rhs, exponent = node.origin
    if op is Op.ADD:
        return ((lhs, upstream), (rhs, upstream))
    if op is Op.MUL:
        return ((lhs, rhs.data * upstream), (rhs, lhs.data * upstream))
    if op is Op.RELU:
        # zero gradient at the boundary
        return ((lhs, upstream),) if node.data > 0 else ()
    if op is Op.POW:
        return ((lhs, exponent * lhs.data ** (exponent - 1) * upstream),)
    raise ValueError(f"Unknown op: {op}")


def backward(root: Value):
    """
    Seed root.grad with 1 and push gradients down the tree below it.

    Each node is visited once. Gradients accumulate: calling backward twice
    without zeroing adds the same contributions again, so every gradient below
    the root doubles while the root itself stays at 1.
    """
    if root._consumed:
        raise ConsumedValueError("backward() must start from a Value that has not been consumed")

    root.grad = root._type(1)
    stack = [(root, root.grad)]
    visited = 0
    while stack:
        node, upstream = stack.pop()
        visited += 1
        if node.origin is None:
            continue
        # lhs is pushed first so the right operand is visited first
        for operand, contribution in _local_gradients(node, upstream):
            operand.grad = operand._type(operand.grad + contribution)
            stack.append((operand, contribution))
    logger.debug("backward visited %d nodes", visited)


# Example usage
if __name__ == "__main__":
    a = Value(2.0)
    b = Value(-3.0)
    c = Value(10.0)
    f = Value(-2.0)
    e = a * b
    d = e + c
    g = d * f
    g.backward()

    for name, v in [("a", a), ("b", b), ("c", c), ("e", e), ("d", d), ("f", f), ("g", g)]:
        print(f"{name}: {v}")
