from minigrad.config import get_default_dtype, set_default_dtype
from minigrad.engine import (
    Op,
    Origin,
    Value,
    add,
    backward,
    divide,
    multiply,
    negate,
    power,
    relu,
    subtract,
)
from minigrad.errors import ConsumedValueError, InvalidTopologyError, MinigradError
from minigrad.module import Module
from minigrad.nn import Layer, MLP, Neuron
from minigrad.model_state import load_model, model_exists, save_model

__version__ = "0.1.0"
