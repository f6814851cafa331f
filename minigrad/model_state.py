import json
import logging
import os
from typing import Dict, Any

import numpy as np

from minigrad.nn import MLP

logger = logging.getLogger(__name__)


class ModelState:
    """Utility class for saving and loading MLP parameter values"""

    @staticmethod
    def save_model(model: MLP, filepath: str, additional_info: Dict[str, Any] = None):
        """
        Save parameter values and topology to a JSON file.
        Gradients and expression graphs are not stored.
        Args:
            model: The MLP to save
            filepath: Path to save the model to
            additional_info: Additional information to save (like training config)
        """
        if not isinstance(model, MLP):
            raise ValueError(f"Only MLP models can be saved, got {type(model).__name__}")

        state_dict = {
            'config': {
                'type': 'MLP',
                'sizes': list(model.sizes),
                'dtype': np.dtype(model.dtype).name,
            },
            'parameters': {name: float(p.data) for name, p in model.named_parameters()},
        }
        if additional_info:
            state_dict['additional_info'] = additional_info

        # Create parent directory if it exists in the path
        dirpath = os.path.dirname(filepath)
        if dirpath:
            os.makedirs(dirpath, exist_ok=True)

        with open(filepath, 'w') as f:
            json.dump(state_dict, f, indent=2)

        logger.info("Model saved to %s", filepath)

    @staticmethod
    def load_model(filepath: str):
        """
        Rebuild an MLP from a file written by save_model.

        Args:
            filepath: Path to load the model from

        Returns:
            Tuple of (model, additional_info)
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Model file not found: {filepath}")

        with open(filepath, 'r') as f:
            state_dict = json.load(f)

        config = state_dict['config']
        if config.get('type') != 'MLP':
            raise ValueError(f"Unsupported model type: {config.get('type')!r}")

        model = MLP(config['sizes'], dtype=np.dtype(config['dtype']).type)
        ModelState._load_parameters(model, state_dict['parameters'])

        additional_info = state_dict.get('additional_info', {})

        logger.info("Model loaded from %s", filepath)
        return model, additional_info

    @staticmethod
    def _load_parameters(model, values):
        named = dict(model.named_parameters())
        missing = named.keys() - values.keys()
        unexpected = values.keys() - named.keys()
        if missing or unexpected:
            raise ValueError(
                f"Saved parameters do not match the topology: "
                f"missing {sorted(missing)}, unexpected {sorted(unexpected)}"
            )
        for name, param in named.items():
            param.data = type(param.data)(values[name])
            param.zero_grad()

    @staticmethod
    def model_exists(filepath: str) -> bool:
        """Check if a model file exists"""
        return os.path.exists(filepath)


# Utility functions for easy use
def save_model(model, filepath: str, additional_info: Dict[str, Any] = None):
    """Convenience function to save a model"""
    ModelState.save_model(model, filepath, additional_info)

def load_model(filepath: str):
    """Convenience function to load a model"""
    return ModelState.load_model(filepath)

def model_exists(filepath: str) -> bool:
    """Convenience function to check if model exists"""
    return ModelState.model_exists(filepath)
