"""
Utility helpers.
"""

import logging
import sys
from typing import Optional, Union

import numpy as np

RandomSource = Union[None, int, np.random.Generator]


def make_rng(seed: RandomSource = None) -> np.random.Generator:
    """Return a NumPy generator from a seed, or pass an existing one through."""

    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def normalize(weights: np.ndarray, axis: Optional[int] = None) -> np.ndarray:
    """Scale non-negative weights to sum to one along ``axis``."""

    weights = np.asarray(weights, dtype=float)
    total = weights.sum(axis=axis, keepdims=axis is not None)
    return weights / total


def get_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def rescale(weights: np.ndarray, axis: Optional[int] = None) -> np.ndarray:
    """Divide by the largest weight along ``axis``; normalized values are unchanged."""

    weights = np.asarray(weights, dtype=float)
    return weights / weights.max(axis=axis, keepdims=axis is not None)
