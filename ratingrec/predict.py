"""
Rating prediction from bias terms plus neighbors' bias-free opinions.
"""

from __future__ import annotations

from typing import Mapping

from .bias import BiasModel


def weighted_residual(biases: BiasModel, item_id: int, neighbors: Mapping[int, float]) -> float:
    """
    Similarity-weighted mean of bias_free[n][item] over neighbors who rated item.
    0.0 when none did or the weights sum to zero.
    """
    numerator = 0.0
    denom = 0.0
    for neighbor, weight in neighbors.items():
        rated = biases.bias_free.get(neighbor)
        if not rated or item_id not in rated:
            continue
        numerator += weight * rated[item_id]
        denom += weight
    if denom == 0.0:
        return 0.0
    return numerator / denom


def predict_rating(
    biases: BiasModel,
    user_id: int,
    item_id: int,
    neighbors: Mapping[int, float],
) -> float:
    return biases.predict_baseline(user_id, item_id) + weighted_residual(biases, item_id, neighbors)
