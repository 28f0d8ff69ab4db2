"""
Baseline decomposition of ratings into global, item and user bias terms.

Each observed rating is split as

    value = global_bias + item_bias[item] + user_bias[user] + bias_free[user][item]

The terms are fitted in dependency order (global -> item -> user -> residual),
every stage reading the finished table of the previous one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

import pandas as pd

from .config import ITEM_COL, RATING_COL, USER_COL
from .index import RatingIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BiasModel:
    global_bias: float
    item_bias: Dict[int, float]
    user_bias: Dict[int, float]
    bias_free: Dict[int, Dict[int, float]]  # user -> item -> residual
    residuals: pd.DataFrame  # USER_COL, ITEM_COL, "bias_free"

    def item(self, item_id: int) -> float:
        return self.item_bias.get(item_id, 0.0)

    def user(self, user_id: int) -> float:
        return self.user_bias.get(user_id, 0.0)

    def residual(self, user_id: int, item_id: int) -> float:
        return self.bias_free.get(user_id, {}).get(item_id, 0.0)

    def predict_baseline(self, user_id: int, item_id: int) -> float:
        return self.global_bias + self.item(item_id) + self.user(user_id)

    def describe(self) -> str:
        return (
            f"Global bias: {self.global_bias:.2f} "
            f"({len(self.item_bias)} item biases, {len(self.user_bias)} user biases)"
        )

    def log_summary(self) -> None:
        logger.info(self.describe())


def fit_biases(index: RatingIndex) -> BiasModel:
    df = index.frame
    if df.empty:
        logger.debug("No ratings; all biases default to 0.0")
        return BiasModel(
            global_bias=0.0,
            item_bias={},
            user_bias={},
            bias_free={},
            residuals=pd.DataFrame(columns=[USER_COL, ITEM_COL, "bias_free"]),
        )

    ratings = df[RATING_COL].to_numpy(dtype=float)
    global_bias = float(ratings.mean())

    deviation = pd.Series(ratings - global_bias, index=df.index)
    item_bias_s = deviation.groupby(df[ITEM_COL]).mean()
    item_term = df[ITEM_COL].map(item_bias_s)

    user_bias_s = (deviation - item_term).groupby(df[USER_COL]).mean()
    user_term = df[USER_COL].map(user_bias_s)

    residual = deviation - item_term - user_term
    residuals = pd.DataFrame(
        {
            USER_COL: df[USER_COL].to_numpy(),
            ITEM_COL: df[ITEM_COL].to_numpy(),
            "bias_free": residual.to_numpy(dtype=float),
        }
    )

    bias_free: Dict[int, Dict[int, float]] = {}
    for u, i, r in zip(residuals[USER_COL], residuals[ITEM_COL], residuals["bias_free"]):
        bias_free.setdefault(int(u), {})[int(i)] = float(r)

    model = BiasModel(
        global_bias=global_bias,
        item_bias={int(k): float(v) for k, v in item_bias_s.items()},
        user_bias={int(k): float(v) for k, v in user_bias_s.items()},
        bias_free=bias_free,
        residuals=residuals,
    )
    logger.debug(
        "Fitted biases: global=%.4f, %d items, %d users",
        global_bias,
        len(model.item_bias),
        len(model.user_bias),
    )
    return model
