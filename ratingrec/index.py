"""
Lookup tables derived once from a ratings collection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Tuple, Union

import pandas as pd

from .config import ITEM_COL, RATING_COL, USER_COL
from .entities import Rating, ratings_from_frame, ratings_to_frame

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class RatingIndex:
    frame: pd.DataFrame  # columns USER_COL, ITEM_COL, RATING_COL
    ratings_by_item: Dict[int, Tuple[Rating, ...]]
    ratings_by_user: Dict[int, Tuple[Rating, ...]]
    count_by_item: Dict[int, int]
    average_by_item: Dict[int, float]
    rated_items_by_user: Dict[int, FrozenSet[int]]

    @property
    def n_ratings(self) -> int:
        return len(self.frame)

    @property
    def user_ids(self) -> List[int]:
        return sorted(self.ratings_by_user)

    @property
    def item_ids(self) -> List[int]:
        return sorted(self.ratings_by_item)

    def item_count(self, item_id: int) -> int:
        return self.count_by_item.get(item_id, 0)

    def item_average(self, item_id: int) -> float:
        return self.average_by_item.get(item_id, 0.0)

    def rated_items(self, user_id: int) -> FrozenSet[int]:
        return self.rated_items_by_user.get(user_id, _EMPTY)

    def item_ratings(self, item_id: int) -> Tuple[Rating, ...]:
        return self.ratings_by_item.get(item_id, ())

    def user_ratings(self, user_id: int) -> Tuple[Rating, ...]:
        return self.ratings_by_user.get(user_id, ())


def build_index(ratings: Union[Iterable[Rating], pd.DataFrame]) -> RatingIndex:
    """
    Group ratings by item and by user and precompute per-item count/mean and
    per-user rated-item sets. Accepts Rating objects or a ratings DataFrame.
    """
    if isinstance(ratings, pd.DataFrame):
        frame = ratings[[USER_COL, ITEM_COL, RATING_COL]].reset_index(drop=True)
        frame = frame.astype({RATING_COL: float})
        rating_list = ratings_from_frame(frame)
    else:
        rating_list = list(ratings)
        frame = ratings_to_frame(rating_list)

    by_item: Dict[int, List[Rating]] = {}
    by_user: Dict[int, List[Rating]] = {}
    for r in rating_list:
        by_item.setdefault(r.item_id, []).append(r)
        by_user.setdefault(r.user_id, []).append(r)

    stats = frame.groupby(ITEM_COL)[RATING_COL].agg(["count", "mean"])
    count_by_item = {int(k): int(v) for k, v in stats["count"].items()}
    average_by_item = {int(k): float(v) for k, v in stats["mean"].items()}

    rated_items_by_user = {
        u: frozenset(r.item_id for r in rs) for u, rs in by_user.items()
    }

    logger.debug(
        "Built rating index: %d ratings, %d users, %d items",
        len(frame),
        len(by_user),
        len(by_item),
    )
    return RatingIndex(
        frame=frame,
        ratings_by_item={k: tuple(v) for k, v in by_item.items()},
        ratings_by_user={k: tuple(v) for k, v in by_user.items()},
        count_by_item=count_by_item,
        average_by_item=average_by_item,
        rated_items_by_user=rated_items_by_user,
    )
