"""
Recommendation strategies over one immutable snapshot.

Every strategy builds the shared RatingIndex at construction, turns a user into
an item -> score map and hands it to the common ranking rule. Nothing is
mutated after __init__, so one instance can serve concurrent readers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Optional, Type

import pandas as pd

from .bias import BiasModel, fit_biases
from .config import DEFAULT_CONFIG, ITEM_COL, RATING_COL, USER_COL, RecommenderConfig
from .entities import Item, Rating, Snapshot, User
from .index import RatingIndex, build_index
from .predict import predict_rating
from .ranking import rank_top_n, ranked_frame
from .similarity import SimilarityEngine

logger = logging.getLogger(__name__)


class Recommender(ABC):
    def __init__(
        self,
        users: Dict[int, User],
        items: Dict[int, Item],
        ratings: Iterable[Rating],
        config: Optional[RecommenderConfig] = None,
    ) -> None:
        if users is None or items is None or ratings is None:
            raise ValueError("users, items and ratings are required.")
        self.users = users
        self.items = items
        self.config = config or DEFAULT_CONFIG
        self.index: RatingIndex = build_index(ratings)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, config: Optional[RecommenderConfig] = None):
        if snapshot is None:
            raise ValueError("snapshot is required.")
        return cls(snapshot.users, snapshot.items, snapshot.ratings, config=config)

    @abstractmethod
    def score_items(self, user_id: int) -> Dict[int, float]:
        """Item -> score for every item eligible for `user_id`."""

    def recommend_top(self, user_id: int) -> List[Item]:
        return rank_top_n(
            self.score_items(user_id),
            self.index,
            self.items,
            n=self.config.num_recommendations,
        )

    def recommend_frame(self, user_id: int) -> pd.DataFrame:
        return ranked_frame(
            self.score_items(user_id),
            self.index,
            self.items,
            n=self.config.num_recommendations,
        )

    def rated_item_ids(self, user_id: int) -> FrozenSet[int]:
        return self.index.rated_items(user_id)

    def _require_user(self, user_id: int) -> User:
        if user_id not in self.users:
            raise KeyError(f"Unknown user id {user_id}")
        return self.users[user_id]


class SimilarityRecommender(Recommender):
    """
    User-based collaborative filtering on bias-corrected ratings.
    """

    def __init__(
        self,
        users: Dict[int, User],
        items: Dict[int, Item],
        ratings: Iterable[Rating],
        config: Optional[RecommenderConfig] = None,
    ) -> None:
        super().__init__(users, items, ratings, config=config)
        self.biases: BiasModel = fit_biases(self.index)
        self.engine = SimilarityEngine(
            self.biases,
            self.index,
            min_shared_items=self.config.min_shared_items,
            top_k=self.config.top_k_neighbors,
        )

    def get_similarity(self, u1: int, u2: int) -> float:
        return self.engine.similarity(u1, u2)

    def get_global_bias(self) -> float:
        return self.biases.global_bias

    def get_item_bias(self, item_id: int) -> float:
        return self.biases.item(item_id)

    def get_user_bias(self, user_id: int) -> float:
        return self.biases.user(user_id)

    def top_k_similar_users(self, user_id: int) -> Dict[int, float]:
        return self.engine.top_k_similar_users(user_id)

    def predict(self, user_id: int, item_id: int, neighbors: Optional[Dict[int, float]] = None) -> float:
        if neighbors is None:
            neighbors = self.top_k_similar_users(user_id)
        return predict_rating(self.biases, user_id, item_id, neighbors)

    def candidate_items(self, user_id: int, neighbors: Dict[int, float]) -> List[int]:
        excluded = self.rated_item_ids(user_id)
        support: Counter = Counter()
        for neighbor in neighbors:
            support.update(self.index.rated_items(neighbor))
        return sorted(
            i
            for i, c in support.items()
            if c >= self.config.min_sim_users_per_item and i not in excluded
        )

    def score_items(self, user_id: int) -> Dict[int, float]:
        self._require_user(user_id)
        neighbors = self.top_k_similar_users(user_id)
        candidates = self.candidate_items(user_id, neighbors)
        logger.debug(
            "User %s: %d neighbors, %d candidate items", user_id, len(neighbors), len(candidates)
        )
        return {i: predict_rating(self.biases, user_id, i, neighbors) for i in candidates}


class ProfileRecommender(Recommender):
    """
    Average ratings among users of the same gender and similar age.
    """

    def matching_profile_users(self, user_id: int) -> List[User]:
        current = self._require_user(user_id)
        window = self.config.profile_age_window
        return [
            u
            for u in self.users.values()
            if u.gender == current.gender
            and abs(u.age - current.age) <= window
            and u.user_id != current.user_id
        ]

    def score_items(self, user_id: int) -> Dict[int, float]:
        peer_ids = {u.user_id for u in self.matching_profile_users(user_id)}
        df = self.index.frame
        pool = df[df[USER_COL].isin(peer_ids)]
        if pool.empty:
            return {}
        stats = pool.groupby(ITEM_COL)[RATING_COL].agg(["count", "mean"])
        stats = stats[stats["count"] >= self.config.profile_min_ratings]
        excluded = self.rated_item_ids(user_id)
        return {
            int(i): float(m) for i, m in stats["mean"].items() if int(i) not in excluded
        }


class PopularityRecommender(Recommender):
    """
    Plain per-item average restricted to widely rated items.
    """

    def score_items(self, user_id: int) -> Dict[int, float]:
        excluded = self.rated_item_ids(user_id)
        threshold = self.config.popularity_threshold
        return {
            i: self.index.item_average(i)
            for i, c in self.index.count_by_item.items()
            if c >= threshold and i not in excluded
        }


STRATEGIES: Dict[str, Type[Recommender]] = {
    "similarity": SimilarityRecommender,
    "profile": ProfileRecommender,
    "popularity": PopularityRecommender,
}


def make_recommender(
    name: str,
    snapshot: Snapshot,
    config: Optional[RecommenderConfig] = None,
) -> Recommender:
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{name}'. Choose from {sorted(STRATEGIES)}.")
    return STRATEGIES[name].from_snapshot(snapshot, config=config)
