"""
Tunable constants shared by every recommendation strategy.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

USER_COL = "user_id"
ITEM_COL = "item_id"
RATING_COL = "rating"

NUM_RECOMMENDATIONS = 10

# similarity strategy
MIN_SHARED_ITEMS = 10
TOP_K_NEIGHBORS = 10
MIN_SIM_USERS_PER_ITEM = 5

# peer strategies
POPULARITY_THRESHOLD = 100
PROFILE_AGE_WINDOW = 5
PROFILE_MIN_RATINGS = 5


@dataclass(frozen=True)
class RecommenderConfig:
    num_recommendations: int = NUM_RECOMMENDATIONS
    min_shared_items: int = MIN_SHARED_ITEMS
    top_k_neighbors: int = TOP_K_NEIGHBORS
    min_sim_users_per_item: int = MIN_SIM_USERS_PER_ITEM
    popularity_threshold: int = POPULARITY_THRESHOLD
    profile_age_window: int = PROFILE_AGE_WINDOW
    profile_min_ratings: int = PROFILE_MIN_RATINGS

    def __post_init__(self) -> None:
        if self.num_recommendations <= 0:
            raise ValueError("num_recommendations must be positive.")
        if self.top_k_neighbors <= 0:
            raise ValueError("top_k_neighbors must be positive.")
        for name in (
            "min_shared_items",
            "min_sim_users_per_item",
            "popularity_threshold",
            "profile_age_window",
            "profile_min_ratings",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative.")

    def with_overrides(self, **kwargs) -> "RecommenderConfig":
        return replace(self, **kwargs)


DEFAULT_CONFIG = RecommenderConfig()
