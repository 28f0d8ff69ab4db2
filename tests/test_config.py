import pytest

from ratingrec import config
from ratingrec.config import RecommenderConfig


def test_defaults_follow_module_constants():
    cfg = RecommenderConfig()
    assert cfg.num_recommendations == config.NUM_RECOMMENDATIONS == 10
    assert cfg.min_shared_items == 10
    assert cfg.top_k_neighbors == 10
    assert cfg.min_sim_users_per_item == 5
    assert cfg.popularity_threshold == 100
    assert cfg.profile_age_window == 5
    assert cfg.profile_min_ratings == 5


def test_with_overrides_returns_new_config():
    cfg = RecommenderConfig()
    tuned = cfg.with_overrides(top_k_neighbors=3)
    assert tuned.top_k_neighbors == 3
    assert cfg.top_k_neighbors == 10


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_recommendations": 0},
        {"top_k_neighbors": -1},
        {"min_shared_items": -1},
        {"popularity_threshold": -5},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        RecommenderConfig(**kwargs)
