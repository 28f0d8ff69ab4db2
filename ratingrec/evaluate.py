"""
Offline evaluation helpers: hold-out split, Precision/Recall@K and MAE.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .config import ITEM_COL, RATING_COL, USER_COL
from .entities import Snapshot, ratings_from_frame
from .recommenders import Recommender, SimilarityRecommender


def split_snapshot(
    snapshot: Snapshot,
    test_size: float = 0.1,
    random_state: int = 42,
) -> Tuple[Snapshot, pd.DataFrame]:
    """
    Random hold-out split of the ratings. Users and items are kept whole in the
    training snapshot; the held-out ratings come back as a DataFrame.
    """
    df = snapshot.ratings_frame()
    train, test = train_test_split(df, test_size=test_size, random_state=random_state)
    train_snapshot = Snapshot(
        users=snapshot.users,
        items=snapshot.items,
        ratings=ratings_from_frame(train.sort_index()),
    )
    return train_snapshot, test.reset_index(drop=True)


def precision_recall_at_k(
    recommender: Recommender,
    test_df: pd.DataFrame,
    threshold: float = 3.5,
) -> Tuple[float, float]:
    """
    Mean Precision@K and Recall@K over test users known to the recommender,
    K being the recommender's configured result size.
    """
    k = recommender.config.num_recommendations
    precisions = []
    recalls = []
    for uid, grp in test_df.groupby(USER_COL):
        uid = int(uid)
        if uid not in recommender.users:
            continue
        true_positive_items = set(grp.loc[grp[RATING_COL] >= threshold, ITEM_COL].astype(int))
        if not true_positive_items:
            continue
        rec_items = {it.item_id for it in recommender.recommend_top(uid)}
        hits = true_positive_items & rec_items
        precisions.append(len(hits) / k)
        recalls.append(len(hits) / len(true_positive_items))

    if not precisions:
        return 0.0, 0.0
    return float(np.mean(precisions)), float(np.mean(recalls))


def mae_on_known(recommender: SimilarityRecommender, test_df: pd.DataFrame) -> float:
    """
    Mean Absolute Error of bias + neighborhood predictions on held-out ratings.
    Rows whose user has no training ratings are skipped.
    """
    abs_err = []
    neighborhoods = {}
    for uid, item, true_r in zip(test_df[USER_COL], test_df[ITEM_COL], test_df[RATING_COL]):
        uid = int(uid)
        if not recommender.rated_item_ids(uid):
            continue
        if uid not in neighborhoods:
            neighborhoods[uid] = recommender.top_k_similar_users(uid)
        pred = recommender.predict(uid, int(item), neighborhoods[uid])
        abs_err.append(abs(pred - float(true_r)))
    if not abs_err:
        return 0.0
    return float(np.mean(abs_err))
