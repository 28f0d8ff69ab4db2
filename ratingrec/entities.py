"""
Users, items and ratings of one immutable dataset snapshot.

Snapshots are assembled from objects or from already-loaded DataFrames; reading
files is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import pandas as pd

from .config import ITEM_COL, RATING_COL, USER_COL


@dataclass(frozen=True)
class User:
    user_id: int
    gender: str
    age: int


@dataclass(frozen=True)
class Item:
    item_id: int
    name: str


@dataclass(frozen=True)
class Rating:
    user_id: int
    item_id: int
    value: float


def ratings_to_frame(ratings: Iterable[Rating]) -> pd.DataFrame:
    """
    Ratings as a DataFrame with USER_COL/ITEM_COL/RATING_COL, input order kept.
    """
    rows = [(r.user_id, r.item_id, float(r.value)) for r in ratings]
    df = pd.DataFrame(rows, columns=[USER_COL, ITEM_COL, RATING_COL])
    return df.astype({RATING_COL: float})


def ratings_from_frame(
    df: pd.DataFrame,
    user_col: str = USER_COL,
    item_col: str = ITEM_COL,
    rating_col: str = RATING_COL,
) -> List[Rating]:
    return [
        Rating(int(u), int(i), float(v))
        for u, i, v in zip(df[user_col], df[item_col], df[rating_col])
    ]


@dataclass(frozen=True)
class Snapshot:
    users: Dict[int, User]
    items: Dict[int, Item]
    ratings: List[Rating] = field(default_factory=list)

    def ratings_frame(self) -> pd.DataFrame:
        return ratings_to_frame(self.ratings)


def snapshot_from_frames(
    users_df: pd.DataFrame,
    items_df: pd.DataFrame,
    ratings_df: pd.DataFrame,
    user_col: str = USER_COL,
    item_col: str = ITEM_COL,
    rating_col: str = RATING_COL,
    gender_col: str = "gender",
    age_col: str = "age",
    name_col: str = "title",
) -> Snapshot:
    """
    Build a Snapshot from DataFrames shaped like the MovieLens users/movies/ratings
    tables (one row per user, per item and per rating).
    """
    users = {
        int(uid): User(int(uid), str(g), int(a))
        for uid, g, a in zip(users_df[user_col], users_df[gender_col], users_df[age_col])
    }
    items_meta = items_df[[item_col, name_col]].drop_duplicates(subset=[item_col])
    items = {
        int(iid): Item(int(iid), "" if pd.isna(name) else str(name))
        for iid, name in zip(items_meta[item_col], items_meta[name_col])
    }
    ratings = ratings_from_frame(ratings_df, user_col=user_col, item_col=item_col, rating_col=rating_col)
    return Snapshot(users=users, items=items, ratings=ratings)
