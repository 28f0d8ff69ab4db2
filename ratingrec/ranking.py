"""
Canonical ordering applied to every strategy's score map.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

import pandas as pd

from .config import ITEM_COL, NUM_RECOMMENDATIONS
from .entities import Item
from .index import RatingIndex


def ranked_frame(
    scores: Mapping[int, float],
    index: RatingIndex,
    items: Dict[int, Item],
    n: int = NUM_RECOMMENDATIONS,
) -> pd.DataFrame:
    """
    Sort by score desc, rating count desc, item name asc and keep the first n.
    """
    item_ids = list(scores)
    rec_df = pd.DataFrame(
        {
            ITEM_COL: item_ids,
            "name": [items[i].name for i in item_ids],
            "score": [float(scores[i]) for i in item_ids],
            "count": [index.item_count(i) for i in item_ids],
        }
    )
    rec_df = rec_df.sort_values(
        ["score", "count", "name"], ascending=[False, False, True], kind="mergesort"
    )
    return rec_df.head(n).reset_index(drop=True)


def rank_top_n(
    scores: Mapping[int, float],
    index: RatingIndex,
    items: Dict[int, Item],
    n: int = NUM_RECOMMENDATIONS,
) -> List[Item]:
    if not scores:
        return []
    top = ranked_frame(scores, index, items, n=n)
    return [items[i] for i in top[ITEM_COL].tolist()]
