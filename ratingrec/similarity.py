"""
User-user similarity on bias-free ratings with a minimum-overlap guard.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet

import numpy as np
from scipy.sparse import csr_matrix

from .bias import BiasModel
from .config import ITEM_COL, MIN_SHARED_ITEMS, TOP_K_NEIGHBORS, USER_COL
from .index import RatingIndex

logger = logging.getLogger(__name__)


class SimilarityEngine:
    """
    Dot-product similarity between users over the items both rated.

    Pairs sharing fewer than `min_shared_items` items get exactly 0.0, so a
    positive similarity also means "comparable enough to be a neighbor".
    """

    def __init__(
        self,
        biases: BiasModel,
        index: RatingIndex,
        min_shared_items: int = MIN_SHARED_ITEMS,
        top_k: int = TOP_K_NEIGHBORS,
    ) -> None:
        self.index = index
        self.min_shared_items = min_shared_items
        self.top_k = top_k

        users = index.user_ids
        items = index.item_ids
        self.user_map: Dict[int, int] = {u: i for i, u in enumerate(users)}
        self.inv_user_map: Dict[int, int] = {i: u for u, i in self.user_map.items()}
        self.item_map: Dict[int, int] = {it: i for i, it in enumerate(items)}

        res = biases.residuals
        rows = res[USER_COL].map(self.user_map).to_numpy(dtype=int)
        cols = res[ITEM_COL].map(self.item_map).to_numpy(dtype=int)
        shape = (len(users), len(items))

        # shape (n_users, n_items)
        self.residual_csr = csr_matrix(
            (res["bias_free"].to_numpy(dtype=float), (rows, cols)), shape=shape
        )
        self.observed_csr = csr_matrix((np.ones(len(rows)), (rows, cols)), shape=shape)
        self.observed_csr.data[:] = 1.0
        logger.debug("Similarity engine ready: %d users x %d items", *shape)

    def shared_items(self, u1: int, u2: int) -> FrozenSet[int]:
        return self.index.rated_items(u1) & self.index.rated_items(u2)

    def similarity(self, u1: int, u2: int) -> float:
        if u1 not in self.user_map or u2 not in self.user_map:
            return 0.0
        if len(self.shared_items(u1, u2)) < self.min_shared_items:
            return 0.0
        a = self.residual_csr.getrow(self.user_map[u1])
        b = self.residual_csr.getrow(self.user_map[u2])
        return float(a.multiply(b).sum())

    def similarities_for(self, user_id: int) -> Dict[int, float]:
        """
        Similarity of `user_id` to every other user, one sparse row product.
        """
        if user_id not in self.user_map:
            return {}
        uidx = self.user_map[user_id]
        dots = (self.residual_csr @ self.residual_csr.getrow(uidx).T).toarray().ravel()
        shared = (self.observed_csr @ self.observed_csr.getrow(uidx).T).toarray().ravel()
        sims = np.where(shared >= self.min_shared_items, dots, 0.0)
        return {
            self.inv_user_map[j]: float(sims[j]) for j in range(len(sims)) if j != uidx
        }

    def top_k_similar_users(self, user_id: int) -> Dict[int, float]:
        """
        The `top_k` users with positive similarity, most similar first.
        Equal scores at the cutoff are kept in ascending user-id order.
        """
        positive = [(u, s) for u, s in self.similarities_for(user_id).items() if s > 0.0]
        positive.sort(key=lambda us: (-us[1], us[0]))
        return dict(positive[: self.top_k])
