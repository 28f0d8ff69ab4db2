import logging

import pytest

from ratingrec.bias import fit_biases
from ratingrec.index import build_index


def test_taste_biases(taste_snapshot):
    model = fit_biases(build_index(taste_snapshot.ratings))

    assert model.global_bias == pytest.approx(3.0)
    assert model.item(1) == pytest.approx(0.0)
    assert model.item(13) == pytest.approx(-0.4)
    assert model.item(14) == pytest.approx(0.0)
    assert model.item(15) == pytest.approx(0.4)
    for u in range(1, 7):
        assert model.user(u) == pytest.approx(0.0, abs=1e-12)
    assert model.residual(1, 1) == pytest.approx(2.0)
    assert model.residual(4, 1) == pytest.approx(-2.0)
    assert model.residual(2, 13) == pytest.approx(2.4)
    assert model.residual(4, 15) == pytest.approx(1.6)


def test_decomposition_identity(irregular_snapshot):
    model = fit_biases(build_index(irregular_snapshot.ratings))

    for r in irregular_snapshot.ratings:
        rebuilt = (
            model.global_bias
            + model.item(r.item_id)
            + model.user(r.user_id)
            + model.bias_free[r.user_id][r.item_id]
        )
        assert rebuilt == pytest.approx(r.value)


def test_stage_formulas(irregular_snapshot):
    index = build_index(irregular_snapshot.ratings)
    model = fit_biases(index)
    values = [r.value for r in irregular_snapshot.ratings]
    g = sum(values) / len(values)

    assert model.global_bias == pytest.approx(g)
    for item_id, rs in index.ratings_by_item.items():
        expected = sum(r.value - g for r in rs) / len(rs)
        assert model.item(item_id) == pytest.approx(expected)
    for user_id, rs in index.ratings_by_user.items():
        expected = sum(r.value - g - model.item(r.item_id) for r in rs) / len(rs)
        assert model.user(user_id) == pytest.approx(expected)


def test_absent_keys_and_empty_dataset():
    model = fit_biases(build_index([]))

    assert model.global_bias == 0.0
    assert model.item(1) == 0.0
    assert model.user(1) == 0.0
    assert model.residual(1, 1) == 0.0
    assert model.predict_baseline(1, 1) == 0.0


def test_summary_is_logged(taste_snapshot, caplog):
    model = fit_biases(build_index(taste_snapshot.ratings))
    with caplog.at_level(logging.INFO, logger="ratingrec.bias"):
        model.log_summary()
    assert "Global bias: 3.00" in caplog.text
