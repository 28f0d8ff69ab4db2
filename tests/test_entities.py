import pandas as pd

from ratingrec.entities import Item, Rating, User, ratings_from_frame, snapshot_from_frames


def test_snapshot_from_frames():
    users_df = pd.DataFrame({"user_id": [1, 2], "gender": ["F", "M"], "age": [25, 40]})
    items_df = pd.DataFrame({"item_id": [10, 11, 11], "title": ["Heat (1995)", None, None]})
    ratings_df = pd.DataFrame({"user_id": [1, 2], "item_id": [10, 11], "rating": [4, 2]})

    snap = snapshot_from_frames(users_df, items_df, ratings_df)

    assert snap.users[2] == User(2, "M", 40)
    assert snap.items == {10: Item(10, "Heat (1995)"), 11: Item(11, "")}
    assert snap.ratings == [Rating(1, 10, 4.0), Rating(2, 11, 2.0)]

    frame = snap.ratings_frame()
    assert list(frame.columns) == ["user_id", "item_id", "rating"]
    assert frame["rating"].dtype == float


def test_ratings_from_frame_custom_columns():
    df = pd.DataFrame({"uid": [3], "mid": [7], "stars": [5]})
    assert ratings_from_frame(df, user_col="uid", item_col="mid", rating_col="stars") == [
        Rating(3, 7, 5.0)
    ]
