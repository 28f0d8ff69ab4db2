import pytest

from ratingrec.entities import Item, Rating, Snapshot, User


def _items(n):
    return {i: Item(i, f"Item {i:02d}") for i in range(1, n + 1)}


@pytest.fixture
def taste_snapshot():
    """
    Two taste groups over items 1-12:
      group A (users 1, 2, 3) rate items 1-6 with 5 and items 7-12 with 1,
      group B (users 4, 5, 6) rate them the other way round.
    Users 2-6 also rate items 13-15 (A: 5/3/1, B: 1/3/5).

    Every bias except item 13 (-0.4) and item 15 (+0.4) is zero and the global
    bias is 3.0. Same-group users have similarity 48 over items 1-12.
    """
    users = {
        1: User(1, "F", 30),
        2: User(2, "F", 32),
        3: User(3, "M", 41),
        4: User(4, "M", 25),
        5: User(5, "F", 28),
        6: User(6, "M", 60),
    }
    ratings = []
    for u in (1, 2, 3, 4, 5, 6):
        fan = u in (1, 2, 3)
        for i in range(1, 13):
            if i <= 6:
                ratings.append(Rating(u, i, 5.0 if fan else 1.0))
            else:
                ratings.append(Rating(u, i, 1.0 if fan else 5.0))
    for u in (2, 3, 4, 5, 6):
        fan = u in (2, 3)
        ratings.append(Rating(u, 13, 5.0 if fan else 1.0))
        ratings.append(Rating(u, 14, 3.0))
        ratings.append(Rating(u, 15, 1.0 if fan else 5.0))
    return Snapshot(users=users, items=_items(15), ratings=ratings)


@pytest.fixture
def irregular_snapshot():
    users = {u: User(u, "M" if u % 2 else "F", 20 + 3 * u) for u in range(1, 9)}
    ratings = []
    for u in range(1, 9):
        for i in range(1, 16):
            if (u * 7 + i * 3) % 5 == 0:
                continue
            value = float((u * i + u + 2 * i) % 5 + 1)
            ratings.append(Rating(u, i, value))
    return Snapshot(users=users, items=_items(15), ratings=ratings)
