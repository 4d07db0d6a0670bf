from datetime import datetime, timedelta, timezone

from quickcook.models import Recipe
from quickcook.services import queries
from quickcook.services.aggregates import create_recipe_with_ingredients


def _seed(db_session, user, rows):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    for minutes, title, category in rows:
        db_session.add(
            Recipe(
                user_id=user.id,
                title=title,
                category=category,
                created_at=base + timedelta(minutes=minutes),
            )
        )
    db_session.commit()


def test_list_recipes_scoped_and_ordered(db_session, owner, stranger):
    _seed(db_session, owner, [(0, "Pancakes", "breakfast"), (5, "Cake", "dessert")])
    _seed(db_session, stranger, [(10, "Stranger Cake", "dessert")])

    titles = [r.title for r in queries.list_recipes(db_session, owner.id)]
    assert titles == ["Cake", "Pancakes"]


def test_list_recipes_search_and_category(db_session, owner):
    _seed(
        db_session,
        owner,
        [
            (0, "Pancakes", "breakfast"),
            (1, "Carrot Cake", "dessert"),
            (2, "Apple Pie", "dessert"),
        ],
    )

    assert [r.title for r in queries.list_recipes(db_session, owner.id, search="CAKE")] == [
        "Carrot Cake",
        "Pancakes",
    ]
    assert [r.title for r in queries.list_recipes(db_session, owner.id, category="dessert")] == [
        "Apple Pie",
        "Carrot Cake",
    ]
    assert [
        r.title
        for r in queries.list_recipes(db_session, owner.id, search="cake", category="dessert")
    ] == ["Carrot Cake"]


def test_empty_filters_are_ignored(db_session, owner):
    _seed(db_session, owner, [(0, "Pancakes", None), (1, "Soup", "dinner")])

    result = queries.list_recipes(db_session, owner.id, search="", category="")
    assert [r.title for r in result] == ["Soup", "Pancakes"]


def test_equal_timestamps_list_latest_insert_first(db_session, owner):
    titles = ["first", "second", "third", "fourth", "fifth"]
    _seed(db_session, owner, [(0, title, None) for title in titles])

    assert [r.title for r in queries.list_recipes(db_session, owner.id)] == titles[::-1]


def test_created_at_round_trips_as_utc(db_session, owner):
    _seed(db_session, owner, [(0, "Pancakes", None)])
    db_session.expire_all()

    recipe = queries.list_recipes(db_session, owner.id)[0]
    assert recipe.created_at == datetime(2024, 5, 1, tzinfo=timezone.utc)


def test_list_ingredients_in_position_order(db_session, owner):
    recipe = create_recipe_with_ingredients(
        db_session, owner.id, {"title": "Soup"}, [{"name": "Salt"}, {"name": "Water"}, {"name": "Leek"}]
    )

    assert [i.name for i in queries.list_ingredients(db_session, recipe)] == ["Salt", "Water", "Leek"]
