from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from recipe_backend.store import CandidateQuery, DuplicateError
from recipe_backend.store.mongo import MongoRecipes, MongoReviews, MongoUsers, ensure_indexes


def _db() -> MagicMock:
    return MagicMock()


def test_ensure_indexes_makes_reviews_unique_per_user_and_recipe():
    db = _db()
    ensure_indexes(db)
    db.reviews.create_index.assert_any_call(
        [("userId", 1), ("recipeId", 1)],
        unique=True,
    )
    db.users.create_index.assert_any_call([("email", 1)], unique=True)


def test_review_upsert_reports_created():
    db = _db()
    oid = ObjectId()
    db.reviews.update_one.return_value.upserted_id = oid
    db.reviews.find_one.return_value = {
        "_id": oid, "userId": "u1", "recipeId": "r1", "rating": 4, "comment": "",
    }

    doc, created = MongoReviews(db).upsert("u1", "r1", 4, "")

    assert created is True
    assert doc["id"] == str(oid)
    args, kwargs = db.reviews.update_one.call_args
    assert args[0] == {"userId": "u1", "recipeId": "r1"}
    assert args[1]["$set"]["rating"] == 4
    assert "createdAt" in args[1]["$setOnInsert"]
    assert kwargs == {"upsert": True}


def test_review_upsert_existing_is_update():
    db = _db()
    db.reviews.update_one.return_value.upserted_id = None
    db.reviews.find_one.return_value = {"_id": ObjectId(), "userId": "u1", "recipeId": "r1", "rating": 2}

    _, created = MongoReviews(db).upsert("u1", "r1", 2, "")

    assert created is False


def test_review_upsert_recovers_from_concurrent_insert():
    db = _db()
    db.reviews.update_one.side_effect = [DuplicateKeyError("dup"), MagicMock()]
    db.reviews.find_one.return_value = {"_id": ObjectId(), "userId": "u1", "recipeId": "r1", "rating": 3}

    doc, created = MongoReviews(db).upsert("u1", "r1", 3, "")

    assert created is False
    assert doc["rating"] == 3
    assert db.reviews.update_one.call_count == 2


def test_insert_unique_returns_none_on_duplicate():
    db = _db()
    db.reviews.insert_one.side_effect = DuplicateKeyError("dup")
    assert MongoReviews(db).insert_unique("u1", "r1", 5, "") is None


def test_rating_stats_uses_one_aggregation():
    db = _db()
    db.reviews.aggregate.return_value = [
        {"_id": "r1", "average": 4.5, "count": 2},
        {"_id": "r2", "average": 3, "count": 1},
    ]

    stats = MongoReviews(db).rating_stats(["r1", "r2", "r3"])

    assert stats["r1"].average == 4.5
    assert stats["r2"].count == 1
    db.reviews.aggregate.assert_called_once()
    pipeline = db.reviews.aggregate.call_args.args[0]
    assert pipeline[0] == {"$match": {"recipeId": {"$in": ["r1", "r2", "r3"]}}}


def test_candidate_query_translation():
    db = _db()
    db.recipes.find.return_value = []

    MongoRecipes(db).find_candidates(
        CandidateQuery(lang="ar", mood="happy", ingredients=("بيضة", "دقيق"), max_cook_time=20),
    )

    db.recipes.find.assert_called_once_with({
        "mood": "happy",
        "ingredients.name.ar": {"$in": ["بيضة", "دقيق"]},
        "cookTime": {"$lte": 20},
    })


def test_invalid_object_id_is_not_found():
    db = _db()
    assert MongoRecipes(db).get("not-an-id") is None
    db.recipes.find_one.assert_not_called()


def test_user_duplicate_key_maps_to_field():
    db = _db()
    db.users.insert_one.side_effect = DuplicateKeyError(
        "dup", details={"keyValue": {"email": "a@example.com"}},
    )
    with pytest.raises(DuplicateError) as info:
        MongoUsers(db).insert({"username": "a", "email": "a@example.com", "passwordHash": "x"})
    assert info.value.field == "email"
