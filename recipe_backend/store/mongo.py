from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .models import CandidateQuery, DuplicateError, RatingStats

Document = dict[str, Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _oid(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _out(doc: Document | None) -> Document | None:
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _duplicate_field(exc: DuplicateKeyError) -> str:
    key_value = (exc.details or {}).get("keyValue") or {}
    return next(iter(key_value), "username")


def ensure_indexes(db: Database) -> None:
    db.users.create_index([("username", ASCENDING)], unique=True)
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.recipes.create_index([("mood", ASCENDING)])
    db.recipes.create_index([("tags", ASCENDING)])
    for lang in ("en", "fr", "ar"):
        db.recipes.create_index([(f"ingredients.name.{lang}", ASCENDING)])
    # One review per user and recipe
    db.reviews.create_index(
        [("userId", ASCENDING), ("recipeId", ASCENDING)],
        unique=True,
    )
    db.reviews.create_index([("recipeId", ASCENDING), ("createdAt", DESCENDING)])


class MongoUsers:
    def __init__(self, db: Database) -> None:
        self._col = db.users

    def insert(self, doc: Document) -> Document:
        now = _now()
        stored = {**doc, "createdAt": now, "updatedAt": now}
        stored.setdefault("favorites", [])
        try:
            result = self._col.insert_one(stored)
        except DuplicateKeyError as exc:
            raise DuplicateError(_duplicate_field(exc)) from exc
        stored["_id"] = result.inserted_id
        return _out(stored)

    def get(self, user_id: str) -> Document | None:
        oid = _oid(user_id)
        return _out(self._col.find_one({"_id": oid})) if oid else None

    def find_by_email(self, email: str) -> Document | None:
        return _out(self._col.find_one({"email": email}))

    def find_by_username(self, username: str) -> Document | None:
        return _out(self._col.find_one({"username": username}))

    def search(self, search: str, skip: int, limit: int) -> tuple[list[Document], int]:
        query = {"username": {"$regex": re.escape(search), "$options": "i"}}
        docs = self._col.find(query).skip(skip).limit(limit)
        return [_out(d) for d in docs], self._col.count_documents(query)

    def update(self, user_id: str, fields: Document) -> Document | None:
        oid = _oid(user_id)
        if oid is None:
            return None
        try:
            self._col.update_one({"_id": oid}, {"$set": {**fields, "updatedAt": _now()}})
        except DuplicateKeyError as exc:
            raise DuplicateError(_duplicate_field(exc)) from exc
        return self.get(user_id)

    def delete(self, user_id: str) -> bool:
        oid = _oid(user_id)
        return bool(oid) and self._col.delete_one({"_id": oid}).deleted_count == 1

    def add_favorite(self, user_id: str, recipe_id: str) -> bool:
        result = self._col.update_one(
            {"_id": _oid(user_id), "favorites": {"$ne": recipe_id}},
            {"$push": {"favorites": recipe_id}},
        )
        return result.modified_count == 1

    def remove_favorite(self, user_id: str, recipe_id: str) -> None:
        self._col.update_one({"_id": _oid(user_id)}, {"$pull": {"favorites": recipe_id}})


class MongoRecipes:
    def __init__(self, db: Database) -> None:
        self._col = db.recipes

    def insert(self, doc: Document) -> Document:
        now = _now()
        stored = {**doc, "createdAt": now, "updatedAt": now}
        stored.setdefault("averageRating", 0.0)
        stored["_id"] = self._col.insert_one(stored).inserted_id
        return _out(stored)

    def get(self, recipe_id: str) -> Document | None:
        oid = _oid(recipe_id)
        return _out(self._col.find_one({"_id": oid})) if oid else None

    def get_many(self, recipe_ids: list[str]) -> list[Document]:
        oids = [oid for oid in map(_oid, recipe_ids) if oid]
        return [_out(d) for d in self._col.find({"_id": {"$in": oids}})]

    def update(self, recipe_id: str, fields: Document) -> Document | None:
        oid = _oid(recipe_id)
        if oid is None:
            return None
        self._col.update_one({"_id": oid}, {"$set": {**fields, "updatedAt": _now()}})
        return self.get(recipe_id)

    def delete(self, recipe_id: str) -> bool:
        oid = _oid(recipe_id)
        return bool(oid) and self._col.delete_one({"_id": oid}).deleted_count == 1

    def search(
        self,
        lang: str,
        search: str,
        mood: str | None,
        skip: int,
        limit: int,
    ) -> tuple[list[Document], int]:
        query: Document = {}
        if search:
            query[f"title.{lang}"] = {"$regex": re.escape(search), "$options": "i"}
        if mood is not None:
            query["mood"] = mood
        docs = self._col.find(query).skip(skip).limit(limit)
        return [_out(d) for d in docs], self._col.count_documents(query)

    def find_candidates(self, query: CandidateQuery) -> list[Document]:
        mongo_query: Document = {}
        if query.mood is not None:
            mongo_query["mood"] = query.mood
        if query.ingredients:
            mongo_query[f"ingredients.name.{query.lang}"] = {"$in": list(query.ingredients)}
        if query.max_cook_time is not None:
            mongo_query["cookTime"] = {"$lte": query.max_cook_time}
        return [_out(d) for d in self._col.find(mongo_query)]

    def find_by_mood(self, mood: str, limit: int) -> list[Document]:
        return [_out(d) for d in self._col.find({"mood": mood}).limit(limit)]

    def find_by_tags(self, tags: list[str] | tuple[str, ...], limit: int) -> list[Document]:
        return [_out(d) for d in self._col.find({"tags": {"$in": list(tags)}}).limit(limit)]

    def set_average_rating(self, recipe_id: str, value: float) -> None:
        self._col.update_one({"_id": _oid(recipe_id)}, {"$set": {"averageRating": value}})


class MongoReviews:
    def __init__(self, db: Database) -> None:
        self._col = db.reviews

    def upsert(
        self,
        user_id: str,
        recipe_id: str,
        rating: float,
        comment: str,
    ) -> tuple[Document, bool]:
        key = {"userId": user_id, "recipeId": recipe_id}
        now = _now()
        update = {
            "$set": {"rating": rating, "comment": comment, "updatedAt": now},
            "$setOnInsert": {"createdAt": now},
        }
        try:
            result = self._col.update_one(key, update, upsert=True)
            created = result.upserted_id is not None
        except DuplicateKeyError:
            # A concurrent upsert won the insert; apply ours as an update.
            self._col.update_one(key, {"$set": update["$set"]})
            created = False
        return _out(self._col.find_one(key)), created

    def insert_unique(
        self,
        user_id: str,
        recipe_id: str,
        rating: float,
        comment: str,
    ) -> Document | None:
        now = _now()
        doc = {
            "userId": user_id,
            "recipeId": recipe_id,
            "rating": rating,
            "comment": comment,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            doc["_id"] = self._col.insert_one(doc).inserted_id
        except DuplicateKeyError:
            return None
        return _out(doc)

    def get(self, review_id: str) -> Document | None:
        oid = _oid(review_id)
        return _out(self._col.find_one({"_id": oid})) if oid else None

    def find_one(self, user_id: str, recipe_id: str) -> Document | None:
        return _out(self._col.find_one({"userId": user_id, "recipeId": recipe_id}))

    def for_recipe(self, recipe_id: str) -> list[Document]:
        return [_out(d) for d in self._col.find({"recipeId": recipe_id})]

    def list_for_recipe(self, recipe_id: str, skip: int, limit: int) -> tuple[list[Document], int]:
        query = {"recipeId": recipe_id}
        docs = self._col.find(query).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        return [_out(d) for d in docs], self._col.count_documents(query)

    def delete(self, review_id: str) -> bool:
        oid = _oid(review_id)
        return bool(oid) and self._col.delete_one({"_id": oid}).deleted_count == 1

    def delete_for_recipe(self, recipe_id: str) -> int:
        return self._col.delete_many({"recipeId": recipe_id}).deleted_count

    def delete_for_user(self, user_id: str) -> list[str]:
        recipe_ids = sorted(self._col.distinct("recipeId", {"userId": user_id}))
        self._col.delete_many({"userId": user_id})
        return recipe_ids

    def rating_stats(self, recipe_ids: list[str]) -> dict[str, RatingStats]:
        pipeline = [
            {"$match": {"recipeId": {"$in": list(recipe_ids)}}},
            {"$group": {
                "_id": "$recipeId",
                "average": {"$avg": "$rating"},
                "count": {"$sum": 1},
            }},
        ]
        return {
            str(row["_id"]): RatingStats(average=float(row["average"]), count=int(row["count"]))
            for row in self._col.aggregate(pipeline)
        }


def connect(config: StoreConfig = DEFAULT_STORE_CONFIG):
    from . import Store

    client = MongoClient(config.mongodb_uri, serverSelectionTimeoutMS=config.server_selection_timeout_ms)
    db = client[config.mongodb_db]
    ensure_indexes(db)
    return Store(users=MongoUsers(db), recipes=MongoRecipes(db), reviews=MongoReviews(db))
