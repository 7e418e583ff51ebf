from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Any

import pandas as pd
from bson import ObjectId

from .models import CandidateQuery, DuplicateError, RatingStats

Document = dict[str, Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(ObjectId())


def _page(docs: list[Document], skip: int, limit: int) -> list[Document]:
    return [copy.deepcopy(d) for d in docs[skip:skip + limit]]


class MemoryUsers:
    def __init__(self, lock: threading.RLock) -> None:
        self._lock = lock
        self._users: dict[str, Document] = {}

    def _check_unique(self, doc: Document, exclude_id: str | None = None) -> None:
        for existing in self._users.values():
            if existing["id"] == exclude_id:
                continue
            for field in ("username", "email"):
                if field in doc and existing.get(field) == doc[field]:
                    raise DuplicateError(field)

    def _find(self, field: str, value: str) -> Document | None:
        with self._lock:
            for doc in self._users.values():
                if doc[field] == value:
                    return copy.deepcopy(doc)
        return None

    def insert(self, doc: Document) -> Document:
        with self._lock:
            self._check_unique(doc)
            stored = {**copy.deepcopy(doc), "id": _new_id(), "createdAt": _now()}
            stored.setdefault("favorites", [])
            stored["updatedAt"] = stored["createdAt"]
            self._users[stored["id"]] = stored
            return copy.deepcopy(stored)

    def get(self, user_id: str) -> Document | None:
        with self._lock:
            doc = self._users.get(user_id)
            return copy.deepcopy(doc) if doc else None

    def find_by_email(self, email: str) -> Document | None:
        return self._find("email", email)

    def find_by_username(self, username: str) -> Document | None:
        return self._find("username", username)

    def search(self, search: str, skip: int, limit: int) -> tuple[list[Document], int]:
        needle = search.lower()
        with self._lock:
            matched = [d for d in self._users.values() if needle in d["username"].lower()]
            return _page(matched, skip, limit), len(matched)

    def update(self, user_id: str, fields: Document) -> Document | None:
        with self._lock:
            doc = self._users.get(user_id)
            if doc is None:
                return None
            self._check_unique(fields, exclude_id=user_id)
            doc.update(copy.deepcopy(fields))
            doc["updatedAt"] = _now()
            return copy.deepcopy(doc)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def add_favorite(self, user_id: str, recipe_id: str) -> bool:
        with self._lock:
            doc = self._users.get(user_id)
            if doc is None or recipe_id in doc["favorites"]:
                return False
            doc["favorites"].append(recipe_id)
            return True

    def remove_favorite(self, user_id: str, recipe_id: str) -> None:
        with self._lock:
            doc = self._users.get(user_id)
            if doc is not None:
                doc["favorites"] = [rid for rid in doc["favorites"] if rid != recipe_id]


class MemoryRecipes:
    def __init__(self, lock: threading.RLock) -> None:
        self._lock = lock
        self._recipes: dict[str, Document] = {}

    def insert(self, doc: Document) -> Document:
        with self._lock:
            now = _now()
            stored = {**copy.deepcopy(doc), "id": _new_id(), "createdAt": now, "updatedAt": now}
            stored.setdefault("averageRating", 0.0)
            self._recipes[stored["id"]] = stored
            return copy.deepcopy(stored)

    def get(self, recipe_id: str) -> Document | None:
        with self._lock:
            doc = self._recipes.get(recipe_id)
            return copy.deepcopy(doc) if doc else None

    def get_many(self, recipe_ids: list[str]) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(self._recipes[rid]) for rid in recipe_ids if rid in self._recipes]

    def update(self, recipe_id: str, fields: Document) -> Document | None:
        with self._lock:
            doc = self._recipes.get(recipe_id)
            if doc is None:
                return None
            doc.update(copy.deepcopy(fields))
            doc["updatedAt"] = _now()
            return copy.deepcopy(doc)

    def delete(self, recipe_id: str) -> bool:
        with self._lock:
            return self._recipes.pop(recipe_id, None) is not None

    def search(
        self,
        lang: str,
        search: str,
        mood: str | None,
        skip: int,
        limit: int,
    ) -> tuple[list[Document], int]:
        needle = search.lower()
        with self._lock:
            matched = [
                d for d in self._recipes.values()
                if needle in d["title"].get(lang, "").lower()
                and (mood is None or d.get("mood") == mood)
            ]
            return _page(matched, skip, limit), len(matched)

    def find_candidates(self, query: CandidateQuery) -> list[Document]:
        wanted = set(query.ingredients)
        matched: list[Document] = []
        with self._lock:
            for doc in self._recipes.values():
                if query.mood is not None and doc.get("mood") != query.mood:
                    continue
                if wanted:
                    names = {ing["name"].get(query.lang) for ing in doc.get("ingredients", [])}
                    if names.isdisjoint(wanted):
                        continue
                if query.max_cook_time is not None:
                    cook_time = doc.get("cookTime")
                    if cook_time is None or cook_time > query.max_cook_time:
                        continue
                matched.append(copy.deepcopy(doc))
        return matched

    def find_by_mood(self, mood: str, limit: int) -> list[Document]:
        with self._lock:
            matched = [d for d in self._recipes.values() if d.get("mood") == mood]
            return _page(matched, 0, limit)

    def find_by_tags(self, tags: list[str] | tuple[str, ...], limit: int) -> list[Document]:
        wanted = set(tags)
        with self._lock:
            matched = [d for d in self._recipes.values() if wanted & set(d.get("tags", []))]
            return _page(matched, 0, limit)

    def set_average_rating(self, recipe_id: str, value: float) -> None:
        with self._lock:
            doc = self._recipes.get(recipe_id)
            if doc is not None:
                doc["averageRating"] = value


class MemoryReviews:
    def __init__(self, lock: threading.RLock) -> None:
        self._lock = lock
        # One slot per (userId, recipeId); insertion order is creation order.
        self._reviews: dict[tuple[str, str], Document] = {}

    def _by_id(self, review_id: str) -> tuple[tuple[str, str], Document] | None:
        with self._lock:
            for key, doc in self._reviews.items():
                if doc["id"] == review_id:
                    return key, doc
        return None

    def upsert(
        self,
        user_id: str,
        recipe_id: str,
        rating: float,
        comment: str,
    ) -> tuple[Document, bool]:
        with self._lock:
            now = _now()
            existing = self._reviews.get((user_id, recipe_id))
            if existing is not None:
                existing.update({"rating": rating, "comment": comment, "updatedAt": now})
                return copy.deepcopy(existing), False
            doc = {
                "id": _new_id(),
                "userId": user_id,
                "recipeId": recipe_id,
                "rating": rating,
                "comment": comment,
                "createdAt": now,
                "updatedAt": now,
            }
            self._reviews[(user_id, recipe_id)] = doc
            return copy.deepcopy(doc), True

    def insert_unique(
        self,
        user_id: str,
        recipe_id: str,
        rating: float,
        comment: str,
    ) -> Document | None:
        with self._lock:
            if (user_id, recipe_id) in self._reviews:
                return None
            doc, _ = self.upsert(user_id, recipe_id, rating, comment)
            return doc

    def get(self, review_id: str) -> Document | None:
        with self._lock:
            found = self._by_id(review_id)
            return copy.deepcopy(found[1]) if found else None

    def find_one(self, user_id: str, recipe_id: str) -> Document | None:
        with self._lock:
            doc = self._reviews.get((user_id, recipe_id))
            return copy.deepcopy(doc) if doc else None

    def for_recipe(self, recipe_id: str) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(d) for d in self._reviews.values() if d["recipeId"] == recipe_id]

    def list_for_recipe(self, recipe_id: str, skip: int, limit: int) -> tuple[list[Document], int]:
        with self._lock:
            newest_first = [
                d for d in reversed(list(self._reviews.values())) if d["recipeId"] == recipe_id
            ]
            return _page(newest_first, skip, limit), len(newest_first)

    def delete(self, review_id: str) -> bool:
        with self._lock:
            found = self._by_id(review_id)
            if found is None:
                return False
            del self._reviews[found[0]]
            return True

    def delete_for_recipe(self, recipe_id: str) -> int:
        with self._lock:
            keys = [k for k, d in self._reviews.items() if d["recipeId"] == recipe_id]
            for key in keys:
                del self._reviews[key]
            return len(keys)

    def delete_for_user(self, user_id: str) -> list[str]:
        """Remove every review by ``user_id``; return the affected recipe ids."""
        with self._lock:
            keys = [k for k in self._reviews if k[0] == user_id]
            for key in keys:
                del self._reviews[key]
            return sorted({k[1] for k in keys})

    def rating_stats(self, recipe_ids: list[str]) -> dict[str, RatingStats]:
        wanted = set(recipe_ids)
        with self._lock:
            rows = [
                {"recipeId": d["recipeId"], "rating": d["rating"]}
                for d in self._reviews.values() if d["recipeId"] in wanted
            ]
        frame = pd.DataFrame(rows, columns=["recipeId", "rating"])
        if frame.empty:
            return {}
        grouped = frame.groupby("recipeId")["rating"].agg(["mean", "count"])
        return {
            str(rid): RatingStats(average=float(row["mean"]), count=int(row["count"]))
            for rid, row in grouped.iterrows()
        }


class MemoryStore:
    """Process-local store; every read and write goes through one shared lock."""

    def __init__(self) -> None:
        lock = threading.RLock()
        self.users = MemoryUsers(lock)
        self.recipes = MemoryRecipes(lock)
        self.reviews = MemoryReviews(lock)
