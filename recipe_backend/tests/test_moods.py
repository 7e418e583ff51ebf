from __future__ import annotations

import pytest

from recipe_backend.recipes.models import Mood
from recipe_backend.recommendations.moods import MOOD_TAGS, tags_for_mood


def test_every_mood_has_tags():
    assert set(MOOD_TAGS) == set(Mood)
    for tags in MOOD_TAGS.values():
        assert len(tags) == 3


def test_stressed_tags():
    assert tags_for_mood("stressed") == ("soothing", "warm", "light")


def test_unknown_or_missing_mood():
    assert tags_for_mood("grumpy") is None
    assert tags_for_mood("") is None
    assert tags_for_mood(None) is None


def test_mood_lookup_is_case_sensitive():
    assert tags_for_mood("Stressed") is None


def test_table_is_read_only():
    with pytest.raises(TypeError):
        MOOD_TAGS[Mood.happy] = ("anything",)
