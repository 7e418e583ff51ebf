"""
Mood and ingredient based recipe recommendation.

Responsibilities:
- Validate suggestion requests before any storage query.
- Narrow recipes to candidates (mood, language-scoped ingredients, cook time).
- Score candidates against the requested ingredients and join live ratings.
- Rank deterministically and truncate to the configured result limit.
"""
