"""
Recipe ingestion package.

Responsibilities:
- Read recipe documents from a JSON file.
- Validate them against the multi-language recipe schema.
- Insert them into the configured document store.
"""
