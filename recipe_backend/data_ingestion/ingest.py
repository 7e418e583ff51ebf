from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ..recipes.models import RecipeCreate
from ..recipes.service import create_recipe
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)


def load_documents(path: Path) -> list[dict]:
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("recipes", [])
    return list(data)


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> int:
    """
    Load recipes from ``config.source_path`` into the store.

    Invalid documents are logged and skipped. Returns the number inserted.
    """
    inserted = 0
    for index, raw in enumerate(load_documents(config.source_path)):
        owner = raw.pop("userId", None) or config.owner_id
        try:
            body = RecipeCreate.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping recipe #%d: %s", index, exc.errors())
            continue
        create_recipe(body, owner)
        inserted += 1
    return inserted


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    source = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_INGESTION_CONFIG.source_path
    count = run_ingestion(IngestionConfig(source_path=source))
    print(f"Ingestion complete. {count} recipes loaded from: {source}")
