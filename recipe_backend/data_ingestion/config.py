from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the recipe ingestion script.
    """

    source_path: Path = Path(__file__).resolve().parent.parent / "data" / "recipes.json"
    owner_id: str = "system"


DEFAULT_INGESTION_CONFIG = IngestionConfig()
