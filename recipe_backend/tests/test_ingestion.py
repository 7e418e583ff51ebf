import json
from pathlib import Path

from recipe_backend.data_ingestion.config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from recipe_backend.data_ingestion.ingest import load_documents, run_ingestion
from recipe_backend.recipes.models import Language
from recipe_backend.recipes.service import list_recipes

from conftest import recipe_payload


def test_bundled_sample_data_loads():
    """The shipped sample file is valid and lands fully in the store."""
    expected = len(load_documents(DEFAULT_INGESTION_CONFIG.source_path))

    inserted = run_ingestion()

    assert inserted == expected > 0
    page = list_recipes(Language.en, limit=50)
    assert page.total == expected
    assert all(r.user_id == "system" for r in page.recipes)


def test_invalid_documents_are_skipped(tmp_path: Path):
    broken = recipe_payload(title="Broken")
    del broken["title"]["ar"]
    source = tmp_path / "recipes.json"
    source.write_text(
        json.dumps([recipe_payload(title="Good"), broken], ensure_ascii=False),
        encoding="utf-8",
    )

    inserted = run_ingestion(IngestionConfig(source_path=source, owner_id="importer"))

    assert inserted == 1
    page = list_recipes(Language.en)
    assert [r.title.en for r in page.recipes] == ["Good"]
    assert page.recipes[0].user_id == "importer"


def test_wrapped_document_and_explicit_owner(tmp_path: Path):
    doc = {**recipe_payload(title="Owned"), "userId": "chef-7"}
    source = tmp_path / "recipes.json"
    source.write_text(json.dumps({"recipes": [doc]}), encoding="utf-8")

    assert run_ingestion(IngestionConfig(source_path=source)) == 1
    assert list_recipes(Language.en).recipes[0].user_id == "chef-7"
