"""Unit tests for the JSON catalog loader."""
import json
import os
import tempfile

import pytest

from remedy_finder.infrastructure.catalog.json_catalog import JsonCatalogLoader, load_allergens
from remedy_finder.infrastructure.config import Settings


@pytest.fixture
def temp_storage():
    """Create a temporary catalog file for testing."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.json') as f:
        temp_path = f.name

    yield temp_path

    # Cleanup
    if os.path.exists(temp_path):
        os.unlink(temp_path)


def write_json(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)


class TestJsonCatalogLoader:
    """Test catalog loading."""

    def test_keeps_file_order(self, temp_storage):
        """Test records are returned in file order."""
        write_json(temp_storage, [
            {"id": 7, "name": "Thym", "symptoms": ["toux"]},
            {"id": 2, "name": "Miel", "symptoms": ["toux"], "childrenAge": 1},
            {"id": 5, "name": "Citron", "symptoms": ["rhume"], "pregnancySafe": True},
        ])
        remedies = JsonCatalogLoader(temp_storage).load()

        assert [r.name for r in remedies] == ["Thym", "Miel", "Citron"]
        assert remedies[1].children_age == 1
        assert remedies[2].pregnancy_safe is True

    def test_skips_invalid_records(self, temp_storage):
        """Test invalid records and duplicate ids are skipped."""
        write_json(temp_storage, [
            {"id": 0, "name": "Thym", "symptoms": ["toux"]},
            {"id": 1, "name": "  ", "symptoms": ["toux"]},
            {"id": 2, "symptoms": ["toux"]},
            {"id": 3, "name": "Sauge", "symptoms": ["toux"], "childrenAge": -1},
            {"id": 0, "name": "Doublon", "symptoms": ["toux"]},
            "not a record",
            {"id": 4, "name": "Miel", "symptoms": ["toux"]},
        ])
        remedies = JsonCatalogLoader(temp_storage).load()

        assert [r.name for r in remedies] == ["Thym", "Miel"]

    def test_missing_or_corrupted_file(self, temp_storage):
        """Test unreadable catalogs load as empty."""
        assert JsonCatalogLoader(temp_storage + ".missing").load() == []

        with open(temp_storage, 'w') as f:
            f.write("[{")
        assert JsonCatalogLoader(temp_storage).load() == []

        write_json(temp_storage, {"id": 0})
        assert JsonCatalogLoader(temp_storage).load() == []

    def test_cached(self, temp_storage):
        """Test the catalog is read once."""
        write_json(temp_storage, [{"id": 0, "name": "Thym", "symptoms": ["toux"]}])
        loader = JsonCatalogLoader(temp_storage)
        first = loader.load()
        write_json(temp_storage, [])
        assert loader.load() is first


class TestBundledData:
    """Test the catalog shipped with the package."""

    def test_bundled_catalog_loads(self):
        """Test every bundled remedy is valid."""
        remedies = JsonCatalogLoader(Settings().catalog_path).load()

        assert len(remedies) == 10
        assert len({r.id for r in remedies}) == 10
        assert remedies[0].name == "Citron"

    def test_bundled_allergens_cover_catalog(self):
        """Test every allergen used by a remedy is a known allergen."""
        settings = Settings()
        known = {a.id for a in load_allergens(settings.allergens_path)}
        used = {a for r in JsonCatalogLoader(settings.catalog_path).load() for a in r.allergens}

        assert "citrus" in known
        assert used <= known
