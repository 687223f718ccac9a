"""Remedy catalog and allergen list loaded from JSON files."""
import json
import logging
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from remedy_finder.application.ports import CatalogPort
from remedy_finder.domain.models import RemedyRecord


logger = logging.getLogger(__name__)


class Allergen(BaseModel):
    id: str
    name: str


def _read_json_list(path: str) -> list:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Cannot load %s: %s", path, e)
        return []
    if not isinstance(data, list):
        logger.error("%s must contain a JSON array", path)
        return []
    return data


class JsonCatalogLoader(CatalogPort):
    """
    Loads remedies from a JSON array, in file order.

    File order is the tie-break order of the matcher, so the catalog file is
    expected to be kept in a stable order.
    """

    def __init__(self, path: str):
        self.path = path
        self._cache: Optional[List[RemedyRecord]] = None

    def load(self) -> List[RemedyRecord]:
        if self._cache is not None:
            return self._cache

        remedies: List[RemedyRecord] = []
        seen_ids = set()
        for i, raw in enumerate(_read_json_list(self.path)):
            try:
                remedy = RemedyRecord.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping invalid remedy at index %d: %s", i, e)
                continue
            if remedy.id in seen_ids:
                logger.warning("Skipping remedy %s: duplicate id %s", remedy.name, remedy.id)
                continue
            seen_ids.add(remedy.id)
            remedies.append(remedy)

        logger.info("Loaded %d remedies from %s", len(remedies), self.path)
        self._cache = remedies
        return remedies


def load_allergens(path: str) -> List[Allergen]:
    allergens = []
    for raw in _read_json_list(path):
        try:
            allergens.append(Allergen.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping invalid allergen %r: %s", raw, e)
    return allergens
