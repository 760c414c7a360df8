"""JSON catalog loader with validation."""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from schemas.catalog import CatalogEntry

logger = logging.getLogger(__name__)


class CatalogUnavailableError(RuntimeError):
    """Raised when the tool catalog cannot be loaded at startup."""


def load_catalog(path: Union[str, Path]) -> tuple[CatalogEntry, ...]:
    """
    Load and validate the tool catalog.

    Args:
        path: Path to a JSON file holding an array of tool records

    Returns:
        Tuple of catalog entries in file order

    Raises:
        CatalogUnavailableError: If the file is missing, malformed, or has
            duplicate ids
    """
    catalog_path = Path(path)
    if not catalog_path.is_file():
        raise CatalogUnavailableError(f"Catalog file not found: {catalog_path}")

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogUnavailableError(f"Could not read catalog {catalog_path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogUnavailableError(
            f"Catalog {catalog_path} must contain a JSON array, got {type(raw).__name__}"
        )

    return parse_catalog(raw, source=str(catalog_path))


def parse_catalog(records: list, source: str = "<memory>") -> tuple[CatalogEntry, ...]:
    """Validate raw records into catalog entries, enforcing unique ids."""
    entries = []
    seen_ids = set()

    for index, record in enumerate(records):
        try:
            entry = CatalogEntry.model_validate(record)
        except ValidationError as e:
            raise CatalogUnavailableError(
                f"Invalid catalog record #{index} in {source}: {e}"
            ) from e

        if entry.id in seen_ids:
            raise CatalogUnavailableError(f"Duplicate tool id {entry.id} in {source}")
        seen_ids.add(entry.id)
        entries.append(entry)

    logger.info(f"Loaded {len(entries)} tools from {source}")
    return tuple(entries)
