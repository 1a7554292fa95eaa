"""Catalog loader - reads and writes resource forests as YAML or JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

import yaml

from .models import Category, coerce_forest

logger = logging.getLogger(__name__)


def load_catalog(source: Any) -> list[Category]:
    """
    Load a forest from a file path, YAML/JSON text, a mapping or a list.

    File format:
    ```yaml
    categories:
      - id: record-variables
        name: Record Variables
        kind: resource
        items:
          - id: account
            name: Account
            has_details: true
            children:
              - id: account-id
                name: Account ID
    ```
    A bare top-level list of categories is accepted as well.
    """
    if isinstance(source, (str, Path)) and _looks_like_path(source):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        forest = coerce_forest(data)
        logger.info(f"Loaded {len(forest)} categories from {path}")
        return forest
    return coerce_forest(source)


def dump_catalog(forest: Sequence[Category], path: str | Path) -> Path:
    """Write ``forest`` to ``path`` (YAML unless the suffix is .json)."""
    path = Path(path)
    payload = {"categories": [category.model_dump(mode="json") for category in forest]}
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix == ".json":
            json.dump(payload, f, indent=2)
        else:
            yaml.safe_dump(payload, f, sort_keys=False, allow_unicode=True)
    logger.info(f"Wrote {len(forest)} categories to {path}")
    return path


def _looks_like_path(source: str | Path) -> bool:
    if isinstance(source, Path):
        return True
    return "\n" not in source and Path(source).suffix in (".yaml", ".yml", ".json")


__all__ = ["dump_catalog", "load_catalog"]
