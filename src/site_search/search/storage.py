"""Persistence for the search index artifact.

The artifact is a single JSON array of ``SearchDocument`` payloads using the
camelCase keys the site's frontend expects. Every indexing run rewrites it in
full; there is no incremental merge.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import os
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError

from site_search.domain.search import SearchDocument


logger = logging.getLogger(__name__)

DEFAULT_INDEX_PATH = Path("public") / "search-index.json"


class IndexArtifactError(ValueError):
    """Raised when the index artifact is missing, unreadable, or malformed."""


class IndexArtifactStore:
    """Read and atomically rewrite the index artifact at a fixed path."""

    def __init__(self, path: Path | str = DEFAULT_INDEX_PATH) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, documents: Iterable[SearchDocument]) -> Path:
        """Serialize ``documents`` and replace the artifact.

        The payload is written to a temporary sibling first so readers never
        observe a half-written file.
        """
        payload = [document.to_artifact() for document in documents]
        try:
            data = orjson.dumps(payload, option=orjson.OPT_INDENT_2)
        except orjson.JSONEncodeError as exc:
            raise IndexArtifactError(f"Failed to serialize index artifact {self.path}: {exc}") from exc

        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path.exists():
                tmp_path.unlink()
            raise IndexArtifactError(f"Failed to write index artifact {self.path}: {exc}") from exc

        logger.info("Wrote %d documents to %s", len(payload), self.path)
        return self.path

    def read(self) -> list[SearchDocument]:
        """Load every document from the artifact."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise IndexArtifactError(f"Index artifact not found: {self.path}") from exc
        except OSError as exc:
            raise IndexArtifactError(f"Index artifact unreadable: {self.path}: {exc}") from exc

        try:
            payload: Any = orjson.loads(data)
        except orjson.JSONDecodeError as exc:
            raise IndexArtifactError(f"Index artifact is not valid JSON: {self.path}: {exc}") from exc

        if not isinstance(payload, list):
            raise IndexArtifactError(f"Index artifact must be a JSON array: {self.path}")

        try:
            return [SearchDocument.model_validate(entry) for entry in payload]
        except ValidationError as exc:
            raise IndexArtifactError(f"Index artifact has malformed documents: {self.path}: {exc}") from exc
