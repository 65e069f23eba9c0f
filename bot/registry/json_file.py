"""
JSON file subscriber store.

The whole registry lives in one pretty-printed JSON document
(contacts.json by default). Reads fail open; writes go to a temporary
file in the same directory which then replaces the document, so a
reader never sees a half-written file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Union

from bot.errors import StorageUnavailable
from bot.registry.base import SubscriberStore
from bot.registry.types import (
    Registry,
    registry_from_document,
    registry_to_document,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


class JsonFileSubscriberStore(SubscriberStore):
    """
    File-backed registry.

    Design:
    - One document: {"contacts": {wa_id: {"name", "joinedAt"}}}
    - Missing file == empty registry (first run)
    - Corrupt file == empty registry, logged; next save overwrites it
    - Malformed record == skipped, logged; the other records still load
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Callable[[], str] = utc_now_iso,
    ):
        super().__init__(clock=clock)
        self.path = Path(path)

    def load(self) -> Registry:
        try:
            return self._read()
        except StorageUnavailable as e:
            logger.warning(
                f"Registry unavailable, treating as empty: {e}",
                extra={"path": str(self.path)},
            )
            return {}

    def _read(self) -> Registry:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
            return registry_from_document(document)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(str(e)) from e

    def save(self, registry: Registry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(registry_to_document(registry), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(
            f"Registry saved: {len(registry)} subscribers",
            extra={"path": str(self.path)},
        )
