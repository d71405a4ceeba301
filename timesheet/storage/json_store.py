"""JSON file store with one file per collection."""

import json
import logging
import os
import tempfile
import threading
import uuid

from timesheet.config import DEFAULT_DATA_DIR
from timesheet.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonStore:
    """Stores each collection as a list of dicts in ``<data_dir>/<name>.json``.

    ``lock`` is re-entrant. Callers hold it around a load/modify/save
    sequence so concurrent writers do not drop each other's changes.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR):
        self.data_dir = data_dir
        self.lock = threading.RLock()
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def load(self, collection: str) -> list[dict]:
        path = self._path(collection)
        if not os.path.isfile(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {collection} from {path}: {e}") from e

    def save(self, collection: str, items: list[dict]) -> None:
        """Write a collection atomically via a uniquely named temporary file."""
        path = self._path(collection)
        tmp_path = None
        try:
            with self.lock:
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=self.data_dir,
                    prefix=f".{collection}.",
                    suffix=".tmp",
                    delete=False,
                ) as f:
                    tmp_path = f.name
                    json.dump(items, f, indent=2)
                os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Cannot write {collection} to {path}: {e}") from e
        logger.debug("Saved %d %s", len(items), collection)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex[:12]
