"""JSON file backed hash store for discovered categories."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonHashStore:
    """Read-only hash store backed by a JSON file.

    Implements the ``hgetall``/``hget`` subset used by CategoryProvider, so
    discovered categories exported from Redis can be used offline.

    File layout:
        {"categories:discovered": {"<id>": "<json record>" | {record}}}
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file to read. Re-read on every call.
        """
        self.path = path

    def _load(self) -> dict:
        data = json.loads(self.path.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a JSON object")
        return data

    async def hgetall(self, key: str) -> dict[str, str]:
        """Get all fields of a hash; values are JSON strings."""
        fields = self._load().get(key) or {}
        return {
            field: value if isinstance(value, str) else json.dumps(value)
            for field, value in fields.items()
        }

    async def hget(self, key: str, field: str) -> str | None:
        """Get one field of a hash, or None."""
        return (await self.hgetall(key)).get(field)
