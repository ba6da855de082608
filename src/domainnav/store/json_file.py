"""JSON-file backed entity store.

Document structure:
    {
        "categories": [ {CategoryDict}, ... ],
        "domains":    [ {DomainDict}, ... ],
        "pages":      [ {PageDict}, ... ]
    }

The whole document is held in memory and rewritten after every write.
"""

import json
import logging
from pathlib import Path

from domainnav.core.errors import ValidationError
from domainnav.core.models import Category, Domain, Page
from domainnav.store.memory import MemoryStore

logger = logging.getLogger(__name__)


class JsonFileStore(MemoryStore):
    """Store persisted to a single JSON document."""

    def __init__(self, path: Path) -> None:
        """Initialize store and load the document if it exists.

        Args:
            path: Location of the JSON data file

        Raises:
            ValueError: If the file exists but is not a valid document
        """
        super().__init__()
        self._path = path
        self.reload()

    @property
    def path(self) -> Path:
        """Location of the JSON data file."""
        return self._path

    def reload(self) -> None:
        """Replace the in-memory contents with what is on disk.

        A missing file yields an empty store.

        Raises:
            ValueError: If the file is not a valid document
        """
        if not self._path.exists():
            logger.debug(f"Data file {self._path} does not exist, starting empty")
            self._load((), (), ())
            return

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid data file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Data file {self._path} must contain an object")

        try:
            categories = [Category.from_dict(c) for c in _entries(data, "categories")]
            domains = [Domain.from_dict(d) for d in _entries(data, "domains")]
            pages = [Page.from_dict(p) for p in _entries(data, "pages")]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise ValueError(f"Malformed entity in data file {self._path}: {e!r}") from e

        self._load(categories, domains, pages)
        logger.info(
            f"Loaded {len(domains)} domains and {len(pages)} pages from {self._path}"
        )

    def _changed(self) -> None:
        self._write()

    def _write(self) -> None:
        document = {
            "categories": [c.to_dict() for c in self._categories.values()],
            "domains": [d.to_dict() for d in self._domains.values()],
            "pages": [p.to_dict() for p in self._pages.values()],
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        tmp_path.replace(self._path)


def _entries(data: dict[str, object], key: str) -> list[object]:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise ValidationError(f"{key} must be a list")
    return entries
