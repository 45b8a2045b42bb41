import datetime
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceDocument:
    filename: str
    raw: bytes
    modified: Optional[datetime.datetime] = None


class FileSystemPostsRepo:
    """Markdown documents stored as `*.md` files in a single directory."""

    def __init__(self, content_dir: Path | str):
        self.content_dir = Path(content_dir)

    def list_documents(self) -> List[SourceDocument]:
        if not self.content_dir.is_dir():
            logger.warning(f"Content directory {self.content_dir} does not exist")
            return []

        documents = []
        for path in sorted(self.content_dir.glob("*.md")):
            document = self._read(path)
            if document is not None:
                documents.append(document)
        return documents

    def get_document(self, filename: str) -> Optional[SourceDocument]:
        path = self._path_for(filename)
        if not path.is_file():
            return None
        return self._read(path)

    def write_document(self, filename: str, data: bytes) -> None:
        path = self._path_for(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Wrote document {path}")

    def _path_for(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename:
            raise ValueError(f"Invalid document name: {filename!r}")
        return self.content_dir / name

    @staticmethod
    def _read(path: Path) -> Optional[SourceDocument]:
        try:
            raw = path.read_bytes()
            mtime = path.stat().st_mtime
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            return None
        return SourceDocument(
            filename=path.name,
            raw=raw,
            modified=datetime.datetime.fromtimestamp(mtime, tz=datetime.timezone.utc),
        )
