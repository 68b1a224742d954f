"""Writers that put generated artifacts somewhere."""

import shutil
from pathlib import Path
from typing import Dict, Protocol, Set

from ..logging_config import get_logger

logger = get_logger(__name__)


class OutputWriter(Protocol):
    """Where artifacts end up."""

    def ensure_dir(self, path: Path) -> None: ...

    def write_file(self, path: Path, content: str) -> None: ...

    def clean(self, path: Path) -> None: ...


class FileSystemWriter:
    """Writes artifacts to disk, overwriting existing files."""

    def ensure_dir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, content: str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {path}")

    def clean(self, path: Path) -> None:
        path = Path(path)
        if path.exists():
            logger.info(f"Removing {path}")
            shutil.rmtree(path)


class MemoryWriter:
    """Keeps artifacts in a dict; used for dry runs and tests."""

    def __init__(self):
        self.files: Dict[Path, str] = {}
        self.directories: Set[Path] = set()

    def ensure_dir(self, path: Path) -> None:
        self.directories.add(Path(path))

    def write_file(self, path: Path, content: str) -> None:
        self.files[Path(path)] = content

    def clean(self, path: Path) -> None:
        path = Path(path)
        self.files = {
            p: text for p, text in self.files.items()
            if p != path and path not in p.parents
        }
        self.directories = {
            d for d in self.directories if d != path and path not in d.parents
        }

    def read(self, path) -> str:
        return self.files[Path(path)]
