import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

from es2tabular.errors import StorageError, StoredFileNotFound

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._@+-]")


def user_directory_name(email: str) -> str:
    """Maps an email to a directory name that cannot escape the data dir."""
    name = _UNSAFE_CHARS.sub("_", email.strip().lower())
    if not name or set(name) <= {"."}:
        raise StorageError(f"Invalid user identifier: {email!r}")
    return name


class FileStore:
    """
    One user's directory of saved query responses (.json) and exports (.csv).
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def for_user(cls, data_dir: Union[str, Path], email: str) -> "FileStore":
        return cls(Path(data_dir) / user_directory_name(email))

    def path_for(self, filename: str) -> Path:
        if not filename or "/" in filename or "\\" in filename or filename in (".", "..") or "\x00" in filename:
            raise StorageError(f"Invalid filename: {filename!r}")
        return self.root / filename

    def existing_path(self, filename: str) -> Path:
        path = self.path_for(filename)
        if not path.is_file():
            raise StoredFileNotFound(filename)
        return path

    def save_json(self, filename: str, data: Any) -> Path:
        return self.save_text(filename, json.dumps(data, indent=2, ensure_ascii=False))

    def save_text(self, filename: str, text: str) -> Path:
        path = self.path_for(filename)
        path.write_text(text, encoding="utf-8")
        logger.info("Saved %s (%d bytes)", path, path.stat().st_size)
        return path

    def read_json(self, filename: str) -> Any:
        with self.existing_path(filename).open(encoding="utf-8") as f:
            return json.load(f)

    def delete(self, filename: str) -> None:
        self.existing_path(filename).unlink()
        logger.info("Deleted %s from %s", filename, self.root)

    def list_files(self) -> List[Dict[str, Any]]:
        """Newest first."""
        entries = []
        for path in self.root.iterdir():
            if not path.is_file():
                continue
            stats = path.stat()
            entries.append((stats.st_ctime, {
                "filename": path.name,
                "size": stats.st_size,
                "created": datetime.fromtimestamp(stats.st_ctime, tz=timezone.utc).isoformat(),
                "modified": datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat(),
                "url": f"/api/files/{path.name}",
            }))

        entries.sort(key=lambda e: e[0], reverse=True)
        return [entry for _, entry in entries]
