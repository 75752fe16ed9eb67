import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from werkzeug.security import safe_join

from .filenames import format_bytes

CHUNK_SIZE = 1024 * 1024

@dataclass
class StoredFile:
    name: str
    size: int
    modified: float

    @property
    def size_human(self) -> str:
        return format_bytes(self.size)

    @property
    def modified_human(self) -> str:
        return datetime.fromtimestamp(self.modified).strftime("%Y-%m-%d %H:%M:%S")

class ShareStorage:
    """The flat directory every shared file lives in."""

    def __init__(self, root: Path):
        # Absolute, so send_file never joins it onto the package directory
        self.root = Path(root).resolve()

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def list_files(self) -> list[StoredFile]:
        entries = []
        for p in self.root.iterdir():
            if p.name.startswith("."):
                continue
            try:
                st = p.stat()
            except FileNotFoundError:
                # Deleted while we were listing
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            entries.append(StoredFile(name=p.name, size=st.st_size, modified=st.st_mtime))

        entries.sort(key=lambda f: f.name)
        return entries

    def resolve(self, name: str) -> Path | None:
        """Path for name inside the directory, or None if it would escape it."""
        joined = safe_join(str(self.root), name)
        if joined is None:
            return None
        return Path(joined)

    def save(self, name: str, stream: BinaryIO) -> Path:
        dest = self.resolve(name)
        if dest is None or dest.parent != self.root:
            raise ValueError(f"Invalid filename: {name!r}")

        # Each upload writes its own hidden .part, then moves it into place.
        # Same-name uploads are last writer wins.
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{dest.name}.", suffix=".part")
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as out:
                for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
                    out.write(chunk)
            os.replace(tmp, dest)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        return dest

    def delete(self, name: str) -> None:
        path = self.resolve(name)
        if path is None:
            raise FileNotFoundError(name)
        os.remove(path)
