from __future__ import annotations
import logging
import os
import stat
import tempfile

from .errors import CodecError, StoreConfigError, StoreNotFoundError

log = logging.getLogger(__name__)


class FileStorage:
    """
    Whole-file I/O for the backing JSON file.

    Reads return the complete content. Writes go to a temp file in the same
    directory which is fsync'ed and swapped in with os.replace, so readers see
    either the old or the new collection, never a torn one.
    """

    def __init__(self, path: str) -> None:
        self.path = os.fspath(path)

    @property
    def directory(self) -> str:
        return os.path.dirname(os.path.abspath(self.path))

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def size(self) -> int:
        return os.path.getsize(self.path)

    def create(self) -> bool:
        """Create parent directories and a zero-length file. Returns False if it already existed."""
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(self.path, "xb"):
                pass
        except FileExistsError:
            return False
        except OSError as e:
            raise StoreConfigError(f"failed to create the file: {self.path}", path=self.path) from e
        self._fsync_dir()
        log.info("JSON file not found, created a new JSON file %s", self.path)
        return True

    def read_bytes(self) -> bytes:
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise StoreNotFoundError(
                f"JSON file {os.path.basename(self.path)} does not exist in path {os.path.abspath(self.path)}",
                path=self.path,
            ) from e
        except OSError as e:
            raise CodecError(f"failed to read {self.path}: {e}", path=self.path) from e

    def write_bytes(self, data: bytes) -> None:
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{os.path.basename(self.path)}.", suffix=".tmp", dir=self.directory
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if self.exists():
                os.chmod(tmp_path, stat.S_IMODE(os.stat(self.path).st_mode))
            self.replace_file(tmp_path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise CodecError(f"failed to save into JSON file {self.path}: {e}", path=self.path) from e
        log.debug("wrote %d bytes to %s", len(data), self.path)

    def replace_file(self, tmp_path: str) -> None:
        os.replace(tmp_path, self.path)
        self._fsync_dir()

    def _fsync_dir(self) -> None:
        # Best-effort: not every platform can open a directory for fsync
        if os.name == "nt":
            return
        try:
            fd = os.open(self.directory, os.O_RDONLY)
        except OSError as e:
            log.debug("cannot open %s for fsync: %s", self.directory, e)
            return
        try:
            os.fsync(fd)
        except OSError as e:
            log.debug("directory fsync failed for %s: %s", self.directory, e)
        finally:
            os.close(fd)
