"""
Storage interface and the local-vault implementation.

The pipeline never performs raw I/O itself: it computes vault-relative paths
and content and calls through this minimal capability interface. Paths are
POSIX-style and relative to the vault root; the empty string is the root.

Example workflow:
    # 1. storage = LocalVaultStorage("~/Vault")
    # 2. storage.create_folder("_assets/supernote/pdf")
    # 3. handle = storage.write_binary("_assets/supernote/pdf/idea.pdf", pdf_bytes)
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path, PurePosixPath

from ..domain.filename_allocator import build_file_path
from ..domain.models import StoredFile
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for storage hosts."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if a file or folder exists at ``path``."""
        pass

    @abstractmethod
    def create_folder(self, path: str) -> None:
        """Create ``path`` and its parents. A no-op if it already exists.

        Raises:
            StorageError: If the folder cannot be created.
        """
        pass

    @abstractmethod
    def write_text(self, path: str, content: str) -> StoredFile:
        """Create a new UTF-8 text file.

        Raises:
            StorageError: If the file cannot be created.
        """
        pass

    @abstractmethod
    def write_binary(self, path: str, data: bytes) -> StoredFile:
        """Create a new binary file.

        Raises:
            StorageError: If the file cannot be created.
        """
        pass

    @abstractmethod
    def default_attachment_path(self, suggested_name: str) -> str:
        """Return a free path for an attachment using the host's own naming.

        Used when no custom folder is configured. The host decides both the
        folder and how collisions are avoided.
        """
        pass

    def read_binary(self, path: str) -> bytes:
        """Read a file. Optional; used by the CLI to load source notes."""
        raise NotImplementedError(f"{type(self).__name__} cannot read files")


class LocalVaultStorage(Storage):
    """Storage backed by a folder on the local filesystem.

    Files are created exclusively (``open(..., "x")``): if another writer
    created the allocated path after it was checked, the write fails with
    StorageError instead of overwriting.

    Args:
        root: Filesystem path of the vault root.
        attachment_folder: Vault-relative folder for attachments placed by
            :meth:`default_attachment_path`. Empty means the vault root.
    """

    def __init__(self, root: str | Path, attachment_folder: str = "") -> None:
        self.root = Path(root).expanduser().resolve()
        self.attachment_folder = (attachment_folder or "").strip("/")

    def _full_path(self, path: str) -> Path:
        relative = PurePosixPath(path.strip("/")) if path else PurePosixPath()
        if ".." in relative.parts:
            raise StorageError(f"Path escapes the vault: {path}", path=path)
        return self.root.joinpath(*relative.parts)

    def exists(self, path: str) -> bool:
        return self._full_path(path).exists()

    def create_folder(self, path: str) -> None:
        if not path or path == "/":
            return
        target = self._full_path(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create folder '{path}'", path=path, original_exception=e
            ) from e
        logger.debug(f"Ensured folder exists: {target}")

    def write_text(self, path: str, content: str) -> StoredFile:
        return self.write_binary(path, content.encode("utf-8"))

    def write_binary(self, path: str, data: bytes) -> StoredFile:
        target = self._full_path(path)
        try:
            with open(target, "xb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(
                f"Failed to write '{path}'", path=path, original_exception=e
            ) from e
        logger.debug(f"Wrote {len(data)} bytes to {target}")
        return StoredFile(path=path, size=len(data))

    def read_binary(self, path: str) -> bytes:
        target = self._full_path(path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(
                f"Failed to read '{path}'", path=path, original_exception=e
            ) from e

    def default_attachment_path(self, suggested_name: str) -> str:
        name = PurePosixPath(suggested_name)
        stem, extension = name.stem, name.suffix.lstrip(".")
        self.create_folder(self.attachment_folder)

        # host convention: "name.png", "name 1.png", "name 2.png", ...
        candidate = build_file_path(self.attachment_folder, stem, extension)
        counter = 0
        while self.exists(candidate):
            counter += 1
            candidate = build_file_path(
                self.attachment_folder, f"{stem} {counter}", extension
            )
        return candidate
