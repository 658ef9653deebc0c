"""File access for detectors.

Every file read made during detection goes through a FileSource, which
resolves candidate paths against a configurable filesystem root. Pointing
the root at a mounted image detects that image instead of the running host;
MemoryFileSource replaces the filesystem entirely with canned contents.
"""

import io
import os
from typing import BinaryIO, Iterable, Optional

from distrodetect.logging import DetectLogger


class CandidateNotFoundError(LookupError):
    """Raised when none of the candidate paths is a readable regular file."""

    def __init__(self, paths):
        self.paths = list(paths)
        super().__init__(
            f"unable to create a reader for any of the specified paths: {self.paths}"
        )


class FileSource:
    """Resolves and opens files below a filesystem root."""

    def __init__(self, root: str = os.sep, log: DetectLogger = None):
        self.root = root
        self.log = log or DetectLogger()

    def resolve(self, path: str) -> str:
        """Apply the filesystem root to an absolute path."""
        if self.root == os.sep:
            return path
        return os.path.normpath(os.path.join(self.root, path.lstrip(os.sep)))

    def open_first(self, paths: Iterable[str]) -> tuple:
        """Open the first candidate that exists and is not a directory.

        Returns (binary handle, resolved path). Raises CandidateNotFoundError
        if no candidate exists, or OSError if the chosen one cannot be opened.
        """
        paths = list(paths)
        for path in paths:
            resolved = self.resolve(path)
            if not self._is_file(resolved):
                continue
            try:
                return self._open(resolved), resolved
            except OSError as e:
                self.log.error(f"unable to open file ({resolved}): {e}")
                raise
        raise CandidateNotFoundError(paths)

    def read_text(self, *paths: str) -> Optional[str]:
        """Return the contents of the first existing candidate, or None.

        Open and read failures are logged and reported as None, the same as
        a missing file.
        """
        try:
            handle, resolved = self.open_first(paths)
        except (CandidateNotFoundError, OSError):
            return None

        with handle:
            try:
                data = handle.read()
            except OSError as e:
                self.log.error(f"unable to read file ({resolved}): {e}")
                return None
        return data.decode("utf-8", errors="replace")

    def exists(self, *paths: str) -> bool:
        """True if any candidate resolves to a regular file."""
        return any(self._is_file(self.resolve(p)) for p in paths)

    # --- Internal ---

    def _is_file(self, resolved: str) -> bool:
        return os.path.exists(resolved) and not os.path.isdir(resolved)

    def _open(self, resolved: str) -> BinaryIO:
        return open(resolved, "rb")


class MemoryFileSource(FileSource):
    """FileSource backed by a dict of path -> contents instead of a filesystem.

    Keys are resolved paths, so with the default root they are the plain
    absolute paths the detectors ask for (e.g. "/etc/os-release").
    """

    def __init__(self, files: dict = None, root: str = os.sep, log: DetectLogger = None):
        super().__init__(root=root, log=log)
        self.files = {}
        for path, contents in (files or {}).items():
            if isinstance(contents, str):
                contents = contents.encode("utf-8")
            self.files[path] = contents

    def _is_file(self, resolved: str) -> bool:
        return resolved in self.files

    def _open(self, resolved: str) -> BinaryIO:
        return io.BytesIO(self.files[resolved])
