"""SHA-256 hashing of strings, byte sequences and files."""

from __future__ import annotations

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable

__all__ = ["Sha256Hash", "hash_string", "hash_files"]

_FILE_CHUNK_SIZE = 64 * 1024


class Sha256Hash:
    """Holds the hexadecimal SHA-256 digest of the last thing hashed."""

    def __init__(self) -> None:
        self._digest = ""

    def from_string(self, text: str) -> "Sha256Hash":
        """Hash the UTF-8 encoding of ``text``."""
        self._digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
        return self

    def from_bytes(self, data: bytes) -> "Sha256Hash":
        """Hash a byte sequence."""
        self._digest = hashlib.sha256(bytes(data)).hexdigest()
        return self

    def from_file(self, path: str | os.PathLike[str]) -> "Sha256Hash":
        """Hash the contents of a file, read in 64 KiB chunks.

        Raises ``OSError`` if the file cannot be opened or read; the previous
        digest is then left unchanged.
        """
        hasher = hashlib.sha256()
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(_FILE_CHUNK_SIZE), b""):
                hasher.update(chunk)
        self._digest = hasher.hexdigest()
        return self

    def hexdigest(self) -> str:
        """Return the digest as lower-case hex, or "" if nothing was hashed."""
        return self._digest

    def __repr__(self) -> str:
        return f"Sha256Hash({self._digest!r})"


def hash_string(text: str) -> str:
    """Return the hex SHA-256 digest of the UTF-8 encoding of ``text``."""
    return Sha256Hash().from_string(text).hexdigest()


def _hash_file_or_empty(path: str | os.PathLike[str]) -> str:
    try:
        return Sha256Hash().from_file(path).hexdigest()
    except OSError:
        return ""


def hash_files(
    paths: Iterable[str | os.PathLike[str]],
    max_workers: int | None = None,
) -> list[tuple[str | os.PathLike[str], str]]:
    """Hash many files in a thread pool.

    Returns ``(path, digest)`` pairs in the order the hashes complete. A file
    that cannot be read gets an empty digest.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(_hash_file_or_empty, path): path for path in paths}
        return [(futures[future], future.result()) for future in as_completed(futures)]