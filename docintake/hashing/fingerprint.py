import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def fingerprint(data: bytes) -> str:
    """Return the SHA-256 hex digest of *data*."""
    return hashlib.sha256(data).hexdigest()


def fingerprint_file(path: Path) -> str:
    """Return the SHA-256 hex digest of the file at *path*, read in chunks.

    Raises:
        FileNotFoundError: if the file does not exist.
    """
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
