"""SHA-256 digests reported in ingestion results and audit events."""

import hashlib

__all__ = ["calculate_file_digest"]

DIGEST_PREFIX = "sha256:"


def calculate_file_digest(file_bytes: bytes) -> str:
    """Digest of raw file bytes.

    Parameters
    ----------
    file_bytes : bytes
        File content already read into memory.

    Returns
    -------
    str
        Digest formatted as ``"sha256:<hex>"``.
    """
    return DIGEST_PREFIX + hashlib.sha256(file_bytes).hexdigest()
