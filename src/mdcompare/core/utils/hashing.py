"""SHA-256 fingerprints of version content; equal hashes mean identical content"""

import hashlib


def content_hash(content: str | None) -> str:
    """Hex SHA-256 of content (64 chars, matches String(64) column); None hashes as ""."""
    return hashlib.sha256((content or "").encode("utf-8")).hexdigest()
