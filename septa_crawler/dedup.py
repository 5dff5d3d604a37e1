import hashlib


def title_hash(title: str) -> str:
    """SHA-256 hex digest of the title; the cross-run identity of a bid."""
    return hashlib.sha256(title.encode('utf-8')).hexdigest()
