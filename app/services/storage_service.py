"""Storage backend for uploaded case files.

Files live on local disk under ``settings.UPLOAD_DIR``; the key of a stored file
is its path relative to that directory and doubles as the tail of its public
``/files/...`` URL. Main functions: store_bytes(), resolve_path().
"""
from __future__ import annotations
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Optional
import logging
from app.core.config import settings

logger = logging.getLogger(__name__)

CASE_FILES_FOLDER = "case-files"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Replace everything except letters, digits, dots and dashes with underscores."""
    return _UNSAFE_CHARS.sub("_", os.path.basename(filename or "")) or "upload"


def build_stored_filename(filename: str) -> str:
    """Millisecond timestamp prefix keeps repeated uploads of one name apart."""
    return f"{int(time.time() * 1000)}_{sanitize_filename(filename)}"


class StorageBackend(Protocol):
    async def store_bytes(self, *, data: bytes, filename: str, folder: str = CASE_FILES_FOLDER) -> str:
        """Store raw bytes and return object key."""
        ...
    def resolve_path(self, *, key: str) -> Optional[Path]:
        """Absolute path for a key, or None when it is missing or outside storage."""
        ...
    def public_url(self, *, key: str) -> str:
        ...


@dataclass
class LocalStorageBackend:
    base_path: str = "uploads"
    url_prefix: str = "/api/v1/files"

    @property
    def root(self) -> Path:
        return Path(self.base_path).resolve()

    async def store_bytes(self, *, data: bytes, filename: str, folder: str = CASE_FILES_FOLDER) -> str:
        target_dir = self.root / folder
        os.makedirs(target_dir, exist_ok=True)
        stored_name = build_stored_filename(filename)
        path = target_dir / stored_name
        with open(path, 'wb') as f:
            f.write(data)
        key = f"{folder}/{stored_name}"
        logger.info(f"Stored {len(data)} bytes at {key}")
        return key

    def resolve_path(self, *, key: str) -> Optional[Path]:
        root = self.root
        candidate = (root / key).resolve()
        if candidate != root and root not in candidate.parents:
            logger.warning(f"Rejected file path outside upload dir: {key}")
            return None
        if not candidate.is_file():
            return None
        return candidate

    def public_url(self, *, key: str) -> str:
        return f"{self.url_prefix}/{key}"


_backend: StorageBackend | None = None

def reset_storage_backend():
    """Force reset of cached storage backend for testing."""
    global _backend
    _backend = None

def get_storage_backend() -> StorageBackend:
    """Get storage backend instance (cached)."""
    global _backend
    if _backend is not None:
        return _backend

    _backend = LocalStorageBackend(base_path=settings.UPLOAD_DIR)
    logger.info(f"Initialized LocalStorageBackend at {settings.UPLOAD_DIR}")
    return _backend

async def store_bytes(*, data: bytes, filename: str, folder: str = CASE_FILES_FOLDER) -> str:
    return await get_storage_backend().store_bytes(data=data, filename=filename, folder=folder)

def resolve_path(*, key: str) -> Optional[Path]:
    return get_storage_backend().resolve_path(key=key)

def public_url(*, key: str) -> str:
    return get_storage_backend().public_url(key=key)
