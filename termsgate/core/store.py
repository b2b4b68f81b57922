"""
================================================================================
ACCEPTANCE STORE - Durable Per-Machine Acceptance State
================================================================================

Registry-equivalent key/value storage for the AcceptanceRecord.

Location:
    {store_root}/{organization}/{APP_IDENTIFIER}/acceptance.json

    The organization segment is derived from the configured organization
    name; APP_IDENTIFIER is fixed. One record per machine.

Contract:
    read()   - Never raises. Missing, unreadable, corrupted or inconsistent
               data all read as None so the user is re-prompted rather than
               trusted on stale data.
    write()  - Atomic: temp file in the same directory, fsync, os.replace.
               Writers are serialized with a FileLock. Raises StoreError.
    clear()  - Removes the record and its lock; succeeds if already absent.
               Raises StoreError.

Permissions:
    The record is published with mode 0644 so unprivileged principals can
    check acceptance status without being able to modify it. Readers never
    take the write lock (they may not be allowed to create it).

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

import filelock

from termsgate.core.errors import StoreError
from termsgate.core.record import AcceptanceRecord
from termsgate.utils.constants import (
    APP_IDENTIFIER,
    INSTANCE_LOCK_FILENAME,
    STORE_FILENAME,
    STORE_FILE_MODE,
    STORE_LOCK_TIMEOUT_SECONDS,
)

logger = logging.getLogger("termsgate")

_UNSAFE_SEGMENT = re.compile(r'[^A-Za-z0-9._-]+')


def organization_key(organization: str) -> str:
    """Turn an organization display name into a single safe path segment."""
    key = _UNSAFE_SEGMENT.sub('_', organization.strip()).strip('._')
    if not key:
        raise ValueError(f"Organization name {organization!r} yields an empty key")
    return key


class AcceptanceStore:
    """Reads and atomically replaces the machine's acceptance record."""

    def __init__(self, store_root: Path, organization: str):
        self.store_root = Path(store_root)
        self.organization = organization
        self.org_dir = self.store_root / organization_key(organization)
        self.app_dir = self.org_dir / APP_IDENTIFIER
        self.record_file = self.app_dir / STORE_FILENAME
        self.lock_file = Path(str(self.record_file) + '.lock')
        self.instance_lock_file = self.app_dir / INSTANCE_LOCK_FILENAME

    @classmethod
    def from_config(cls, config) -> 'AcceptanceStore':
        return cls(config.store_root, config.organization)

    def read(self) -> Optional[AcceptanceRecord]:
        if not self.record_file.exists():
            return None
        try:
            with open(self.record_file, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            return AcceptanceRecord.from_dict(raw)
        except (OSError, ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Acceptance record at {self.record_file} unusable, treating as absent: {e}")
            return None

    def write(self, record: AcceptanceRecord) -> None:
        payload = json.dumps(record.to_dict(), indent=4)
        try:
            self.app_dir.mkdir(parents=True, exist_ok=True)
            lock = filelock.FileLock(str(self.lock_file), timeout=STORE_LOCK_TIMEOUT_SECONDS)
            with lock:
                self._replace_atomically(payload)
        except filelock.Timeout as e:
            logger.error(f"Failed to acquire lock for {self.record_file}")
            raise StoreError(f"Timed out waiting for store lock {self.lock_file}") from e
        except OSError as e:
            logger.error(f"Failed to write acceptance record: {e}")
            raise StoreError(f"Cannot write {self.record_file}: {e}") from e
        logger.info(f"Acceptance record written to {self.record_file}")

    def _replace_atomically(self, payload: str):
        fd, tmp_name = tempfile.mkstemp(prefix='.acceptance-', suffix='.tmp', dir=str(self.app_dir))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, STORE_FILE_MODE)
            os.replace(tmp_name, self.record_file)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def clear(self) -> None:
        try:
            for path in (self.record_file, self.lock_file, self.instance_lock_file):
                if path.exists():
                    path.unlink()
            for directory in (self.app_dir, self.org_dir):
                if directory.exists() and not any(directory.iterdir()):
                    directory.rmdir()
        except OSError as e:
            logger.error(f"Failed to clear acceptance record: {e}")
            raise StoreError(f"Cannot clear {self.record_file}: {e}") from e
        logger.info(f"Acceptance record cleared ({self.record_file})")
