"""Repository for a case's authorities.

Authorities live in ``<case>/.casekit/authorities.json`` as a pretty-printed
JSON array with camelCase keys. Every operation reads and rewrites the whole
file; there is no locking, so concurrent writers to one case race and the
last write wins. Storage failures are raised as AuthorityStoreError with the
underlying cause attached.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from ..core.config import settings
from ..core.exceptions import AuthorityStoreError
from ..models.authority import Authority
from .case_paths import safe_case_path

logger = structlog.get_logger(__name__)

AUTHORITIES_DIR = ".casekit"
AUTHORITIES_FILE = "authorities.json"

_authority_list = TypeAdapter(list[Authority])


class AuthorityRepository:
    """File-backed authority store, one file per case.

    Example:
        >>> repo = AuthorityRepository()
        >>> repo.save_authority("smith-v-jones", Authority(id="a1", ...))
        [Authority(id='a1', ...)]
        >>> repo.remove_authority("smith-v-jones", "a1")
        []
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialize repository.

        Args:
            base_dir: Directory holding one folder per case
                (defaults to settings.CASEKIT_BASE_DIR)
        """
        self.base_dir = Path(base_dir) if base_dir is not None else settings.CASEKIT_BASE_DIR

    def authorities_path(self, case_id: str) -> Path:
        """Path of the authorities file for a case."""
        return safe_case_path(case_id, self.base_dir) / AUTHORITIES_DIR / AUTHORITIES_FILE

    def _read(self, path: Path) -> list[Authority]:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise AuthorityStoreError(f"Could not read {AUTHORITIES_FILE}: {e}") from e

        try:
            return _authority_list.validate_json(content)
        except ValidationError as e:
            raise AuthorityStoreError(f"Could not parse {AUTHORITIES_FILE}: {e}") from e

    def _write(self, path: Path, authorities: list[Authority]) -> None:
        try:
            payload = _authority_list.dump_json(authorities, by_alias=True, indent=2)
        except ValueError as e:
            raise AuthorityStoreError(f"Could not serialise authorities: {e}") from e

        try:
            path.write_bytes(payload)
        except OSError as e:
            raise AuthorityStoreError(f"Could not write {AUTHORITIES_FILE}: {e}") from e

    def load_authorities(self, case_id: str) -> list[Authority]:
        """Return the case's authorities in stored order (empty if none saved)."""
        path = self.authorities_path(case_id)
        if not path.exists():
            return []
        return self._read(path)

    def save_authority(self, case_id: str, authority: Authority) -> list[Authority]:
        """Insert or replace an authority by id.

        A new id is appended; an existing id is replaced in place.

        Returns:
            The full stored list after the write
        """
        path = self.authorities_path(case_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise AuthorityStoreError(f"Could not create {AUTHORITIES_DIR} directory: {e}") from e

        authorities = self._read(path) if path.exists() else []

        for index, existing in enumerate(authorities):
            if existing.id == authority.id:
                authorities[index] = authority
                break
        else:
            authorities.append(authority)

        self._write(path, authorities)
        logger.info(
            "authority_saved", case_id=case_id, authority_id=authority.id, total=len(authorities)
        )
        return authorities

    def remove_authority(self, case_id: str, authority_id: str) -> list[Authority]:
        """Delete an authority by id; unknown ids leave the list unchanged."""
        path = self.authorities_path(case_id)
        if not path.exists():
            return []

        authorities = [a for a in self._read(path) if a.id != authority_id]
        self._write(path, authorities)
        logger.info("authority_removed", case_id=case_id, authority_id=authority_id)
        return authorities


__all__ = ["AuthorityRepository"]
