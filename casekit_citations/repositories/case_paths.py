"""Safe case directory paths.

Case identifiers come from the user, so they are sanitised before being
joined onto the CaseKit base directory.
"""

from __future__ import annotations

from pathlib import Path

from ..core.exceptions import InvalidCasePathError


def sanitise_path_component(value: str, label: str) -> str:
    """Validate a single user-supplied path component.

    Raises:
        InvalidCasePathError: Empty value, path separator, traversal or NUL byte
    """
    trimmed = value.strip()

    if not trimmed:
        raise InvalidCasePathError(f"{label} must not be empty")
    if "/" in trimmed or "\\" in trimmed:
        raise InvalidCasePathError(f"{label} must not contain path separators")
    if trimmed in (".", "..") or ".." in trimmed:
        raise InvalidCasePathError(f"{label} must not contain path traversal sequences")
    if "\0" in trimmed:
        raise InvalidCasePathError(f"{label} contains invalid characters")

    return trimmed


def safe_case_path(case_id: str, base_dir: Path) -> Path:
    """Build ``<base_dir>/<case_id>`` and make sure it stays under ``base_dir``.

    The containment check only applies to directories that already exist;
    a new case directory cannot resolve anywhere else once sanitised.
    """
    safe_name = sanitise_path_component(case_id, "Case name")
    case_path = base_dir / safe_name

    if case_path.exists():
        canonical_base = base_dir.resolve()
        canonical_case = case_path.resolve()
        if canonical_base not in canonical_case.parents:
            raise InvalidCasePathError("Case path resolves outside CaseKit directory")

    return case_path


__all__ = ["safe_case_path", "sanitise_path_component"]
