"""Include/exclude folder gating for document paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from writerstats.settings import Settings


def parse_folder_list(raw: str) -> list[str]:
    """Split a comma-separated folder list, dropping blank entries."""
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def _matches(path: str, folders: list[str]) -> bool:
    # Plain prefix test: "Note" also matches "Notes/x.md"
    return any(path.startswith(folder + "/") or path.startswith(folder) for folder in folders)


def is_allowed(path: str, settings: Settings) -> bool:
    include = parse_folder_list(settings.include_folders)
    exclude = parse_folder_list(settings.exclude_folders)

    if include and not _matches(path, include):
        return False
    if exclude and _matches(path, exclude):
        return False
    return True
