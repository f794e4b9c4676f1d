"""
subgraph_orchestrator.orchestrator.classification

Remote error classification.

Responsibilities:
- Map index node admin error messages onto a small set of error kinds so the
  orchestrator never matches on wording directly.
"""

from __future__ import annotations

import enum

GRAFT_BASE_SIGNATURE = "the graft base is invalid: deployment not found"


class RemoteErrorKind(enum.StrEnum):
    already_exists = "ALREADY_EXISTS"
    not_found = "NOT_FOUND"
    unchanged = "UNCHANGED"
    graft_base_missing = "GRAFT_BASE_MISSING"
    other = "OTHER"


# Order matters: the graft signature itself contains "not found".
_MARKERS: tuple[tuple[str, RemoteErrorKind], ...] = (
    (GRAFT_BASE_SIGNATURE, RemoteErrorKind.graft_base_missing),
    ("already exists", RemoteErrorKind.already_exists),
    ("unchanged", RemoteErrorKind.unchanged),
    ("not found", RemoteErrorKind.not_found),
)


def classify_remote_error(message: str | None) -> RemoteErrorKind:
    text = (message or "").lower()
    for marker, kind in _MARKERS:
        if marker in text:
            return kind
    return RemoteErrorKind.other


# --- Module Notes -----------------------------------------------------------
# Matching is case-insensitive; new endpoint wordings only need a new marker here.
