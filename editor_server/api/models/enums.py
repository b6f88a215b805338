"""Shared enumerations used across the editor API."""

from __future__ import annotations

from enum import StrEnum


class PublishStatus(StrEnum):
    """Outcome of a publish request."""

    COMPLETE = "complete"
    FAILURE = "failure"
    NOT_ALLOWED = "not-allowed"
    PENDING = "pending"


class StorageBackend(StrEnum):
    LOCAL = "local"
    S3 = "s3"
