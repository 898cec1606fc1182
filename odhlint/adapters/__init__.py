"""Adapters: resource readers the checks consume.

Public re-exports for convenient access.
"""

from odhlint.adapters.base import (
    ForbiddenError,
    NotFoundError,
    OLMReader,
    Reader,
    ReaderError,
    ReadTimeoutError,
    ResourceTypeNotFoundError,
    ServiceUnavailableError,
)
from odhlint.adapters.kubectl import KubectlReader
from odhlint.adapters.snapshot import SnapshotError, SnapshotReader

__all__ = [
    "ForbiddenError",
    "KubectlReader",
    "NotFoundError",
    "OLMReader",
    "ReadTimeoutError",
    "Reader",
    "ReaderError",
    "ResourceTypeNotFoundError",
    "ServiceUnavailableError",
    "SnapshotError",
    "SnapshotReader",
]
