"""
Resource reader base: the read-only contract between checks and a cluster.

Checks never talk to kubectl (or any API client) directly; they go
through a ``Reader``. Two absence cases are distinguishable so the
framework can turn them into business outcomes:

    NotFoundError              the named object (or singleton) does not exist
    ResourceTypeNotFoundError  the kind itself is not served (CRD absent)

Every other failure is a ``ReaderError`` (optionally one of the
classified subclasses) and is fatal for the check that hit it.
No retries happen here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from odhlint.core.models.resource import PartialObjectMetadata, ResourceType, Subscription
from odhlint.core.run_context import RunContext


# ═══════════════════════════════════════════════════════════════════
#  Errors
# ═══════════════════════════════════════════════════════════════════


class ReaderError(Exception):
    """A cluster read failed."""


class NotFoundError(ReaderError):
    """The requested object does not exist."""


class ResourceTypeNotFoundError(NotFoundError):
    """The requested kind is not served by the cluster (CRD not installed)."""


class ForbiddenError(ReaderError):
    """The caller is not allowed to read the resource."""


class ReadTimeoutError(ReaderError):
    """The read did not complete in time."""


class ServiceUnavailableError(ReaderError):
    """The API server could not be reached or is not serving."""


# ═══════════════════════════════════════════════════════════════════
#  Contract
# ═══════════════════════════════════════════════════════════════════


class OLMReader(ABC):
    """Read access to Operator Lifecycle Manager subscriptions."""

    @abstractmethod
    def available(self) -> bool:
        """Whether OLM is installed and readable. Should be fast and never raise."""

    @abstractmethod
    def list_subscriptions(self, ctx: RunContext) -> list[Subscription]:
        """List subscriptions across all namespaces."""


class Reader(ABC):
    """Read-only access to cluster objects.

    To create a new reader:
        1. Subclass Reader
        2. Implement name, get, list, list_metadata, olm
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Reader identifier (e.g. 'kubectl', 'snapshot')."""

    @abstractmethod
    def get(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        name: str,
        namespace: str = "",
    ) -> dict[str, Any]:
        """Fetch one object.

        Raises:
            NotFoundError: The object (or its kind) does not exist.
            ReaderError: Any other read failure.
        """

    @abstractmethod
    def list(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[dict[str, Any]]:
        """List full objects, across all namespaces unless ``namespace`` is given.

        Raises:
            ResourceTypeNotFoundError: The kind is not served.
            ReaderError: Any other read failure.
        """

    @abstractmethod
    def list_metadata(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[PartialObjectMetadata]:
        """Like ``list`` but returns metadata-only projections."""

    @property
    @abstractmethod
    def olm(self) -> OLMReader:
        """OLM subscription access."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
