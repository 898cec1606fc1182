"""
Cluster lookups shared by protocols and checks.

Singletons (DataScienceCluster, DSCInitialization) are listed rather
than fetched by name: the platform allows at most one, whatever it is
called. Absence raises ``NotFoundError`` so callers can treat it as a
business outcome; everything else propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from odhlint.adapters.base import NotFoundError, Reader, ReaderError
from odhlint.core.check.fieldpath import FieldNotFoundError, query_string
from odhlint.core.models.resource import (
    DATA_SCIENCE_CLUSTER,
    DSC_INITIALIZATION,
    ResourceType,
    Subscription,
)
from odhlint.core.run_context import RunContext

logger = logging.getLogger(__name__)

SubscriptionMatcher = Callable[[Subscription], bool]


class SingletonError(ReaderError):
    """More than one instance of a singleton kind exists."""


def get_singleton(ctx: RunContext, reader: Reader, resource_type: ResourceType) -> dict[str, Any]:
    """Return the only instance of ``resource_type``.

    Raises:
        NotFoundError: No instance exists, or the kind is not installed.
        SingletonError: More than one instance exists.
    """
    items = reader.list(ctx, resource_type)
    if not items:
        raise NotFoundError(f"no {resource_type.kind} found")
    if len(items) > 1:
        raise SingletonError(f"expected single {resource_type.kind} resource, found {len(items)}")
    return items[0]


def get_data_science_cluster(ctx: RunContext, reader: Reader) -> dict[str, Any]:
    return get_singleton(ctx, reader, DATA_SCIENCE_CLUSTER)


def get_dsc_initialization(ctx: RunContext, reader: Reader) -> dict[str, Any]:
    return get_singleton(ctx, reader, DSC_INITIALIZATION)


def get_applications_namespace(ctx: RunContext, reader: Reader) -> str:
    """Namespace the platform deploys its components into.

    Raises:
        NotFoundError: DSCInitialization is absent, or the field is unset or blank.
    """
    dsci = get_dsc_initialization(ctx, reader)
    try:
        namespace = query_string(dsci, ".spec.applicationsNamespace")
    except FieldNotFoundError as e:
        raise NotFoundError("spec.applicationsNamespace not set on DSCInitialization") from e
    if not namespace.strip():
        raise NotFoundError("spec.applicationsNamespace is empty on DSCInitialization")
    return namespace


def find_operator(
    ctx: RunContext,
    reader: Reader,
    matcher: SubscriptionMatcher,
) -> Subscription | None:
    """First OLM subscription accepted by ``matcher``, or None."""
    for sub in reader.olm.list_subscriptions(ctx):
        if matcher(sub):
            logger.debug("operator subscription matched: %s/%s", sub.namespace, sub.name)
            return sub
    return None
