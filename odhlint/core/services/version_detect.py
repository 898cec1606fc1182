"""
Cluster version detection.

Sources, in order of preference:

    1. DataScienceCluster  .status.release.version   (high confidence)
    2. DSCInitialization   .status.release.version   (high confidence)
    3. OLM ClusterServiceVersion of the platform operator, .spec.version  (medium)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from odhlint.adapters.base import NotFoundError, Reader
from odhlint.core.check.errors import CheckError
from odhlint.core.check.fieldpath import FieldNotFoundError, FieldPathError, query_string
from odhlint.core.models.resource import CLUSTER_SERVICE_VERSION
from odhlint.core.models.version import SemVer
from odhlint.core.run_context import RunContext
from odhlint.core.services.cluster import get_data_science_cluster, get_dsc_initialization

logger = logging.getLogger(__name__)

OPERATOR_CSV_LABEL = "operators.coreos.com/rhods-operator.redhat-ods-operator"


class VersionSource(StrEnum):
    DATA_SCIENCE_CLUSTER = "DataScienceCluster"
    DSC_INITIALIZATION = "DSCInitialization"
    OLM = "OLM"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class ClusterVersion:
    version: str
    source: VersionSource
    confidence: Confidence

    @property
    def semver(self) -> SemVer | None:
        return SemVer.try_parse(self.version)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "source": str(self.source),
            "confidence": str(self.confidence),
        }


def _release_version(obj: dict) -> str:
    try:
        return query_string(obj, ".status.release.version")
    except FieldNotFoundError:
        return ""
    except FieldPathError as e:
        raise CheckError(f"querying .status.release.version: {e}") from e


def _from_data_science_cluster(ctx: RunContext, reader: Reader) -> str:
    try:
        dsc = get_data_science_cluster(ctx, reader)
    except NotFoundError:
        return ""
    return _release_version(dsc)


def _from_dsc_initialization(ctx: RunContext, reader: Reader) -> str:
    try:
        dsci = get_dsc_initialization(ctx, reader)
    except NotFoundError:
        return ""
    return _release_version(dsci)


def _from_olm(ctx: RunContext, reader: Reader) -> str:
    try:
        csvs = reader.list(ctx, CLUSTER_SERVICE_VERSION)
    except NotFoundError:
        return ""
    for csv in csvs:
        labels = (csv.get("metadata") or {}).get("labels") or {}
        if OPERATOR_CSV_LABEL in labels:
            return str((csv.get("spec") or {}).get("version") or "")
    return ""


def detect_cluster_version(ctx: RunContext, reader: Reader) -> ClusterVersion | None:
    """Detect the installed platform version, or None when no source has one.

    Raises:
        ReaderError: A source could not be read (other than being absent).
    """
    sources = (
        (VersionSource.DATA_SCIENCE_CLUSTER, Confidence.HIGH, _from_data_science_cluster),
        (VersionSource.DSC_INITIALIZATION, Confidence.HIGH, _from_dsc_initialization),
        (VersionSource.OLM, Confidence.MEDIUM, _from_olm),
    )
    for source, confidence, detect in sources:
        version = detect(ctx, reader)
        if version:
            logger.info("Detected cluster version %s from %s", version, source)
            return ClusterVersion(version=version, source=source, confidence=confidence)
        logger.debug("No version found in %s", source)
    return None
