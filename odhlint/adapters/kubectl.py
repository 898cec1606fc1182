"""
Kubectl reader: production ``Reader`` backed by the kubectl CLI.

Every read is one ``kubectl get ... -o json`` subprocess. The run
context is polled while the process is in flight, so cancelling the
run (or hitting its deadline) kills outstanding calls. kubectl error
output is classified into the ``ReaderError`` hierarchy.
"""

from __future__ import annotations

import json
import logging
import subprocess
import threading
import time
from typing import Any

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
from odhlint.core.models.resource import (
    SUBSCRIPTION,
    PartialObjectMetadata,
    ResourceType,
    Subscription,
)
from odhlint.core.run_context import RunContext

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.2
_OLM_API_GROUP = "operators.coreos.com"


# ═══════════════════════════════════════════════════════════════════
#  Low-level helpers
# ═══════════════════════════════════════════════════════════════════


def _run_kubectl(
    ctx: RunContext,
    *args: str,
    timeout: float = 30,
) -> subprocess.CompletedProcess[str]:
    """Run a kubectl command, honouring run cancellation and a per-call timeout."""
    ctx.check()
    logger.debug("kubectl %s", " ".join(args))

    proc = subprocess.Popen(
        ["kubectl", *args],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    deadline = time.monotonic() + timeout
    while True:
        try:
            stdout, stderr = proc.communicate(timeout=_POLL_INTERVAL)
        except subprocess.TimeoutExpired:
            if ctx.cancelled:
                proc.kill()
                proc.communicate()
                ctx.check()
            if time.monotonic() >= deadline:
                proc.kill()
                proc.communicate()
                raise ReadTimeoutError(f"kubectl {args[0]} timed out after {timeout}s")
            continue
        return subprocess.CompletedProcess(proc.args, proc.returncode, stdout, stderr)


def _classify_error(stderr: str, returncode: int) -> ReaderError:
    """Map kubectl error output to a ReaderError subclass."""
    text = stderr.strip()
    lowered = text.lower()

    if "doesn't have a resource type" in lowered or "no matches for kind" in lowered:
        return ResourceTypeNotFoundError(text)
    if "(notfound)" in lowered:
        return NotFoundError(text)
    if "(forbidden)" in lowered or "forbidden" in lowered:
        return ForbiddenError(text)
    # Connection failures often end in "i/o timeout"; match them first.
    if (
        "unable to connect to the server" in lowered
        or "connection refused" in lowered
        or "serviceunavailable" in lowered
        or "no such host" in lowered
    ):
        return ServiceUnavailableError(text)
    if "timeout" in lowered or "deadline exceeded" in lowered:
        return ReadTimeoutError(text)
    return ReaderError(text or f"kubectl exited with code {returncode}")


# ═══════════════════════════════════════════════════════════════════
#  Reader
# ═══════════════════════════════════════════════════════════════════


class KubectlReader(Reader):
    """Reads cluster state through the kubectl CLI."""

    def __init__(
        self,
        context: str | None = None,
        kubeconfig: str | None = None,
        timeout: float = 30,
    ):
        self._context = context
        self._kubeconfig = kubeconfig
        self._timeout = timeout
        self._olm = _KubectlOLM(self)

    @property
    def name(self) -> str:
        return "kubectl"

    @property
    def olm(self) -> OLMReader:
        return self._olm

    def _global_args(self) -> list[str]:
        args: list[str] = []
        if self._context:
            args += ["--context", self._context]
        if self._kubeconfig:
            args += ["--kubeconfig", self._kubeconfig]
        return args

    def _exec(self, ctx: RunContext, *args: str) -> str:
        try:
            result = _run_kubectl(ctx, *self._global_args(), *args, timeout=self._timeout)
        except FileNotFoundError as e:
            raise ServiceUnavailableError("kubectl not found on PATH") from e
        except OSError as e:
            raise ReaderError(f"running kubectl: {e}") from e

        if result.returncode != 0:
            raise _classify_error(result.stderr or "", result.returncode)
        return result.stdout

    def _get_json(self, ctx: RunContext, *args: str) -> dict[str, Any]:
        out = self._exec(ctx, *args, "-o", "json")
        try:
            data = json.loads(out)
        except ValueError as e:
            raise ReaderError(f"decoding kubectl output: {e}") from e
        if not isinstance(data, dict):
            raise ReaderError("decoding kubectl output: expected a JSON object")
        return data

    def get(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        name: str,
        namespace: str = "",
    ) -> dict[str, Any]:
        args = ["get", resource_type.kubectl_name, name]
        if namespace:
            args += ["-n", namespace]
        return self._get_json(ctx, *args)

    def list(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[dict[str, Any]]:
        args = ["get", resource_type.kubectl_name]
        args += ["-n", namespace] if namespace else ["--all-namespaces"]
        data = self._get_json(ctx, *args)

        items = data.get("items") or []
        for item in items:
            item.setdefault("apiVersion", resource_type.api_version)
            item.setdefault("kind", resource_type.kind)
        logger.debug("listed %d %s", len(items), resource_type.kind)
        return items

    def list_metadata(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[PartialObjectMetadata]:
        return [
            PartialObjectMetadata.from_object(item)
            for item in self.list(ctx, resource_type, namespace)
        ]


class _KubectlOLM(OLMReader):
    """OLM access through the same kubectl reader.

    OLM counts as available when the Subscription API is served; the
    probe runs once, on first use.
    """

    def __init__(self, reader: KubectlReader):
        self._reader = reader
        self._lock = threading.Lock()
        self._available: bool | None = None

    def available(self) -> bool:
        with self._lock:
            if self._available is None:
                self._available = self._probe()
            return self._available

    def _probe(self) -> bool:
        ctx = RunContext(timeout=self._reader._timeout)
        try:
            out = self._reader._exec(
                ctx, "api-resources", f"--api-group={_OLM_API_GROUP}", "-o", "name",
            )
        except ReaderError as e:
            logger.debug("OLM probe failed: %s", e)
            return False
        return any(line.startswith("subscriptions") for line in out.splitlines())

    def list_subscriptions(self, ctx: RunContext) -> list[Subscription]:
        try:
            items = self._reader.list(ctx, SUBSCRIPTION)
        except ResourceTypeNotFoundError:
            return []
        return [Subscription.from_object(item) for item in items]
