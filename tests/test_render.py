"""
Tests for report rendering: exit-code policy and status labels.
"""

import json

from odhlint.checks.workloads import ANNOTATION_RAY_BACKUP, RayImpactedWorkloadsCheck
from odhlint.core.check import BaseCheck, CheckGroup, CheckMetadata, CheckType, new_condition
from odhlint.core.check.render_registry import (
    RendererRegistry,
    default_object_renderer,
    renderers,
)
from odhlint.core.engine.executor import CheckExecution, LintReport
from odhlint.core.models.result import ConditionType, Impact, ImpactedObject, Reason, Status
from odhlint.ui.cli.render import (
    EXIT_BLOCKING,
    EXIT_ERROR,
    EXIT_OK,
    _execution_status,
    exit_code,
    render_json,
    render_table,
)


class _Check(BaseCheck):
    METADATA = CheckMetadata(
        id="components.codeflare.removal",
        name="Components :: CodeFlare :: Removal (3.x)",
        description="d",
        group=CheckGroup.COMPONENT,
        kind="codeflare",
        check_type="removal",
    )

    def can_apply(self, ctx, target):
        return True

    def validate(self, ctx, target):
        raise NotImplementedError


def _execution(status=Status.TRUE, impact=None):
    check = _Check()
    result = check.new_result()
    result.set_condition(new_condition(
        ConditionType.COMPATIBLE, status, Reason.VERSION_COMPATIBLE, "m", impact=impact,
    ))
    return CheckExecution(check=check, result=result)


def _errored():
    return CheckExecution(check=_Check(), error="boom", error_type="ReaderError", remediation="r")


class TestExitCode:
    def test_ok(self):
        assert exit_code(LintReport(executions=[_execution()])) == EXIT_OK

    def test_advisory_is_ok(self):
        report = LintReport(executions=[_execution(Status.FALSE, Impact.ADVISORY)])
        assert exit_code(report) == EXIT_OK

    def test_blocking(self):
        report = LintReport(executions=[_execution(Status.FALSE), _errored()])
        assert exit_code(report) == EXIT_BLOCKING

    def test_errored(self):
        assert exit_code(LintReport(executions=[_execution(), _errored()])) == EXIT_ERROR

    def test_empty_report(self):
        assert exit_code(LintReport()) == EXIT_OK


class TestExecutionStatus:
    def test_labels(self):
        assert _execution_status(_execution()) == "pass"
        assert _execution_status(_execution(Status.FALSE)) == "fail"
        assert _execution_status(_execution(Status.FALSE, Impact.ADVISORY)) == "warn"
        assert _execution_status(_execution(Status.UNKNOWN)) == "error"
        assert _execution_status(_errored()) == "error"
        assert _execution_status(CheckExecution(check=_Check(), skipped=True)) == "skipped"

    def test_no_result_and_no_error_is_unknown(self):
        assert CheckExecution(check=_Check()).status == "unknown"
        assert _execution_status(CheckExecution(check=_Check())) == "unknown"

    def test_render_json_summary(self):
        data = json.loads(render_json(LintReport(executions=[_execution()])))
        assert data["summary"]["passed"] == 1


# ── Impacted-object renderers ───────────────────────────────────


def _obj(name, namespace="proj", kind="RayCluster", annotations=None):
    return ImpactedObject(
        api_version="ray.io/v1", kind=kind, name=name, namespace=namespace,
        annotations=annotations or {},
    )


class TestRendererRegistry:
    def test_default_renderer_format(self):
        assert default_object_renderer(_obj("a")) == "proj/a (RayCluster)"
        assert default_object_renderer(_obj("cr", namespace="", kind="ClusterRole")) == "cr (ClusterRole)"

    def test_unregistered_key_uses_default(self):
        registry = RendererRegistry()
        assert registry.object_renderer("workload", "nothing", "x") is default_object_renderer
        assert registry.group_renderer("workload", "nothing", "x") is None

    def test_keys_are_independent(self):
        registry = RendererRegistry()
        registry.register_object_renderer("workload", "a", "t", lambda obj: "custom")
        assert registry.object_renderer("workload", "a", "t")(_obj("x")) == "custom"
        assert registry.object_renderer("workload", "b", "t")(_obj("x")) == "proj/x (RayCluster)"

    def test_enum_and_string_keys_match(self):
        registry = RendererRegistry()
        registry.register_object_renderer(CheckGroup.WORKLOAD, "a", "t", lambda obj: "custom")
        assert registry.render("workload", "a", "t", [_obj("x")]) == ["custom"]

    def test_group_renderer_takes_precedence(self):
        registry = RendererRegistry()
        seen = {}

        def group(objects, max_display):
            seen["count"], seen["max"] = len(objects), max_display
            return ["grouped"]

        registry.register_object_renderer("workload", "a", "t", lambda obj: "single")
        registry.register_group_renderer("workload", "a", "t", group)
        assert registry.render("workload", "a", "t", [_obj("x"), _obj("y")], max_display=10) == ["grouped"]
        assert seen == {"count": 2, "max": 10}

    def test_display_cap(self):
        registry = RendererRegistry()
        lines = registry.render("workload", "a", "t", [_obj(f"rc{i}") for i in range(5)], max_display=3)
        assert lines == [
            "proj/rc0 (RayCluster)",
            "proj/rc1 (RayCluster)",
            "proj/rc2 (RayCluster)",
            "... and 2 more",
        ]


class TestRayRendering:
    def _execution(self):
        check = RayImpactedWorkloadsCheck()
        result = check.new_result()
        result.set_condition(new_condition(
            ConditionType.COMPATIBLE, Status.FALSE, Reason.WORKLOADS_IMPACTED, "m",
            impact=Impact.ADVISORY,
        ))
        result.impacted_objects = [
            _obj("done", annotations={ANNOTATION_RAY_BACKUP: "true"}),
            _obj("todo"),
        ]
        return CheckExecution(check=check, result=result)

    def test_ray_renderer_registered(self):
        lines = renderers.render(
            CheckGroup.WORKLOAD, "ray", CheckType.IMPACTED_WORKLOADS,
            self._execution().result.impacted_objects,
        )
        assert lines == [
            "proj/done (RayCluster) [backup taken]",
            "proj/todo (RayCluster) [backup pending]",
        ]

    def test_verbose_table_shows_backup_status(self, capsys):
        render_table(LintReport(executions=[self._execution()]), verbose=True)
        out = capsys.readouterr().out
        assert "proj/done (RayCluster) [backup taken]" in out
        assert "proj/todo (RayCluster) [backup pending]" in out

    def test_table_hides_objects_without_verbose(self, capsys):
        render_table(LintReport(executions=[self._execution()]))
        assert "backup pending" not in capsys.readouterr().out
