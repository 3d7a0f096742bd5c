"""Unit tests for report sinks."""

import io
import json

import pytest
from rich.console import Console

from applint.models.changes import ChangeRequest, RevisionRange
from applint.models.findings import Severity
from applint.models.runs import Run
from applint.orchestrator.aggregator import aggregate
from applint.orchestrator.decider import decide
from applint.reporting.sinks import ActionsSink, CheckRunSink, CommentSink, ConsoleSink
from applint.triggers import TriggerContext

from conftest import FakePlatform, make_finding

PULL_REQUEST = ChangeRequest(number=7, html_url="https://github.com/o/r/pull/7", base_sha="a", head_sha="b")


def _report(*findings):
    report = aggregate([list(findings)])
    return report, decide(report)


class TestActionsSink:
    """Test cases for the workflow sink."""

    @pytest.mark.asyncio
    async def test_outputs_annotations_and_summary(self, tmp_path):
        output, summary, stream = tmp_path / "output", tmp_path / "summary", io.StringIO()
        sink = ActionsSink(output, summary, stream)
        report, outcome = _report(
            make_finding(line=3, source_path="bitcoin/umbrel-app.yml"),
            make_finding(id="dir", severity=Severity.INFO, source_path="bitcoin/"),
        )

        await sink.publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        lines = output.read_text(encoding="utf-8").splitlines()
        outputs = dict(line.split("=", 1) for line in lines)
        assert outputs["errors"] == "1"
        assert outputs["warnings"] == "0"
        assert outputs["infos"] == "1"
        assert [r["id"] for r in json.loads(outputs["results"])] == ["invalid-yaml", "dir"]

        commands = stream.getvalue().splitlines()
        assert commands[0].startswith("::error file=bitcoin/umbrel-app.yml,line=3,")
        assert commands[-1] == "::error::❌ Linting failed with 1 error ❌"
        assert len(commands) == 2

        assert summary.read_text(encoding="utf-8").startswith("# ❌ Linting failed with 1 error ❌")

    @pytest.mark.asyncio
    async def test_success_emits_no_failure(self, tmp_path):
        stream = io.StringIO()
        sink = ActionsSink(tmp_path / "output", None, stream)
        report, outcome = _report()

        await sink.publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        assert stream.getvalue() == ""
        assert "errors=0" in (tmp_path / "output").read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_abort(self):
        stream = io.StringIO()
        await ActionsSink(stream=stream).abort(Run(id="run_1"), RuntimeError("bad\nthing"))
        assert stream.getvalue() == "::error::Action failed with error bad%0Athing\n"


class TestCommentSink:
    """Test cases for the pull request comment sink."""

    @pytest.mark.asyncio
    async def test_comments_on_pull_request(self):
        platform = FakePlatform()
        report, outcome = _report()

        await CommentSink(platform).publish(
            report, outcome, Run(id="run_1"), TriggerContext("o", "r", PULL_REQUEST)
        )

        assert len(platform.comments) == 1
        number, body = platform.comments[0]
        assert number == 7
        assert body.startswith("## 🎉")

    @pytest.mark.asyncio
    async def test_no_pull_request_no_comment(self):
        platform = FakePlatform()
        report, outcome = _report()

        await CommentSink(platform).publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        assert platform.comments == []


class TestCheckRunSink:
    """Test cases for the check run sink."""

    @pytest.mark.asyncio
    async def test_annotations_sent_in_batches(self):
        platform = FakePlatform()
        sink = CheckRunSink(platform, "app-linter")
        findings = [
            make_finding(id=f"rule-{i}", severity=Severity.WARNING, line=i + 1, source_path="a/umbrel-app.yml")
            for i in range(120)
        ]
        report, outcome = _report(*findings)

        await sink.start(Run(id="run_1"), RevisionRange("a", "b"), TriggerContext("o", "r"))
        await sink.publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        assert platform.check_runs[0]["name"] == "app-linter"
        assert platform.check_runs[0]["head_sha"] == "b"
        assert platform.check_runs[0]["status"] == "in_progress"

        sizes = [len(update["output"]["annotations"]) for update in platform.check_run_updates]
        assert sizes == [50, 50, 20]
        assert all(update["id"] == 4242 for update in platform.check_run_updates)
        assert "status" not in platform.check_run_updates[0]
        final = platform.check_run_updates[-1]
        assert final["status"] == "completed"
        assert final["conclusion"] == "success"

    @pytest.mark.asyncio
    async def test_empty_report_completes_once(self):
        platform = FakePlatform()
        sink = CheckRunSink(platform)
        report, outcome = _report()

        await sink.start(Run(id="run_1"), RevisionRange("a", "b"), TriggerContext("o", "r"))
        await sink.publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        assert len(platform.check_run_updates) == 1
        assert platform.check_run_updates[0]["output"]["annotations"] == []

    @pytest.mark.asyncio
    async def test_abort_before_start_is_noop(self):
        platform = FakePlatform()
        await CheckRunSink(platform).abort(Run(id="run_1"), RuntimeError("x"))
        assert platform.check_run_updates == []

    @pytest.mark.asyncio
    async def test_abort_fails_check_run(self):
        platform = FakePlatform()
        sink = CheckRunSink(platform)
        await sink.start(Run(id="run_1"), RevisionRange("a", "b"), TriggerContext("o", "r"))
        await sink.abort(Run(id="run_1"), RuntimeError("compare failed"))

        assert platform.check_run_updates[-1]["conclusion"] == "failure"
        assert platform.check_run_updates[-1]["output"]["summary"] == "compare failed"


class TestConsoleSink:
    @pytest.mark.asyncio
    async def test_prints_table(self):
        console = Console(file=io.StringIO(), width=200)
        report, outcome = _report(make_finding(title="[not markup]", source_path="a/umbrel-app.yml"))

        await ConsoleSink(console).publish(report, outcome, Run(id="run_1"), TriggerContext("o", "r"))

        text = console.file.getvalue()
        assert "Linting failed with 1 error" in text
        assert "[not markup]" in text
        assert "Errors: 1" in text
