"""Tests for format_result and OutputSettings."""

import json

from voiceform.output.formatters import OutputSettings, format_result
from voiceform.services.result import ServiceError, ServiceResult


def _ok(op: str = "normalize", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert (s.json_output, s.quiet, s.verbose) == (False, False, False)


class TestFormatResult:
    def test_json(self) -> None:
        output = format_result(_ok(value="50000"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["value"] == "50000"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_ok(value="1"), settings=settings))["ok"] is True

    def test_quiet(self) -> None:
        output = format_result(_ok(value="50000"), settings=OutputSettings(quiet=True))
        assert output == "50000"

    def test_rich_default(self) -> None:
        output = format_result(_ok(kind="currency", raw="50k", value="50000"))
        assert output.startswith("OK")
        assert "value: 50000" in output

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False, op="normalize", error=ServiceError(code="FIELD_NOT_FOUND", message="nope")
        )
        assert "ERROR" in format_result(result)
