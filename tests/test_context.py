"""Tests for CI context handling."""

import json

import pytest

from ownerguard.context import CheckContext, load_event, read_required_context
from ownerguard.core.constants import ErrorCode
from ownerguard.core.errors import ConfigurationError


class TestReadRequiredContext:
    """Tests for read_required_context."""

    def test_reads_token_and_ref(self):
        """Token and pull request number come from the mapping."""
        ctx = read_required_context({"GITHUB_TOKEN": "token", "GITHUB_REF": "refs/pull/23/merge"})

        assert ctx == CheckContext(token="token", pull_request=23)

    def test_event_number_takes_precedence(self):
        """The event payload number wins over GITHUB_REF."""
        ctx = read_required_context(
            {"GITHUB_TOKEN": "token", "GITHUB_REF": "refs/pull/23/merge"}, {"number": 42}
        )
        assert ctx.pull_request == 42

    def test_event_without_number_falls_back_to_ref(self):
        """Push events have no number; the ref is used."""
        ctx = read_required_context(
            {"GITHUB_TOKEN": "token", "GITHUB_REF": "refs/pull/7/head"}, {"action": "opened"}
        )
        assert ctx.pull_request == 7

    def test_missing_token(self):
        """A missing token is a structured ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Failed to read GITHUB_TOKEN") as exc_info:
            read_required_context({"GITHUB_REF": "refs/pull/23/merge"})
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_missing_ref(self):
        """A missing ref without event number is an error."""
        with pytest.raises(ConfigurationError, match="Failed to read GITHUB_REF"):
            read_required_context({"GITHUB_TOKEN": "token"})

    def test_non_pull_request_ref(self):
        """Branch refs do not name a pull request."""
        with pytest.raises(ConfigurationError, match="not a pull request ref"):
            read_required_context({"GITHUB_TOKEN": "token", "GITHUB_REF": "refs/heads/main"})

    def test_invalid_event_number(self):
        """A non-numeric event number is rejected."""
        with pytest.raises(ConfigurationError, match="invalid pull request number"):
            read_required_context({"GITHUB_TOKEN": "token"}, {"number": "abc"})

    def test_repr_hides_token(self):
        """The token never appears in repr output."""
        ctx = CheckContext(token="secret-value", pull_request=1)
        assert "secret-value" not in repr(ctx)


class TestLoadEvent:
    """Tests for load_event."""

    def test_unset_path(self):
        """No event path means no payload."""
        assert load_event({}) is None

    def test_reads_payload(self, tmp_path):
        """The JSON payload is parsed."""
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"number": 5, "action": "synchronize"}))

        assert load_event({"GITHUB_EVENT_PATH": str(event_file)}) == {
            "number": 5,
            "action": "synchronize",
        }

    def test_missing_payload_file(self, tmp_path):
        """A dangling event path is an error."""
        with pytest.raises(ConfigurationError):
            load_event({"GITHUB_EVENT_PATH": str(tmp_path / "missing.json")})

    def test_invalid_json(self, tmp_path):
        """Broken JSON is an error."""
        event_file = tmp_path / "event.json"
        event_file.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid event payload"):
            load_event({"GITHUB_EVENT_PATH": str(event_file)})

    def test_non_object_payload(self, tmp_path):
        """The payload must be a JSON object."""
        event_file = tmp_path / "event.json"
        event_file.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_event({"GITHUB_EVENT_PATH": str(event_file)})
