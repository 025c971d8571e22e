from __future__ import annotations

import pytest

from compatkeeper.exceptions import (
    CompatKeeperError,
    ConfigError,
    CredentialError,
    FileOperationError,
    NetworkError,
    ParseError,
    RegistryInconsistencyError,
)


@pytest.mark.unit
class TestCompatKeeperError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        """Test the string form is the message when there are no details."""
        error = CompatKeeperError("boom")

        assert str(error) == "boom"
        assert error.details == {}

    def test_details_appended(self) -> None:
        """Test details are appended in insertion order."""
        error = CompatKeeperError("boom", {"a": 1, "b": "x"})

        assert str(error) == "boom (a=1, b=x)"
        assert repr(error) == "CompatKeeperError(message='boom', details={'a': 1, 'b': 'x'})"

    @pytest.mark.parametrize(
        "cls",
        [
            ParseError,
            RegistryInconsistencyError,
            ConfigError,
            NetworkError,
            CredentialError,
            FileOperationError,
        ],
    )
    def test_hierarchy(self, cls) -> None:
        """Test every error derives from the base class."""
        assert issubclass(cls, CompatKeeperError)


@pytest.mark.unit
class TestSubclasses:
    """Tests for structured details of each subclass."""

    def test_parse_error(self) -> None:
        """Test file and key are recorded when given."""
        error = ParseError("bad", file_path="Versions.toml", key="1.x")

        assert error.details == {"file": "Versions.toml", "key": "1.x"}
        assert str(error) == "bad (file=Versions.toml, key=1.x)"

    def test_parse_error_without_details(self) -> None:
        """Test omitted fields are left out."""
        assert str(ParseError("bad")) == "bad"

    def test_registry_inconsistency(self) -> None:
        """Test holder, dependency and uuid are recorded."""
        error = RegistryInconsistencyError(
            "missing", holder="A", dependency="B", identity="1234"
        )

        assert error.details == {"holder": "A", "dependency": "B", "uuid": "1234"}
        assert error.identity == "1234"

    def test_network_error_truncates_body(self) -> None:
        """Test long response bodies are truncated in details only."""
        body = "x" * 500
        error = NetworkError("failed", url="https://x", status_code=500, response_body=body)

        assert error.details["response"] == "x" * 200 + "..."
        assert error.response_body == body
        assert error.status_code == 500

    def test_credential_error(self) -> None:
        """Test the environment variable is recorded."""
        error = CredentialError("no token", env_var="GITHUB_AUTH")

        assert str(error) == "no token (env=GITHUB_AUTH)"

    def test_file_operation_error(self) -> None:
        """Test the original error is stringified into details."""
        original = OSError("denied")
        error = FileOperationError("cannot read", file_path="/x", operation="read", original_error=original)

        assert error.details == {"path": "/x", "operation": "read", "original_error": "denied"}
        assert error.original_error is original

    def test_config_error(self) -> None:
        """Test path and option are recorded."""
        error = ConfigError("bad", config_path="c.toml", option="registries")

        assert error.details == {"path": "c.toml", "option": "registries"}
