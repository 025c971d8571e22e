from __future__ import annotations

import pytest
from semver import Version

from compatkeeper.models.compat import CompatSpec
from compatkeeper.models.held_back import HeldBack


@pytest.mark.unit
class TestHeldBack:
    """Tests for the HeldBack model."""

    def test_str(self) -> None:
        """Test plain rendering wraps the compat bound in braces."""
        held = HeldBack("JSON", Version.parse("1.0.0"), CompatSpec.parse("0.21"))

        assert str(held) == "JSON@1.0.0 {0.21}"

    def test_str_keeps_union_text(self) -> None:
        """Test multi-term compat text is rendered as declared."""
        held = HeldBack("Example", Version.parse("0.6.0"), CompatSpec.parse(["0.4", "0.5"]))

        assert str(held) == "Example@0.6.0 {0.4, 0.5}"

    def test_to_json(self) -> None:
        """Test JSON form uses plain strings."""
        held = HeldBack("B", Version.parse("2.0.0"), CompatSpec.parse("1.*"))

        assert held.to_json() == {
            "name": "B",
            "last_version": "2.0.0",
            "compat": "1.*",
        }

    def test_equality(self) -> None:
        """Test build metadata does not make otherwise equal records differ."""
        first = HeldBack("B", Version.parse("2.0.0"), CompatSpec.parse("1.*"))
        second = HeldBack("B", Version.parse("2.0.0+build.3"), CompatSpec.parse("1.*"))

        assert first == second

    @pytest.mark.parametrize("version", ["2.0.0-rc1", "1.0.0-DEV", "2.0.0-alpha.beta"])
    def test_registry_spelling_kept(self, version: str) -> None:
        """Test prerelease versions render as the registry spells them."""
        held = HeldBack("B", Version.parse(version), CompatSpec.parse("1"))

        assert str(held) == f"B@{version} {{1}}"
        assert held.to_json()["last_version"] == version
