from __future__ import annotations

from typing import Any, Dict, List
from unittest.mock import AsyncMock, patch

import pytest

from compatkeeper.core.discovery import (
    fetch_repositories,
    filter_package_repos,
    find_packages_on_host,
    read_token,
)
from compatkeeper.exceptions import CredentialError, NetworkError


def _repo(name: str, fork: bool = False) -> Dict[str, Any]:
    return {"name": name, "fork": fork}


def _paged_client(*pages: List[Dict[str, Any]]) -> AsyncMock:
    client = AsyncMock()
    client.get_json = AsyncMock(side_effect=list(pages))
    return client


@pytest.mark.unit
class TestReadToken:
    """Tests for read_token."""

    def test_present(self) -> None:
        """Test the token is read and stripped."""
        assert read_token(environ={"GITHUB_AUTH": " abc \n"}) == "abc"

    @pytest.mark.parametrize("environ", [{}, {"GITHUB_AUTH": ""}, {"GITHUB_AUTH": "   "}])
    def test_missing(self, environ: Dict[str, str]) -> None:
        """Test a missing or blank token raises CredentialError."""
        with pytest.raises(CredentialError) as exc_info:
            read_token(environ=environ)

        assert exc_info.value.env_var == "GITHUB_AUTH"

    def test_custom_variable(self) -> None:
        """Test another variable name can be used."""
        assert read_token("MY_TOKEN", {"MY_TOKEN": "xyz"}) == "xyz"


@pytest.mark.unit
class TestFilterPackageRepos:
    """Tests for filter_package_repos."""

    def test_filters_forks_and_suffix(self) -> None:
        """Test forks and repositories without the suffix are dropped."""
        repos = [
            _repo("Example.jl"),
            _repo("Forked.jl", fork=True),
            _repo("dotfiles"),
            _repo("Tables.jl"),
        ]

        assert filter_package_repos(repos) == {"Example", "Tables"}

    def test_base_name_before_first_suffix(self) -> None:
        """Test the base name is the text before the first suffix occurrence."""
        assert filter_package_repos([_repo("Foo.jl.jl")]) == {"Foo"}

    def test_custom_suffix(self) -> None:
        """Test a different suffix selects different repositories."""
        repos = [_repo("Example.jl"), _repo("widget-py")]

        assert filter_package_repos(repos, "-py") == {"widget"}

    def test_missing_name(self) -> None:
        """Test repositories without a name are ignored."""
        assert filter_package_repos([{"fork": False}]) == set()


@pytest.mark.unit
class TestFetchRepositories:
    """Tests for fetch_repositories paging."""

    @pytest.mark.asyncio
    async def test_pages_until_empty(self) -> None:
        """Test pages are requested in order until an empty page."""
        client = _paged_client([_repo("A.jl"), _repo("B.jl")], [_repo("C.jl")], [])

        repos = await fetch_repositories(client, api_url="https://example.test/", page_size=2)

        assert [r["name"] for r in repos] == ["A.jl", "B.jl", "C.jl"]
        assert client.get_json.await_count == 3
        first_call = client.get_json.await_args_list[0]
        assert first_call.args == ("https://example.test/user/repos",)
        assert first_call.kwargs == {"params": {"per_page": 2, "page": 1}}
        assert client.get_json.await_args_list[2].kwargs["params"]["page"] == 3

    @pytest.mark.asyncio
    async def test_empty_first_page(self) -> None:
        """Test a user without repositories gets an empty list."""
        client = _paged_client([])

        assert await fetch_repositories(client) == []

    @pytest.mark.asyncio
    async def test_non_array_page(self) -> None:
        """Test a JSON object page is rejected."""
        client = _paged_client({"message": "Bad credentials"})  # type: ignore[arg-type]

        with pytest.raises(NetworkError, match="JSON array"):
            await fetch_repositories(client)

    @pytest.mark.asyncio
    async def test_request_error_propagates(self) -> None:
        """Test transport failures propagate as NetworkError."""
        client = AsyncMock()
        client.get_json = AsyncMock(side_effect=NetworkError("boom", status_code=401))

        with pytest.raises(NetworkError):
            await fetch_repositories(client)


@pytest.mark.unit
class TestFindPackagesOnHost:
    """Tests for find_packages_on_host."""

    def test_missing_token_before_any_request(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing token fails before a client is created."""
        monkeypatch.delenv("GITHUB_AUTH", raising=False)

        with patch("compatkeeper.core.discovery.HTTPClient") as mock_client:
            with pytest.raises(CredentialError):
                find_packages_on_host()

        mock_client.assert_not_called()

    def test_discovers_packages(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test repositories are fetched with the token and filtered."""
        monkeypatch.setenv("GITHUB_AUTH", "secret")
        client = _paged_client(
            [_repo("Example.jl"), _repo("Fork.jl", fork=True), _repo("notes")],
            [],
        )

        with patch("compatkeeper.core.discovery.HTTPClient") as mock_cls:
            mock_cls.return_value.__aenter__.return_value = client
            result = find_packages_on_host()

        assert result == {"Example"}
        headers = mock_cls.call_args.kwargs["headers"]
        assert headers["Authorization"] == "token secret"

    def test_explicit_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an explicit token is used instead of the environment."""
        monkeypatch.delenv("GITHUB_AUTH", raising=False)
        client = _paged_client([_repo("widget-py")], [])

        with patch("compatkeeper.core.discovery.HTTPClient") as mock_cls:
            mock_cls.return_value.__aenter__.return_value = client
            result = find_packages_on_host(suffix="-py", token="given")

        assert result == {"widget"}
        assert mock_cls.call_args.kwargs["headers"]["Authorization"] == "token given"

