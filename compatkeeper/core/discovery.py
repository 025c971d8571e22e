"""GitHub discovery of the packages you can push to.

Pages through ``GET /user/repos`` with the token from ``GITHUB_AUTH`` and
keeps the non-fork repositories named like packages (``Example.jl``).

Typical usage::

    names = find_packages_on_host()
    # {"Example", "OtherPackage"}
"""

from __future__ import annotations

import os
import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from compatkeeper.constants import (
    DEFAULT_REPO_SUFFIX,
    GITHUB_API,
    GITHUB_PAGE_SIZE,
    GITHUB_TOKEN_ENV,
    GITHUB_USER_REPOS,
)
from compatkeeper.exceptions import CredentialError, NetworkError
from compatkeeper.utils.http import HTTPClient
from compatkeeper.utils.logger import get_logger

logger = get_logger("core.discovery")

__all__ = [
    "read_token",
    "fetch_repositories",
    "filter_package_repos",
    "find_packages_on_host",
]


def read_token(
    env_var: str = GITHUB_TOKEN_ENV,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Return the GitHub token from the environment.

    Raises:
        CredentialError: The variable is unset or blank.
    """
    env = os.environ if environ is None else environ
    token = (env.get(env_var) or "").strip()
    if not token:
        raise CredentialError(
            f"A GitHub token is required in the {env_var} environment variable",
            env_var=env_var,
        )
    return token


async def fetch_repositories(
    client: HTTPClient,
    *,
    api_url: str = GITHUB_API,
    page_size: int = GITHUB_PAGE_SIZE,
) -> List[Dict[str, Any]]:
    """Collect every repository visible to the authenticated user.

    Pages are requested one after another until an empty page comes back.

    Raises:
        NetworkError: A request fails or a page is not a JSON array.
    """
    url = f"{api_url.rstrip('/')}{GITHUB_USER_REPOS}"
    repos: List[Dict[str, Any]] = []
    page = 1

    while True:
        results = await client.get_json(url, params={"per_page": page_size, "page": page})
        if not isinstance(results, list):
            raise NetworkError(f"Expected a JSON array from {url}", url=url)
        if not results:
            break

        logger.debug("Page %d: %d repositories", page, len(results))
        repos.extend(results)
        page += 1

    return repos


def filter_package_repos(
    repos: Iterable[Mapping[str, Any]],
    suffix: str = DEFAULT_REPO_SUFFIX,
) -> Set[str]:
    """Return base names of non-fork repositories ending with ``suffix``.

    The base name is the text before the first occurrence of ``suffix``.
    """
    names: Set[str] = set()
    for repo in repos:
        if repo.get("fork"):
            continue
        name = repo.get("name") or ""
        if not name.endswith(suffix):
            continue
        names.add(name.split(suffix)[0])
    return names


async def _find_async(token: str, suffix: str, api_url: str) -> Set[str]:
    headers = {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
    }
    async with HTTPClient(headers=headers) as client:
        repos = await fetch_repositories(client, api_url=api_url)

    logger.info("Fetched %d repositories", len(repos))
    return filter_package_repos(repos, suffix)


def find_packages_on_host(
    *,
    suffix: str = DEFAULT_REPO_SUFFIX,
    token: Optional[str] = None,
    api_url: str = GITHUB_API,
) -> Set[str]:
    """Return the packages whose GitHub repositories you have access to.

    Args:
        suffix: Repository name suffix marking a package.
        token: GitHub token; read from ``GITHUB_AUTH`` when omitted.
        api_url: GitHub API base URL.

    Raises:
        CredentialError: No token is available. Raised before any request.
        NetworkError: The GitHub API request fails.
    """
    if token is None or not token.strip():
        token = read_token()
    return asyncio.run(_find_async(token.strip(), suffix, api_url))
