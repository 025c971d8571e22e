"""
Centralized constants for compatkeeper.

This module defines immutable values used across compatkeeper, including the
registry file layout, standard-library names, GitHub settings, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, FrozenSet

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "compatkeeper/{version}"

# ---------------------------------------------------------------------------
# Registry layout
# ---------------------------------------------------------------------------

#: Top-level manifest listing every package of a registry.
REGISTRY_FILE: Final[str] = "Registry.toml"

#: Per-package version record (version -> tree hash, yanked flag).
VERSIONS_FILE: Final[str] = "Versions.toml"

#: Per-package range-compressed dependency table.
DEPS_FILE: Final[str] = "Deps.toml"

#: Per-package range-compressed compat table.
COMPAT_FILE: Final[str] = "Compat.toml"

#: Tree hash recorded for injected prospective versions.
SENTINEL_TREE_HASH: Final[str] = "0" * 40

#: Environment variable listing depot directories (``os.pathsep`` separated).
DEPOT_PATH_ENV: Final[str] = "JULIA_DEPOT_PATH"

#: Depot used when the environment does not name one.
DEFAULT_DEPOT_DIR: Final[str] = "~/.julia"

#: Sub-directory of a depot holding the installed registries.
REGISTRIES_DIR: Final[str] = "registries"

#: Standard libraries shipped with the runtime. Registries reference them in
#: ``Deps.toml`` but never release them, so they cannot be held back.
DEFAULT_STDLIB_NAMES: Final[FrozenSet[str]] = frozenset(
    {
        "ArgTools",
        "Artifacts",
        "Base64",
        "CRC32c",
        "CompilerSupportLibraries_jll",
        "Dates",
        "Distributed",
        "Downloads",
        "FileWatching",
        "Future",
        "GMP_jll",
        "InteractiveUtils",
        "LLVMLibUnwind_jll",
        "LazyArtifacts",
        "LibCURL",
        "LibCURL_jll",
        "LibGit2",
        "LibGit2_jll",
        "LibSSH2_jll",
        "LibUV_jll",
        "LibUnwind_jll",
        "Libdl",
        "LinearAlgebra",
        "Logging",
        "MPFR_jll",
        "Markdown",
        "MbedTLS_jll",
        "Mmap",
        "MozillaCACerts_jll",
        "NetworkOptions",
        "OpenBLAS_jll",
        "OpenLibm_jll",
        "PCRE2_jll",
        "Pkg",
        "Printf",
        "Profile",
        "REPL",
        "Random",
        "SHA",
        "Serialization",
        "SharedArrays",
        "Sockets",
        "SparseArrays",
        "Statistics",
        "SuiteSparse",
        "SuiteSparse_jll",
        "TOML",
        "Tar",
        "Test",
        "UUIDs",
        "Unicode",
        "Zlib_jll",
        "dSFMT_jll",
        "libblastrampoline_jll",
        "nghttp2_jll",
        "p7zip_jll",
    }
)

# ---------------------------------------------------------------------------
# GitHub discovery
# ---------------------------------------------------------------------------

#: Base URL for the GitHub REST API.
GITHUB_API: Final[str] = "https://api.github.com"

#: Endpoint listing repositories the authenticated user has access to.
GITHUB_USER_REPOS: Final[str] = "/user/repos"

#: Environment variable holding the GitHub token.
GITHUB_TOKEN_ENV: Final[str] = "GITHUB_AUTH"

#: Repositories requested per page.
GITHUB_PAGE_SIZE: Final[int] = 100

#: Repository name suffix marking a package repository.
DEFAULT_REPO_SUFFIX: Final[str] = ".jl"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
