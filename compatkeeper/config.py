"""Configuration file loader for compatkeeper.

Supports two formats:

- ``compatkeeper.toml``: settings under the ``[compatkeeper]`` table
- ``pyproject.toml``: settings under the ``[tool.compatkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``COMPATKEEPER_CONFIG``
2. ``compatkeeper.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.compatkeeper]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Example (``compatkeeper.toml``)::

    [compatkeeper]
    registries = ["~/.julia/registries/General", "registries/Internal"]
    stdlib_names = ["MyVendoredLib"]
    repo_suffix = ".jl"
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from compatkeeper.constants import DEFAULT_REPO_SUFFIX
from compatkeeper.exceptions import ConfigError
from compatkeeper.utils.logger import get_logger

logger = get_logger("config")

_KNOWN_OPTIONS = frozenset({"registries", "stdlib_names", "stdlib_dir", "repo_suffix"})


@dataclass
class CompatKeeperConfig:
    """Parsed and validated compatkeeper configuration.

    All fields have defaults, so an empty config file is valid.

    Attributes:
        registries: Registry directories in precedence order (last wins).
            Empty means auto-discovery from the depots.
        stdlib_names: Names added to the standard-library list.
        stdlib_dir: Directory whose entries replace the built-in
            standard-library list.
        repo_suffix: Repository name suffix used by ``discover``.
        source_path: Path to the loaded config file, or ``None``.
    """

    registries: List[Path] = field(default_factory=list)
    stdlib_names: List[str] = field(default_factory=list)
    stdlib_dir: Optional[Path] = None
    repo_suffix: str = DEFAULT_REPO_SUFFIX

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the options as a dictionary for debug logging."""
        return {
            "registries": [str(p) for p in self.registries],
            "stdlib_names": list(self.stdlib_names),
            "stdlib_dir": str(self.stdlib_dir) if self.stdlib_dir else None,
            "repo_suffix": self.repo_suffix,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to the config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    compatkeeper_toml = cwd / "compatkeeper.toml"
    if compatkeeper_toml.is_file():
        logger.debug("Found compatkeeper.toml: %s", compatkeeper_toml)
        return compatkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.compatkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True if ``pyproject.toml`` has a ``[tool.compatkeeper]`` table.

    Unreadable or invalid files count as not having one.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "compatkeeper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> CompatKeeperConfig:
    """Load and validate compatkeeper configuration.

    Args:
        config_path: Explicit path to a config file; auto-discovered when
            ``None`` (see :func:`discover_config_file`).

    Returns:
        Validated :class:`CompatKeeperConfig`, defaults when no file exists.

    Raises:
        ConfigError: The file cannot be parsed, has unknown keys, or has
            invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return CompatKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("compatkeeper", {})
    else:
        section = raw.get("compatkeeper", {})

    if not section:
        logger.debug("Config file found but no compatkeeper section, using defaults")
        return CompatKeeperConfig(source_path=resolved)

    config = _parse_section(section, base_dir=resolved.parent, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML configuration file.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _string_list(value: Any, option: str, config_path: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(
            f"{option} must be a list of strings",
            config_path=config_path,
            option=option,
        )
    return list(value)


def _resolve_path(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _parse_section(
    section: Dict[str, Any],
    *,
    base_dir: Path,
    config_path: str,
) -> CompatKeeperConfig:
    """Validate a ``[compatkeeper]`` table.

    Relative paths are resolved against ``base_dir``.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = CompatKeeperConfig()

    unknown = set(section.keys()) - _KNOWN_OPTIONS
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "registries" in section:
        entries = _string_list(section["registries"], "registries", config_path)
        config.registries = [_resolve_path(e, base_dir) for e in entries]

    if "stdlib_names" in section:
        config.stdlib_names = _string_list(section["stdlib_names"], "stdlib_names", config_path)

    if "stdlib_dir" in section:
        val = section["stdlib_dir"]
        if not isinstance(val, str):
            raise ConfigError(
                f"stdlib_dir must be a string, got {type(val).__name__}",
                config_path=config_path,
                option="stdlib_dir",
            )
        config.stdlib_dir = _resolve_path(val, base_dir)

    if "repo_suffix" in section:
        val = section["repo_suffix"]
        if not isinstance(val, str) or not val:
            raise ConfigError(
                "repo_suffix must be a non-empty string",
                config_path=config_path,
                option="repo_suffix",
            )
        config.repo_suffix = val

    return config
