"""Shared fixtures: throwaway registries written to ``tmp_path``."""

from __future__ import annotations

import json
import hashlib
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union
from uuid import NAMESPACE_URL, UUID, uuid5

import pytest

from compatkeeper.utils.logger import disable_logging
from compatkeeper.utils.console import reconfigure_console

DepsTable = Mapping[str, Mapping[str, Union[str, UUID]]]
CompatTable = Mapping[str, Mapping[str, Any]]


def _fmt(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_fmt(v) for v in value) + "]"
    return json.dumps(str(value))


def _write_tables(path: Path, tables: Mapping[str, Mapping[str, Any]]) -> None:
    lines = []
    for key, values in tables.items():
        lines.append(f"[{json.dumps(key)}]")
        lines.extend(f"{json.dumps(k)} = {_fmt(v)}" for k, v in values.items())
        lines.append("")
    path.write_text("\n".join(lines), encoding="utf-8")


class RegistryBuilder:
    """Writes a registry in the ``Registry.toml`` layout, one package at a time.

    Package UUIDs are derived from package names, so the same name gets the
    same UUID in every registry built during a test.
    """

    def __init__(self, root: Path, name: str = "General") -> None:
        self.root = root
        self.name = name
        self.packages: Dict[UUID, Dict[str, str]] = {}
        self.root.mkdir(parents=True, exist_ok=True)
        self._write_manifest()

    @staticmethod
    def uuid(name: str) -> UUID:
        return uuid5(NAMESPACE_URL, f"compatkeeper-test:{name}")

    def package_dir(self, name: str) -> Path:
        return self.root / name[0].upper() / name

    def add(
        self,
        name: str,
        versions: Iterable[str],
        *,
        deps: Optional[DepsTable] = None,
        compat: Optional[CompatTable] = None,
        yanked: Iterable[str] = (),
        identity: Optional[UUID] = None,
    ) -> UUID:
        """Register ``name``; dependency values may be names or UUIDs."""
        identity = identity or self.uuid(name)
        pkg_dir = self.package_dir(name)
        pkg_dir.mkdir(parents=True, exist_ok=True)

        yanked = set(yanked)
        version_tables: Dict[str, Dict[str, Any]] = {}
        for version in versions:
            entry: Dict[str, Any] = {
                "git-tree-sha1": hashlib.sha1(f"{name}{version}".encode()).hexdigest()
            }
            if version in yanked:
                entry["yanked"] = True
            version_tables[version] = entry
        _write_tables(pkg_dir / "Versions.toml", version_tables)

        if deps is not None:
            resolved = {
                key: {
                    dep: str(value if isinstance(value, UUID) else self.uuid(value))
                    for dep, value in table.items()
                }
                for key, table in deps.items()
            }
            _write_tables(pkg_dir / "Deps.toml", resolved)

        if compat is not None:
            _write_tables(pkg_dir / "Compat.toml", compat)

        self.packages[identity] = {
            "name": name,
            "path": str(pkg_dir.relative_to(self.root).as_posix()),
        }
        self._write_manifest()
        return identity

    def _write_manifest(self) -> None:
        lines = [
            f"name = {json.dumps(self.name)}",
            f"uuid = {json.dumps(str(uuid5(NAMESPACE_URL, self.name)))}",
            "",
            "[packages]",
        ]
        for identity, data in self.packages.items():
            lines.append(
                f'"{identity}" = {{ name = {json.dumps(data["name"])}, '
                f'path = {json.dumps(data["path"])} }}'
            )
        (self.root / "Registry.toml").write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def make_registry(tmp_path: Path) -> Callable[..., RegistryBuilder]:
    """Factory creating registries under ``tmp_path/registries``."""

    def factory(name: str = "General") -> RegistryBuilder:
        return RegistryBuilder(tmp_path / "registries" / name, name)

    return factory


@pytest.fixture
def registry(make_registry: Callable[..., RegistryBuilder]) -> RegistryBuilder:
    """An empty registry named ``General``."""
    return make_registry()


@pytest.fixture
def held_back_registry(registry: RegistryBuilder) -> RegistryBuilder:
    """``A`` (max 2.0.0) requires ``B`` with compat ``1.*``; ``B`` is at 2.0.0."""
    registry.add(
        "A",
        ["1.0.0", "2.0.0"],
        deps={"1-2": {"B": "B"}},
        compat={"1-2": {"B": "1.*"}},
    )
    registry.add("B", ["1.0.0", "1.5.0", "2.0.0"])
    return registry


@pytest.fixture(autouse=True)
def _isolate_output(monkeypatch: pytest.MonkeyPatch):
    """Keep logging handlers and the shared console from leaking between tests."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    reconfigure_console()
    yield
    disable_logging()
    reconfigure_console()
