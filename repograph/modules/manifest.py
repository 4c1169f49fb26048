# repograph/modules/manifest.py
"""
Cargo.toml -> PackageRecord.

Every dependency declaration becomes one DependencyEdge, in this order:
[dependencies], [dev-dependencies], [build-dependencies], then the same three
sections of each [target.<cfg>] table. A crate listed in several sections
yields several edges.
"""

from __future__ import annotations
import sys
from typing import Any, Dict, Iterator, List, Optional, Tuple

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from repograph.modules.errors import RepoGraphError
from repograph.modules.model import DependencyEdge, PackageRecord, PublishPolicy

SECTIONS = [
    ("dependencies",),
    ("dev-dependencies", "dev_dependencies"),
    ("build-dependencies", "build_dependencies"),
]


class ManifestError(RepoGraphError):
    pass


def _sections(table: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    for spellings in SECTIONS:
        for key in spellings:
            deps = table.get(key)
            if isinstance(deps, dict):
                yield from deps.items()


def _declarations(manifest: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    yield from _sections(manifest)
    targets = manifest.get("target")
    if isinstance(targets, dict):
        for target in targets.values():
            if isinstance(target, dict):
                yield from _sections(target)


def parse_dependency(key: str, spec: Any) -> DependencyEdge:
    if isinstance(spec, dict):
        name = spec.get("package") or key
        registry = spec.get("registry")
        return DependencyEdge(
            name,
            is_path_dependency="path" in spec,
            source_registry=registry if isinstance(registry, str) else None,
        )
    # "1.0" style
    return DependencyEdge(key)


def parse_publish(value: Any) -> PublishPolicy:
    if value is None or value is True:
        return PublishPolicy.default()
    if value is False:
        return PublishPolicy.nowhere()
    if isinstance(value, list):
        # cargo treats `publish = []` like `publish = false`
        if not value:
            return PublishPolicy.nowhere()
        return PublishPolicy.at(str(r) for r in value)
    if isinstance(value, dict) and value.get("workspace") is True:
        return PublishPolicy.default()
    raise ManifestError(f"Unsupported 'publish' value: {value!r}")


def load_manifest(data: Dict[str, Any], origin: str = "<manifest>") -> Optional[PackageRecord]:
    package = data.get("package")
    if package is None:
        # workspace-only (virtual) manifest
        return None
    if not isinstance(package, dict):
        raise ManifestError(f"{origin}: [package] must be a table")
    name = package.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"{origin}: [package] has no name")

    deps: List[DependencyEdge] = [parse_dependency(k, v) for k, v in _declarations(data)]
    try:
        publish = parse_publish(package.get("publish"))
    except ManifestError as e:
        raise ManifestError(f"{origin}: {e}") from e
    return PackageRecord(name, publish, deps)


def parse_manifest(content, origin: str = "<manifest>") -> Optional[PackageRecord]:
    """Parse Cargo.toml text (str or bytes)."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestError(f"Failed to decode {origin} as UTF-8") from e
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Failed to parse {origin} as a Cargo.toml file: {e}") from e
    return load_manifest(data, origin)
