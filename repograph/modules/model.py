# repograph/modules/model.py
"""
In-memory dependency model.

A PackageUniverse maps repository ids (in configured order) to the crates
found in that repository (in discovery order). Nothing here sorts or
deduplicates: both orders drive cluster/color assignment in the renderer and
the order in which cycles are discovered.
"""

from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from repograph.modules.errors import FatalDataError


class PublishPolicy:
    """Where a crate may be published."""

    NOWHERE = "nowhere"
    DEFAULT = "default"
    EXPLICIT = "explicit"

    def __init__(self, kind: str, registries: Sequence[str] = ()):
        if kind not in (self.NOWHERE, self.DEFAULT, self.EXPLICIT):
            raise ValueError(f"Unknown publish policy: {kind!r}")
        self.kind = kind
        self.registries: Tuple[str, ...] = tuple(registries) if kind == self.EXPLICIT else ()

    @classmethod
    def nowhere(cls) -> "PublishPolicy":
        return cls(cls.NOWHERE)

    @classmethod
    def default(cls) -> "PublishPolicy":
        return cls(cls.DEFAULT)

    @classmethod
    def at(cls, registries: Iterable[str]) -> "PublishPolicy":
        return cls(cls.EXPLICIT, tuple(registries))

    def __eq__(self, other):
        if not isinstance(other, PublishPolicy):
            return NotImplemented
        return self.kind == other.kind and self.registries == other.registries

    def __hash__(self):
        return hash((self.kind, self.registries))

    def __repr__(self):
        if self.kind == self.EXPLICIT:
            return f"PublishPolicy.at({list(self.registries)!r})"
        return f"PublishPolicy.{self.kind}()"


class DependencyEdge:
    __slots__ = ("target_name", "is_path_dependency", "source_registry")

    def __init__(self, target_name: str, is_path_dependency: bool = False,
                 source_registry: Optional[str] = None):
        self.target_name = target_name
        self.is_path_dependency = bool(is_path_dependency)
        self.source_registry = source_registry

    @property
    def is_significant(self) -> bool:
        """Local or pinned to an explicit registry."""
        return self.is_path_dependency or self.source_registry is not None

    def __eq__(self, other):
        if not isinstance(other, DependencyEdge):
            return NotImplemented
        return (self.target_name, self.is_path_dependency, self.source_registry) == \
            (other.target_name, other.is_path_dependency, other.source_registry)

    def __hash__(self):
        return hash((self.target_name, self.is_path_dependency, self.source_registry))

    def __repr__(self):
        return (f"DependencyEdge({self.target_name!r}, path={self.is_path_dependency}, "
                f"registry={self.source_registry!r})")


class PackageRecord:
    __slots__ = ("name", "publish_policy", "dependencies")

    def __init__(self, name: str, publish_policy: Optional[PublishPolicy] = None,
                 dependencies: Iterable[DependencyEdge] = ()):
        self.name = name
        self.publish_policy = publish_policy or PublishPolicy.default()
        self.dependencies: Tuple[DependencyEdge, ...] = tuple(dependencies)

    def __repr__(self):
        return f"PackageRecord({self.name!r}, {self.publish_policy!r}, deps={len(self.dependencies)})"


class Repository:
    def __init__(self, repo_id: str, packages: Iterable[PackageRecord] = ()):
        self.id = repo_id
        self.packages: List[PackageRecord] = list(packages)

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(self.packages)

    def __len__(self):
        return len(self.packages)

    def __repr__(self):
        return f"Repository({self.id!r}, {len(self.packages)} packages)"


class PackageUniverse:
    """Ordered mapping repository id -> Repository."""

    def __init__(self):
        self._repos: Dict[str, Repository] = {}

    @classmethod
    def from_records(cls, records: Dict[str, Iterable[PackageRecord]]) -> "PackageUniverse":
        universe = cls()
        for repo_id, pkgs in records.items():
            universe.add_repository(repo_id, pkgs)
        return universe

    def add_repository(self, repo_id: str, packages: Iterable[PackageRecord] = ()) -> Repository:
        if repo_id in self._repos:
            raise FatalDataError(f"Repository {repo_id} was configured multiple times")
        repo = Repository(repo_id, packages)
        self._repos[repo_id] = repo
        return repo

    def repositories(self) -> List[Repository]:
        return list(self._repos.values())

    def repository(self, repo_id: str) -> Repository:
        return self._repos[repo_id]

    def all_packages(self) -> Iterator[Tuple[str, PackageRecord]]:
        for repo in self._repos.values():
            for pkg in repo.packages:
                yield repo.id, pkg

    def index_of(self, repo_id: str) -> int:
        for idx, rid in enumerate(self._repos):
            if rid == repo_id:
                return idx
        raise KeyError(repo_id)

    def __contains__(self, repo_id):
        return repo_id in self._repos

    def __len__(self):
        return len(self._repos)

    def __iter__(self) -> Iterator[Repository]:
        return iter(self._repos.values())


class Cycle:
    """A walk leaving its root repository and coming back to it."""

    __slots__ = ("steps",)

    def __init__(self, steps: Iterable[Tuple[str, str]]):
        self.steps: Tuple[Tuple[str, str], ...] = tuple(steps)
        if len(self.steps) < 2:
            raise ValueError("a cycle needs at least two steps")

    @property
    def root(self) -> str:
        return self.steps[0][0]

    def format(self) -> str:
        return " -> ".join(f"{name}[{repo}]" for repo, name in self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __len__(self):
        return len(self.steps)

    def __eq__(self, other):
        if not isinstance(other, Cycle):
            return NotImplemented
        return self.steps == other.steps

    def __hash__(self):
        return hash(self.steps)

    def __repr__(self):
        return f"Cycle({self.format()})"
