# repograph/modules/graph.py

from __future__ import annotations
from typing import Iterator, List, Optional, Tuple

from repograph.modules import logger as _logger
from repograph.modules.model import Cycle, DependencyEdge, PackageRecord, PackageUniverse
from repograph.modules.resolver import NameResolver

Path = Tuple[Tuple[str, str], ...]


class CycleDetector:
    """
    Finds dependency walks that leave a repository and come back into it.

    For every crate p of every repository R and every dependency of p that
    resolves into another repository, the dependency tree is walked until a
    crate of R shows up again; each such walk is reported. Cycles are found
    at repository granularity: edges internal to a non-root repository are
    followed too.

    A walk never re-enters a crate already on its own path (except to close
    the loop into R), so cycles that do not touch R cannot make the search
    loop forever. The same crate can still appear on independent branches.
    `max_depth`, when set, bounds the number of entries a path may reach
    before the walk stops extending it.
    """

    def __init__(self, universe: PackageUniverse, resolver: Optional[NameResolver] = None,
                 max_depth: Optional[int] = None, logger=None):
        self.universe = universe
        self.resolver = resolver or NameResolver(universe)
        self.max_depth = max_depth
        self.log = logger or _logger.Logger("cycles")
        self.truncated = 0

    def find_cycles(self) -> List[Cycle]:
        cycles: List[Cycle] = []
        self.truncated = 0
        for root_repo, root in self.universe.all_packages():
            for dep in root.dependencies:
                hit = self.resolver.lookup(dep.target_name)
                if hit is None:
                    continue
                dep_repo, dep_pkg = hit
                if dep_repo == root_repo:
                    continue
                path = ((root_repo, root.name), (dep_repo, dep_pkg.name))
                cycles.extend(self._walk(root_repo, dep_pkg, path))
        if self.truncated:
            self.log.warning(f"Cycle search stopped {self.truncated} walk(s) at max depth {self.max_depth}")
        self.log.debug(f"Cycle search finished: {len(cycles)} cycle(s)")
        return cycles

    def _walk(self, root_repo: str, pkg: PackageRecord, path: Path) -> List[Cycle]:
        # depth-first, one (path, remaining edges) frame per crate on the path;
        # no Python recursion, so chain length is not limited by the interpreter
        found: List[Cycle] = []
        stack: List[Tuple[Path, Iterator[DependencyEdge]]] = [(path, iter(pkg.dependencies))]
        while stack:
            path, deps = stack[-1]
            for dep in deps:
                hit = self.resolver.lookup(dep.target_name)
                if hit is None:
                    continue
                dep_repo, dep_pkg = hit
                step = (dep_repo, dep_pkg.name)
                if dep_repo == root_repo:
                    found.append(Cycle(path + (step,)))
                elif step in path:
                    continue
                elif self.max_depth is not None and len(path) >= self.max_depth:
                    self.truncated += 1
                else:
                    stack.append((path + (step,), iter(dep_pkg.dependencies)))
                    break
            else:
                stack.pop()
        return found


def find_cycles(universe: PackageUniverse, resolver: Optional[NameResolver] = None,
                max_depth: Optional[int] = None) -> List[Cycle]:
    return CycleDetector(universe, resolver, max_depth=max_depth).find_cycles()
