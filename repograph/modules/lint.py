# repograph/modules/lint.py
"""
Lint pass over a PackageUniverse.

  1. crate names must be unique across all repositories; a duplicate raises
     DuplicateNameError and nothing else runs.
  2. cross-repository cycles are searched and reported on the diagnostic
     console. They never abort the run; the caller decides what a failed
     lint means for the exit status.
"""

from __future__ import annotations
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from repograph.modules import logger as _logger
from repograph.modules.graph import CycleDetector
from repograph.modules.model import Cycle, PackageUniverse
from repograph.modules.resolver import NameResolver


class LintReport:
    def __init__(self, cycles: List[Cycle]):
        self.cycles = list(cycles)

    @property
    def all_passed(self) -> bool:
        return not self.cycles

    def __repr__(self):
        return f"LintReport(cycles={len(self.cycles)})"


def make_err_console(no_color: bool = False) -> Console:
    if no_color:
        return Console(stderr=True, color_system=None, highlight=False)
    return Console(stderr=True, highlight=False)


def format_cycle(cycle: Cycle) -> Text:
    line = Text(" *")
    for repo, name in cycle:
        line.append(" ")
        line.append(name, style="bold")
        line.append(f"[{repo}]", style="dim italic")
    return line


class LintAggregator:
    def __init__(self, universe: PackageUniverse, console: Optional[Console] = None,
                 max_depth: Optional[int] = None, logger=None):
        self.universe = universe
        self.console = console or make_err_console()
        self.max_depth = max_depth
        self.log = logger or _logger.Logger("lint")

    def run(self) -> LintReport:
        # fatal, propagates to the caller
        resolver = NameResolver(self.universe)
        self.log.debug(f"Indexed {len(resolver)} crates from {len(self.universe)} repositories")

        detector = CycleDetector(self.universe, resolver, max_depth=self.max_depth, logger=self.log)
        report = LintReport(detector.find_cycles())
        self.report(report)
        return report

    def report(self, report: LintReport):
        if report.all_passed:
            self.log.info("No cyclic dependency across repositories")
            return
        self.log.warning(f"{len(report.cycles)} cyclic dependencies across repositories")
        self.console.print(f"Cyclic dependencies across repositories ({len(report.cycles)}):",
                           markup=False, highlight=False, soft_wrap=True)
        for cycle in report.cycles:
            self.console.print(format_cycle(cycle), soft_wrap=True)


def run_lints(universe: PackageUniverse, console: Optional[Console] = None,
              max_depth: Optional[int] = None) -> LintReport:
    return LintAggregator(universe, console=console, max_depth=max_depth).run()
