# repograph/modules/cli.py
"""
Command line entry point.

  repograph repos.toml                  # clustered graph on stdout
  repograph repos.toml --use-colors     # one color per repository
  repograph repos.toml --lint           # exit 1 if some lint failed

The dot document goes to stdout; progress, logs and lint findings go to
stderr, so `repograph repos.toml | dot -Tsvg > deps.svg` works as expected.

Exit codes: 0 ok, 1 lint failure (only with --lint), 2 fatal error.
"""

from __future__ import annotations
import argparse
import os
import sys
import traceback
from typing import List, Optional

from repograph.modules import config as _config
from repograph.modules import logger as _logger
from repograph.modules.errors import FatalConfigurationError, RepoGraphError
from repograph.modules.fetch import ArchiveFetcher
from repograph.modules.lint import LintAggregator, make_err_console
from repograph.modules.render import GraphMode, write_graph

EXIT_OK = 0
EXIT_LINT = 1
EXIT_FATAL = 2


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="repograph",
        description="Lint and graph crate dependencies across several repositories")
    ap.add_argument("config", help="TOML file with a [tarballs] table: repository = archive URL or path")
    ap.add_argument("--use-colors", action="store_true",
                    help="Use a colored graph instead of a clustered graph in the output")
    ap.add_argument("--lint", action="store_true",
                    help="Return a non-zero value if some lints notice errors")
    ap.add_argument("--conf", help="Path to repograph.conf (settings)")
    ap.add_argument("--no-color", action="store_true", help="Disable color on stderr")
    ap.add_argument("-q", "--quiet", action="store_true", help="No progress display, warnings and errors only")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    if args.verbose:
        _logger.Logger.override_level("debug")
    elif args.quiet:
        _logger.Logger.override_level("warning")
    else:
        _logger.Logger.override_level(None)

    console = make_err_console(args.no_color)
    try:
        if args.conf:
            if not os.path.isfile(args.conf):
                raise FatalConfigurationError(f"Settings file not found: {args.conf}")
            _config.config = _config.SettingsConfig([args.conf])
        log = _logger.Logger("cli")
        if _config.config.loaded_from:
            log.debug(f"Settings loaded from {_config.config.loaded_from}")

        repos = _config.load_repositories(args.config)
        log.info(f"{len(repos)} repositories configured in {args.config}")

        fetcher = ArchiveFetcher(quiet=args.quiet, console=console)
        universe = fetcher.fetch_all(repos)

        report = LintAggregator(universe, console=console,
                                max_depth=_config.lint_max_depth()).run()

        mode = GraphMode.COLORS if args.use_colors else GraphMode.CLUSTER
        write_graph(universe, sys.stdout, mode)
    except RepoGraphError as e:
        console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
        return EXIT_FATAL
    except Exception as e:
        console.print(f"Unhandled error: {e}", markup=False, highlight=False, soft_wrap=True)
        _logger.Logger("cli").error(traceback.format_exc())
        return EXIT_FATAL

    if args.lint and not report.all_passed:
        console.print("Error: Some lints reported issues, see error log above",
                      markup=False, highlight=False, soft_wrap=True)
        return EXIT_LINT
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
