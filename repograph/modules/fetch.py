# repograph/modules/fetch.py
"""
fetch.py - collect crate records for each configured repository.

- A repository is described by an archive location: an http(s) URL (downloaded
  into a temporary directory) or a local tarball path.
- gzip / bzip2 / xz / plain tar archives are all accepted.
- Every Cargo.toml found in the archive is parsed, in archive order.
- Progress is shown with a rich spinner on stderr (disabled with quiet=True).
"""

from __future__ import annotations
import os
import shutil
import tarfile
import tempfile
import urllib.error
import urllib.request
from typing import Dict, List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from repograph import __version__
from repograph.modules import config as _config
from repograph.modules import logger as _logger
from repograph.modules.errors import RepoGraphError
from repograph.modules.manifest import ManifestError, parse_manifest
from repograph.modules.model import PackageRecord, PackageUniverse

MANIFEST_NAME = "Cargo.toml"


class FetchError(RepoGraphError):
    pass


def shorten(location: str, width: int = 40) -> str:
    if len(location) <= width:
        return location
    return "…" + location[-(width - 1):]


def is_url(location: str) -> bool:
    return location.startswith("http://") or location.startswith("https://")


class ArchiveFetcher:
    def __init__(self, workdir: Optional[str] = None, timeout: Optional[int] = None,
                 quiet: bool = False, console: Optional[Console] = None, settings=None):
        settings = settings or _config.config
        self.workdir = workdir
        self.timeout = timeout if timeout is not None else _config.fetch_timeout(settings)
        self.user_agent = settings.get("fetch", "user_agent", fallback=f"repograph/{__version__}")
        self.quiet = quiet
        self.console = console or Console(stderr=True)
        self.log = _logger.Logger("fetch")

    # ------------------------
    # Download
    # ------------------------
    def _download_if_url(self, repo_id: str, location: str, workdir: str) -> str:
        if os.path.exists(location):
            return os.path.abspath(location)
        if is_url(location):
            dest = os.path.join(workdir, f"{repo_id}.archive")
            self.log.info(f"Downloading {location} ...")
            req = urllib.request.Request(location, headers={"User-Agent": self.user_agent})
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as resp, open(dest, "wb") as out:
                    shutil.copyfileobj(resp, out)
            except (urllib.error.URLError, OSError) as e:
                raise FetchError(f"Failed to download {location!r} to {dest!r}: {e}") from e
            self.log.debug(f"Downloaded to {dest}")
            return dest
        raise FetchError(f"Archive not found and not a URL: {location}")

    # ------------------------
    # Archive walk
    # ------------------------
    def read_archive(self, archive_path: str) -> List[PackageRecord]:
        records: List[PackageRecord] = []
        try:
            with tarfile.open(archive_path, "r:*") as tar:
                for member in tar:
                    if not member.isfile() or os.path.basename(member.name) != MANIFEST_NAME:
                        continue
                    fh = tar.extractfile(member)
                    if fh is None:
                        raise FetchError(f"Failed to read {member.name!r} from archive")
                    with fh:
                        content = fh.read()
                    try:
                        record = parse_manifest(content, origin=member.name)
                    except ManifestError as e:
                        raise FetchError(str(e)) from e
                    if record is None:
                        self.log.debug(f"Skipping virtual manifest {member.name}")
                        continue
                    self.log.debug(f"Found crate {record.name} in {member.name}")
                    records.append(record)
        except (tarfile.TarError, OSError) as e:
            raise FetchError(f"Failed to enumerate the entries of {archive_path!r}: {e}") from e
        return records

    def fetch(self, repo_id: str, location: str, workdir: Optional[str] = None) -> List[PackageRecord]:
        label = shorten(location)
        with tempfile.TemporaryDirectory(prefix="repograph-", dir=workdir or self.workdir) as tmp:
            with Progress(SpinnerColumn(style="green"), TimeElapsedColumn(),
                          TextColumn("{task.description}"),
                          console=self.console, transient=True, disable=self.quiet) as progress:
                task = progress.add_task(f"downloading {label}", total=None)
                try:
                    archive = self._download_if_url(repo_id, location, tmp)
                    progress.update(task, description=f"parsing {label}")
                    records = self.read_archive(archive)
                except FetchError as e:
                    raise FetchError(f"Failed to retrieve information for repository {repo_id}: {e}") from e
                progress.update(task, description=f"handling {label}")
        self.log.info(f"{repo_id}: {len(records)} crate(s)")
        return records

    def fetch_all(self, repositories: Dict[str, str]) -> PackageUniverse:
        """Fetch every repository, in configuration order, into a universe."""
        universe = PackageUniverse()
        for repo_id, location in repositories.items():
            universe.add_repository(repo_id, self.fetch(repo_id, location))
        return universe
