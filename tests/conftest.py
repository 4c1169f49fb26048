import io
import os
import tarfile

import pytest
from rich.console import Console

from repograph.modules import config as _config
from repograph.modules import logger as _logger
from repograph.modules.model import DependencyEdge, PackageRecord, PackageUniverse, PublishPolicy


class Builder:
    """Small helpers to spell universes in tests."""

    @staticmethod
    def dep(name, path=False, registry=None):
        return DependencyEdge(name, is_path_dependency=path, source_registry=registry)

    @staticmethod
    def pkg(name, *deps, publish=None):
        edges = [d if isinstance(d, DependencyEdge) else DependencyEdge(d) for d in deps]
        return PackageRecord(name, publish or PublishPolicy.default(), edges)

    @staticmethod
    def universe(*repos):
        """universe(("repoA", [pkg, ...]), ("repoB", [...]))"""
        u = PackageUniverse()
        for repo_id, pkgs in repos:
            u.add_repository(repo_id, pkgs)
        return u


@pytest.fixture
def build():
    return Builder


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Never read the developer's real repograph.conf during tests."""
    monkeypatch.setattr(_config, "config", _config.SettingsConfig([]))
    monkeypatch.setattr(_logger.Logger, "level_override", None)


@pytest.fixture
def err_console():
    # read back with err_console.file.getvalue()
    return Console(file=io.StringIO(), color_system=None, width=200, highlight=False)


@pytest.fixture
def make_tarball(tmp_path):
    """Write {relative path: text} into a tarball and return its path."""
    def _make(name, files, compression="gz"):
        mode = f"w:{compression}" if compression else "w"
        suffix = ".tar.gz" if compression == "gz" else ".tar"
        path = os.path.join(str(tmp_path), name + suffix)
        with tarfile.open(path, mode) as tar:
            for rel, text in files.items():
                data = text.encode("utf-8")
                info = tarfile.TarInfo(rel)
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
        return path
    return _make
