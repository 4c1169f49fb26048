# repograph/modules/resolver.py

from typing import Dict, Optional, Tuple

from repograph.modules.errors import FatalDataError
from repograph.modules.model import PackageRecord, PackageUniverse


class DuplicateNameError(FatalDataError):
    def __init__(self, name: str, first_repo: str, second_repo: str):
        self.name = name
        self.first_repo = first_repo
        self.second_repo = second_repo
        super().__init__(
            f"Crate {name} was defined multiple times, eg. in repos {first_repo} and {second_repo}")


class NameResolver:
    """
    Global index crate name -> (owning repository, record).
    Built once from the universe; a name defined twice aborts construction.
    """

    def __init__(self, universe: PackageUniverse):
        self.universe = universe
        self._index: Dict[str, Tuple[str, PackageRecord]] = {}
        for repo_id, pkg in universe.all_packages():
            known = self._index.get(pkg.name)
            if known is not None:
                raise DuplicateNameError(pkg.name, known[0], repo_id)
            self._index[pkg.name] = (repo_id, pkg)

    def lookup(self, name: str) -> Optional[Tuple[str, PackageRecord]]:
        """
        Returns (repo_id, record), or None when the name is not one of the
        analyzed crates (crates.io dependency, external git crate...).
        """
        return self._index.get(name)

    def owner(self, name: str) -> Optional[str]:
        hit = self._index.get(name)
        return hit[0] if hit else None

    def __contains__(self, name):
        return name in self._index

    def __len__(self):
        return len(self._index)
