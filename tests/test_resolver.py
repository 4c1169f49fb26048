import pytest

from repograph.modules.errors import FatalDataError
from repograph.modules.resolver import DuplicateNameError, NameResolver


def test_lookup_returns_owner(build):
    u = build.universe(
        ("repoA", [build.pkg("x"), build.pkg("w")]),
        ("repoB", [build.pkg("y")]),
    )
    r = NameResolver(u)
    repo, rec = r.lookup("y")
    assert repo == "repoB"
    assert rec is u.repository("repoB").packages[0]
    assert r.owner("w") == "repoA"
    assert len(r) == 3
    assert "x" in r


def test_unresolved_name_is_none(build):
    r = NameResolver(build.universe(("repoA", [build.pkg("x", "serde")])))
    assert r.lookup("serde") is None
    assert r.owner("serde") is None


def test_duplicate_across_repositories_names_both(build):
    u = build.universe(
        ("repoA", [build.pkg("dup")]),
        ("repoB", [build.pkg("other"), build.pkg("dup")]),
    )
    with pytest.raises(DuplicateNameError) as exc:
        NameResolver(u)
    err = exc.value
    assert isinstance(err, FatalDataError)
    assert (err.name, err.first_repo, err.second_repo) == ("dup", "repoA", "repoB")
    assert str(err) == "Crate dup was defined multiple times, eg. in repos repoA and repoB"


def test_duplicate_within_one_repository(build):
    u = build.universe(("repoA", [build.pkg("dup"), build.pkg("dup")]))
    with pytest.raises(DuplicateNameError):
        NameResolver(u)
