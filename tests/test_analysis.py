from __future__ import annotations

import json

import pytest

from inspector_core import PrivateRegistry
from inspector_core.lockfile import (
    Ecosystem,
    GemfileLock,
    analyze_dependencies,
    find_dependency_mismatches,
    list_remotes,
    resolve_ecosystem,
)

CLEAN_LOCK = """\
GEM
  remote: https://packages.acme.io/
  specs:
    active_kafka (1.0.0)

GEM
  remote: https://rubygems.org/
  specs:
    rake (13.0.0)
"""

CONFUSED_LOCK = """\
GEM
  remote: https://rubygems.org/
  specs:
    active_kafka (1.0.0)
    cityhash (0.9.0)
    rake (13.0.0)
"""

REGISTRY = PrivateRegistry(
    url="https://packages.acme.io/",
    dependencies=["active_kafka", "cityhash"],
)


def test_resolve_ecosystem() -> None:
    assert resolve_ecosystem(ruby=True, js=False) is Ecosystem.RUBY
    assert resolve_ecosystem(ruby=False, js=True) is Ecosystem.JS
    with pytest.raises(ValueError, match="single language"):
        resolve_ecosystem(ruby=True, js=True)
    with pytest.raises(ValueError, match="no language"):
        resolve_ecosystem(ruby=False, js=False)


def test_find_dependency_mismatches_groups_by_remote() -> None:
    lock = GemfileLock()
    lock.parse(CONFUSED_LOCK.splitlines())

    assert find_dependency_mismatches(REGISTRY, lock) == {
        "https://rubygems.org/": ["active_kafka", "cityhash"]
    }


def test_analyze_writes_report_only_for_mismatched_files(tmp_path) -> None:
    clean = tmp_path / "clean_app.lock"
    clean.write_text(CLEAN_LOCK, encoding="utf-8")
    confused = tmp_path / "confused_app.lock"
    confused.write_text(CONFUSED_LOCK, encoding="utf-8")
    output_dir = tmp_path / "analyze_output"

    result = analyze_dependencies(
        [clean, confused],
        registry=REGISTRY,
        ecosystem=Ecosystem.RUBY,
        output_dir=output_dir,
    )

    assert result.parsed == [clean, confused]
    assert list(result.mismatches) == [confused]
    assert result.written == [output_dir / "confused_app_output.json"]
    assert not (output_dir / "clean_app_output.json").exists()
    payload = json.loads((output_dir / "confused_app_output.json").read_text(encoding="utf-8"))
    assert payload == {"https://rubygems.org/": ["active_kafka", "cityhash"]}


def test_analyze_skips_unreadable_file(tmp_path) -> None:
    missing = tmp_path / "gone.lock"

    result = analyze_dependencies(
        [missing],
        registry=REGISTRY,
        ecosystem=Ecosystem.RUBY,
        output_dir=tmp_path / "out",
    )

    assert result.skipped == [missing]
    assert result.parsed == []


def test_list_remotes_unions_and_filters(tmp_path) -> None:
    first = tmp_path / "a.lock"
    first.write_text(CLEAN_LOCK, encoding="utf-8")
    second = tmp_path / "b.lock"
    second.write_text(CONFUSED_LOCK, encoding="utf-8")
    output_dir = tmp_path / "remotes_output"

    all_remotes, output_path = list_remotes(
        [first, second],
        ecosystem=Ecosystem.RUBY,
        output_dir=output_dir,
    )
    acme_remotes, _ = list_remotes(
        [first, second],
        ecosystem=Ecosystem.RUBY,
        output_dir=output_dir,
        grep="ACME",
    )

    assert all_remotes == ["https://packages.acme.io/", "https://rubygems.org/"]
    assert acme_remotes == ["https://packages.acme.io/"]
    assert output_path == output_dir / "remotes.json"
    assert json.loads(output_path.read_text(encoding="utf-8")) == ["https://packages.acme.io/"]
