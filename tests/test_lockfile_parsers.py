from __future__ import annotations

import pytest

from inspector_core.lockfile import GemfileLock, YarnLock, find_lock_files
from inspector_core.lockfile.yarn import dependency_name

GEMFILE_LOCK = """\
GEM
  remote: https://rubygems.org/
  specs:
    actioncable (5.2.2)
      actionpack (= 5.2.2)
    nio4r (2.5.2)

GEM
  remote: https://packages.acme.io/
  specs:
    active_kafka (1.0.0)
      nio4r

PLATFORMS
  ruby

DEPENDENCIES
  actioncable
"""

YARN_LOCK = """\
# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.
# yarn lockfile v1


"@babel/core@^7.0.0", "@babel/core@^7.1.0":
  version "7.1.0"
  resolved "https://registry.yarnpkg.com/@babel/core/-/core-7.1.0.tgz#abc"
  dependencies:
    debug "^4.1.0"

debug@^4.1.0:
  version "4.1.1"
  resolved "https://registry.yarnpkg.com/debug/-/debug-4.1.1.tgz#def"

acme-ui@^2.0.0:
  version "2.0.0"
  resolved "https://npm.acme.io/acme-ui/-/acme-ui-2.0.0.tgz#123"
"""


def test_gemfile_lock_groups_specs_by_remote() -> None:
    lock = GemfileLock()
    lock.parse(GEMFILE_LOCK.splitlines())

    assert set(lock.remotes) == {"https://rubygems.org/", "https://packages.acme.io/"}
    assert lock.remotes["https://rubygems.org/"].dependencies == {"actioncable", "nio4r"}
    assert lock.remotes["https://packages.acme.io/"].dependencies == {"active_kafka"}


def test_yarn_lock_derives_remote_from_resolved_url() -> None:
    lock = YarnLock()
    lock.parse(YARN_LOCK.splitlines())

    assert set(lock.remotes) == {"https://registry.yarnpkg.com", "https://npm.acme.io"}
    assert lock.remotes["https://registry.yarnpkg.com"].dependencies == {"@babel/core", "debug"}
    assert lock.remotes["https://npm.acme.io"].dependencies == {"acme-ui"}


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ('"@babel/core@^7.0.0", "@babel/core@^7.1.0":', "@babel/core"),
        ("debug@^4.1.0:", "debug"),
        ('"left-pad@1.3.0":', "left-pad"),
        ("__metadata:", "__metadata:"),
    ],
)
def test_yarn_dependency_name(line: str, expected: str) -> None:
    assert dependency_name(line) == expected


def test_match_remote_urls_is_case_insensitive() -> None:
    lock = GemfileLock()
    lock.parse(GEMFILE_LOCK.splitlines())

    assert lock.match_remote_urls("ACME") == ["https://packages.acme.io/"]
    assert sorted(lock.match_remote_urls()) == [
        "https://packages.acme.io/",
        "https://rubygems.org/",
    ]


def test_mismatched_remote_urls_skips_registry_remote() -> None:
    lock = GemfileLock()
    lock.parse(GEMFILE_LOCK.splitlines())

    assert lock.mismatched_remote_urls("https://packages.acme.io/", "active_kafka") == []
    assert lock.mismatched_remote_urls("https://packages.acme.io/", "nio4r") == [
        "https://rubygems.org/"
    ]


def test_parse_file_reads_from_disk(tmp_path) -> None:
    path = tmp_path / "billing_api.lock"
    path.write_text(GEMFILE_LOCK, encoding="utf-8")

    lock = GemfileLock()
    lock.parse_file(path)

    assert "https://rubygems.org/" in lock.remotes


def test_find_lock_files_in_directory(tmp_path) -> None:
    (tmp_path / "b.lock").write_text("", encoding="utf-8")
    (tmp_path / "a.lock").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / "nested.lock").mkdir()

    assert find_lock_files(tmp_path) == [tmp_path / "a.lock", tmp_path / "b.lock"]


def test_find_lock_files_rejects_non_lock_file(tmp_path) -> None:
    path = tmp_path / "Gemfile"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError, match="not a .lock file"):
        find_lock_files(path)
    with pytest.raises(FileNotFoundError):
        find_lock_files(tmp_path / "missing.lock")
