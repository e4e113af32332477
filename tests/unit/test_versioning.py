from __future__ import annotations

from maestro.versioning import project_revision, project_version


def test_project_revision_prefers_env(monkeypatch) -> None:
    monkeypatch.setenv("MAESTRO_BUILD_REVISION", "abc1234")
    project_revision.cache_clear()
    try:
        assert project_revision() == "abc1234"
    finally:
        project_revision.cache_clear()


def test_project_version_is_non_empty() -> None:
    assert project_version()
