from __future__ import annotations

from pathlib import Path

import allure
import pytest

from portbump.config import DEFAULT_PORTS_ROOT, Settings, default_jobs, expand_ports_root

pytestmark = [
    allure.epic("Revision Bump"),
    allure.feature("Configuration"),
]


def test_from_env_defaults() -> None:
    settings = Settings.from_env()

    assert settings.ports_root == DEFAULT_PORTS_ROOT
    assert settings.quiet is False
    assert settings.jobs == default_jobs()
    assert settings.fail_on_error is False
    assert settings.makefile_name == "Makefile"


def test_portsdir_env_replaces_default_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTSDIR", "/home/ports")

    assert Settings.from_env().ports_root == Path("/home/ports")


def test_empty_portsdir_env_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTSDIR", "")

    assert Settings.from_env().ports_root == DEFAULT_PORTS_ROOT


def test_explicit_root_wins_over_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORTSDIR", "/home/ports")

    assert Settings.from_env(ports_root=str(tmp_path)).ports_root == tmp_path


def test_explicit_root_expands_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert Settings.from_env(ports_root="~/ports").ports_root == tmp_path / "ports"


@pytest.mark.parametrize("value", ["", "   "])
def test_blank_root_override_is_rejected(value: str) -> None:
    with pytest.raises(ValueError, match="ports root cannot be blank"):
        Settings.from_env(ports_root=value)


def test_unknown_user_home_cannot_be_expanded() -> None:
    with pytest.raises(ValueError, match="error expanding ports root"):
        expand_ports_root("~no-such-user-portbump/ports")


def test_env_flags_and_jobs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTBUMP_QUIET", "yes")
    monkeypatch.setenv("PORTBUMP_JOBS", "3")
    monkeypatch.setenv("PORTBUMP_FAIL_ON_ERROR", "1")

    settings = Settings.from_env()

    assert settings.quiet is True
    assert settings.jobs == 3
    assert settings.fail_on_error is True


def test_explicit_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTBUMP_QUIET", "off")
    monkeypatch.setenv("PORTBUMP_JOBS", "3")

    settings = Settings.from_env(quiet=True, jobs=7, fail_on_error=True)

    assert settings.quiet is True
    assert settings.jobs == 7
    assert settings.fail_on_error is True


def test_invalid_env_boolean_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTBUMP_QUIET", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value for PORTBUMP_QUIET"):
        Settings.from_env()


def test_invalid_env_jobs_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTBUMP_JOBS", "many")

    with pytest.raises(ValueError, match="Invalid integer value for PORTBUMP_JOBS"):
        Settings.from_env()


def test_validate_rejects_non_positive_jobs() -> None:
    with pytest.raises(ValueError, match="PORTBUMP_JOBS must be a positive integer"):
        Settings(jobs=0).validate()


def test_validate_rejects_nested_makefile_name() -> None:
    with pytest.raises(ValueError, match="Invalid Makefile name"):
        Settings(makefile_name="sub/Makefile").validate()


def test_settings_are_immutable() -> None:
    settings = Settings()

    with pytest.raises(AttributeError):
        settings.quiet = True  # type: ignore[misc]


def test_makefile_path_joins_root_origin_and_makefile(tmp_path: Path) -> None:
    settings = Settings(ports_root=tmp_path)

    assert settings.makefile_path("devel/foo") == tmp_path / "devel" / "foo" / "Makefile"
