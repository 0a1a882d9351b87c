"""Runtime configuration for PORTREVISION bumping."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_PORTS_ROOT = Path("/usr/ports")
DEFAULT_MAKEFILE_NAME = "Makefile"


def default_jobs() -> int:
    return os.cpu_count() or 1


@dataclass(slots=True, frozen=True)
class Settings:
    """Read-only settings shared by every bump task of a batch."""

    ports_root: Path = DEFAULT_PORTS_ROOT
    quiet: bool = False
    jobs: int = field(default_factory=default_jobs)
    fail_on_error: bool = False
    makefile_name: str = DEFAULT_MAKEFILE_NAME

    @classmethod
    def from_env(
        cls,
        *,
        ports_root: str | None = None,
        quiet: bool | None = None,
        jobs: int | None = None,
        fail_on_error: bool | None = None,
    ) -> Settings:
        """Load settings from environment, then apply explicit overrides.

        ``PORTSDIR`` replaces the default ports root when set and non-empty;
        an explicit ``ports_root`` wins over both and may start with ``~``.
        """

        root = DEFAULT_PORTS_ROOT
        env_root = os.getenv("PORTSDIR", "")
        if env_root:
            root = Path(env_root)
        if ports_root is not None:
            root = expand_ports_root(ports_root)

        settings = cls(
            ports_root=root,
            quiet=_env_bool("PORTBUMP_QUIET", default=False),
            jobs=_env_int("PORTBUMP_JOBS", default=default_jobs()),
            fail_on_error=_env_bool("PORTBUMP_FAIL_ON_ERROR", default=False),
        )
        overrides: dict[str, object] = {}
        if quiet is not None:
            overrides["quiet"] = quiet
        if jobs is not None:
            overrides["jobs"] = jobs
        if fail_on_error is not None:
            overrides["fail_on_error"] = fail_on_error
        return replace(settings, **overrides) if overrides else settings

    def validate(self) -> None:
        """Raise configuration error before any Makefile is touched."""

        if not str(self.ports_root).strip():
            raise ValueError("ports root cannot be blank")
        if self.jobs <= 0:
            raise ValueError(f"PORTBUMP_JOBS must be a positive integer, got {self.jobs}.")
        if not self.makefile_name or "/" in self.makefile_name:
            raise ValueError(f"Invalid Makefile name: {self.makefile_name!r}")

    def makefile_path(self, origin: str) -> Path:
        """Path of the Makefile for ``category/name`` origin."""

        return self.ports_root / origin / self.makefile_name


def expand_ports_root(value: str) -> Path:
    """Expand ``~``/``~user`` in a ports root override."""

    if not value.strip():
        raise ValueError("ports root cannot be blank")
    expanded = os.path.expanduser(value)
    if expanded.startswith("~"):
        raise ValueError(f"error expanding ports root: cannot resolve home directory in {value!r}")
    return Path(expanded)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
