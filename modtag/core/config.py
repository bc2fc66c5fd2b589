"""Typed configuration loading and access.

The repository may carry a `.modtag.toml` at its root. Every key is optional;
a missing file yields the defaults used by the module-versioning workflow.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ModulesConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".modtag.toml"

DEFAULT_MODULE_PREFIXES = ("helpers", "resources", "services")
DEFAULT_VERSION_FILE = "VERSION"
DEFAULT_MAX_PARALLEL = 4
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_REMOTE = "origin"
DEFAULT_SSH_HOST = "github.com"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ModulesConfig:
    """Where modules live and how their version is recorded."""

    prefixes: tuple[str, ...] = DEFAULT_MODULE_PREFIXES
    version_file: str = DEFAULT_VERSION_FILE


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release fan-out and publishing settings."""

    max_parallel: int = DEFAULT_MAX_PARALLEL
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    remote: str = DEFAULT_REMOTE
    # Host used in the `git::ssh://git@<host>/...` source locator.
    ssh_host: str = DEFAULT_SSH_HOST


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    modules: ModulesConfig = field(default_factory=ModulesConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        modules: StrDict = get_table(data, "modules") or {}
        release: StrDict = get_table(data, "release") or {}

        prefixes = get_str_list(modules, "prefixes")
        if prefixes is not None:
            prefixes = [p.strip("/") for p in prefixes if p.strip("/")]

        max_parallel = get_int(release, "max_parallel")
        if max_parallel is not None and max_parallel < 1:
            raise ValueError("release.max_parallel must be >= 1")

        retry_attempts = get_int(release, "retry_attempts")
        if retry_attempts is not None and retry_attempts < 1:
            raise ValueError("release.retry_attempts must be >= 1")

        return cls(
            modules=ModulesConfig(
                prefixes=tuple(prefixes) if prefixes else DEFAULT_MODULE_PREFIXES,
                version_file=get_str(modules, "version_file") or DEFAULT_VERSION_FILE,
            ),
            release=ReleaseConfig(
                max_parallel=max_parallel or DEFAULT_MAX_PARALLEL,
                retry_attempts=retry_attempts or DEFAULT_RETRY_ATTEMPTS,
                remote=get_str(release, "remote") or DEFAULT_REMOTE,
                ssh_host=get_str(release, "ssh_host") or DEFAULT_SSH_HOST,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the `.modtag.toml` file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(repo_root: Path) -> Result[Config, ConfigError]:
    """Load `.modtag.toml` from the repository root, or defaults if absent.

    A file that exists but cannot be parsed is still an error.
    """
    path = repo_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
