import os
import tomllib
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CompileOptions:
    line_markers: bool = False
    source_name: str = "<string>"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompileOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")
        if "line_markers" in data and not isinstance(data["line_markers"], bool):
            raise ConfigError("Option 'line_markers' must be a boolean")
        if "source_name" in data and not isinstance(data["source_name"], str):
            raise ConfigError("Option 'source_name' must be a string")
        return cls(**dict(data))

    def merged(self, **overrides: Any) -> "CompileOptions":
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _read_toml(path: str) -> Dict[str, Any]:
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    section = data.get("gotoscript", {})
    if not isinstance(section, dict):
        raise ConfigError("[gotoscript] must be a table")
    return section


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    raw = environ.get("GOTOSCRIPT_LINE_MARKERS")
    if raw is not None:
        overrides["line_markers"] = raw.strip().lower() in _TRUTHY
    return overrides


def load_options(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> CompileOptions:
    """Resolve options: defaults, then the TOML file, then the environment, then explicit overrides."""
    options = CompileOptions()
    if config_path:
        options = CompileOptions.from_mapping(_read_toml(config_path))
    env = os.environ if environ is None else environ
    options = options.merged(**_env_overrides(env))
    return options.merged(**overrides)
