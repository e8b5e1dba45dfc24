from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mdreport.foundation.logging_utils import LOG_LEVELS
from mdreport.render.model import CompanionFiles

_KNOWN_KEYS: dict[str, frozenset[str]] = {
    "render": frozenset({"load_profile_file", "charts_file", "open_in_viewer"}),
    "logging": frozenset({"level"}),
}


def parse_bool(value: Any, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts True/False, 0/1 and the strings true/false/1/0/yes/no
    (case-insensitive, surrounding whitespace ignored).
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
    raise ValueError(f"Invalid boolean for {path}: {value!r}")


def _section(cfg: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = cfg.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Invalid config type for {name}: expected mapping")
    return value


def _file_name(section: Mapping[str, Any], key: str, path: str, default: str) -> str:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid config value for {path}: expected a non-empty file name")
    name = value.strip()
    if "/" in name or "\\" in name:
        raise ValueError(f"Invalid config value for {path}: must be a bare file name, got {name!r}")
    return name


@dataclass(frozen=True)
class RenderConfig:
    companions: CompanionFiles = CompanionFiles()
    open_in_viewer: bool = True
    log_level: str = "INFO"

    @staticmethod
    def from_dict(cfg: Mapping[str, Any]) -> tuple["RenderConfig", list[str]]:
        """
        Parse and validate configuration, returning (RenderConfig, warnings).

        Raises:
            ValueError: if a known key holds an invalid value.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        warnings: list[str] = []
        for key, value in cfg.items():
            if key not in _KNOWN_KEYS:
                warnings.append(f"Unknown config key: {key}")
            elif isinstance(value, Mapping):
                for child in value:
                    if child not in _KNOWN_KEYS[key]:
                        warnings.append(f"Unknown config key: {key}.{child}")

        render = _section(cfg, "render")
        defaults = CompanionFiles()
        companions = CompanionFiles(
            load_profile=_file_name(render, "load_profile_file", "render.load_profile_file", defaults.load_profile),
            charts=_file_name(render, "charts_file", "render.charts_file", defaults.charts),
        )
        open_in_viewer = True
        if render.get("open_in_viewer") is not None:
            open_in_viewer = parse_bool(render["open_in_viewer"], "render.open_in_viewer")

        level = _section(cfg, "logging").get("level", "INFO")
        if not isinstance(level, str) or level.strip().upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid config value for logging.level: {level!r}")

        return (
            RenderConfig(companions=companions, open_in_viewer=open_in_viewer, log_level=level.strip().upper()),
            warnings,
        )
