from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "MDREPORT_CONFIG"


def find_repo_root(start: str | os.PathLike[str] | None = None) -> str:
    start_path = Path(start or os.getcwd()).resolve()
    if start_path.is_file():
        start_path = start_path.parent

    for candidate in (start_path, *start_path.parents):
        if (candidate / "pyproject.toml").is_file() or (candidate / ".git").exists():
            return str(candidate)

    raise FileNotFoundError(f"Cannot locate repo root: searched from {start_path} for pyproject.toml, .git")


def load_yaml_mapping(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def deep_merge(base: Any, overlay: Any, *, path: str = "") -> Any:
    if overlay is None:
        return None
    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, value in overlay.items():
            child = f"{path}.{key}" if path else str(key)
            merged[key] = deep_merge(base[key], value, path=child) if key in base else value
        return merged

    if isinstance(overlay, Mapping):
        raise ValueError(
            f"Invalid config overlay merge at {path}: base is {type(base).__name__} but overlay is mapping"
        )
    return overlay


def load_config(
    *,
    config_path: str | None = None,
    env_var: str | None = CONFIG_ENV_VAR,
    config_dir: str | None = None,
    start_dir: str | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load ``config.yaml`` plus an optional ``config.local.yaml`` overlay.

    An explicit ``config_path`` (or the ``env_var`` override) loads that single
    file with no overlay. Otherwise ``config_dir`` defaults to ``<repo>/config``.

    Returns:
        (config mapping, meta) where meta records the mode and loaded paths.
    """

    explicit = (config_path or "").strip() or None
    mode = "explicit"
    if explicit is None and env_var:
        explicit = os.environ.get(env_var, "").strip() or None
        mode = "env"

    if explicit:
        expanded = os.path.abspath(os.path.expandvars(os.path.expanduser(explicit)))
        return load_yaml_mapping(expanded), {"mode": mode, "paths": [expanded], "env_var": env_var}

    if config_dir is None:
        config_dir = os.path.join(find_repo_root(start_dir), "config")
    base_path = os.path.join(config_dir, "config.yaml")
    local_path = os.path.join(config_dir, "config.local.yaml")
    if not os.path.exists(base_path):
        raise FileNotFoundError(f"Missing base config file: {base_path}")

    cfg = load_yaml_mapping(base_path)
    paths = [os.path.abspath(base_path)]
    mode = "base"
    if os.path.exists(local_path):
        cfg = deep_merge(cfg, load_yaml_mapping(local_path))
        paths.append(os.path.abspath(local_path))
        mode = "base+local"

    return cfg, {"mode": mode, "paths": paths, "env_var": env_var}
