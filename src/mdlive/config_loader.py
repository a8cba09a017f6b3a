"""Load MdliveConfig from mdlive.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from mdlive._errors import ConfigError
from mdlive.config import MdliveConfig

_CONFIG_KEYS = frozenset({
    "docs_dir", "host", "port", "ws_port", "ws_path",
    "templates_dir", "static_dir", "debounce_ms", "step_ms", "verbose",
})


def load_config(root: Path, **overrides: object) -> MdliveConfig:
    """Load MdliveConfig from root, optionally merging mdlive.yaml.

    Looks for mdlive.yaml, mdlive.yml, or mdlive.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    (unset CLI flags) are ignored.

    Raises:
        ConfigError: If a config file exists but cannot be parsed.

    """
    file_config = _read_mdlive_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return MdliveConfig(root=root, **merged)


def _read_mdlive_config(root: Path) -> dict[str, object]:
    """Read mdlive config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("mdlive.yaml", "mdlive.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "mdlive.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at top level, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_mdlive_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_mdlive_section(data)


def _flatten_mdlive_section(data: dict[str, object]) -> dict[str, object]:
    """Extract mdlive.* keys into top-level config, dropping unknown keys."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("mdlive")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    return result
