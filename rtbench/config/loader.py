# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Harness config loader.

Reads a YAML file, validates it against HarnessConfig and returns the frozen
result. Relative paths in the file are taken relative to the file itself, so
a config checked in next to the benchmarks works from any working directory.
Bare command names (`wasm-opt`, `moon`) are left alone and still go through
PATH.

Any failure raises a ConfigError subclass and the CLI stops before building
anything.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from rtbench.config.exceptions import ConfigLoadError, ConfigValidationError
from rtbench.config.schema import HarnessConfig

# ToolchainConfig fields that hold filesystem paths.
_TOOLCHAIN_PATH_FIELDS: tuple[str, ...] = (
    "root", "qjs", "node", "iwasm_gc", "wamrc", "ts2wasm", "node_wasm_runner",
)


def _read_mapping(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")
    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    # empty file = all defaults
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping, got {type(parsed).__name__}"
        )
    return parsed


def _rebase(value: Optional[str], base_dir: Path) -> Optional[str]:
    if not value:
        return value
    path = Path(value).expanduser()
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


def _rebase_paths(config: HarnessConfig, base_dir: Path) -> HarnessConfig:
    toolchain = config.toolchain.model_copy(update={
        name: _rebase(getattr(config.toolchain, name), base_dir)
        for name in _TOOLCHAIN_PATH_FIELDS
    })
    global_config = config.global_config.model_copy(update={
        "log_file": _rebase(config.global_config.log_file, base_dir),
    })
    return config.model_copy(update={
        "toolchain": toolchain,
        "global_config": global_config,
        "benchmark_directory": _rebase(config.benchmark_directory, base_dir),
    })


def load_config(config_path: Path) -> HarnessConfig:
    """
    Load and validate a harness config file.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A frozen HarnessConfig with relative paths resolved against the
        file's directory.

    Raises:
        ConfigLoadError: The file is missing, unreadable or not a YAML mapping.
        ConfigValidationError: The mapping doesn't match the schema.
    """
    raw_data = _read_mapping(config_path)

    try:
        config = HarnessConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    return _rebase_paths(config, config_path.resolve().parent)
