# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the ``.ocl.yaml`` tool configuration file."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path

import yaml

from ocl.parser.parser import DEFAULT_MAX_DEPTH, MAX_SAFE_DEPTH

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".ocl.yaml"

OUTPUT_FORMATS = ("json", "yaml")


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass(frozen=True)
class OclConfig:
    """Settings for the ``ocl`` command-line tool.

    Attributes:
        max_depth: Nesting limit passed to the parser.
        output_format: ``"json"`` or ``"yaml"``; the default format of ``ocl dump``.
        indent: Indentation width of dumped output.
        encoding: Text encoding of OCL source files.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    output_format: str = "json"
    indent: int = 2
    encoding: str = "utf-8"


def load_config(path: Path) -> OclConfig:
    """Load and parse a configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        An OclConfig populated from the file; missing keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def find_config(directory: Path) -> OclConfig:
    """Load ``.ocl.yaml`` from *directory* if present, else return the defaults."""
    path = directory / CONFIG_FILE_NAME
    if not path.exists():
        return OclConfig()
    return load_config(path)


def parse_config(text: str, source_label: str = "<string>") -> OclConfig:
    """Parse configuration YAML text into an OclConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        ConfigError: If the YAML is invalid, a key is unknown, or a value has
            the wrong type or is out of range.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return OclConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(str(key) for key in data if key not in _KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown configuration key(s): {', '.join(unknown)}")

    defaults = OclConfig()
    max_depth = _optional_int(data, "max-depth", defaults.max_depth, source_label)
    indent = _optional_int(data, "indent", defaults.indent, source_label)
    output_format = _optional_string(data, "output-format", defaults.output_format, source_label)
    encoding = _optional_string(data, "encoding", defaults.encoding, source_label)

    if max_depth < 1:
        raise ConfigError(f"{source_label}: 'max-depth' must be at least 1")
    if max_depth > MAX_SAFE_DEPTH:
        raise ConfigError(f"{source_label}: 'max-depth' must be at most {MAX_SAFE_DEPTH}")
    if indent < 0:
        raise ConfigError(f"{source_label}: 'indent' must not be negative")
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"{source_label}: 'output-format' must be one of {', '.join(OUTPUT_FORMATS)}")
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ConfigError(f"{source_label}: unknown encoding '{encoding}'") from None

    return OclConfig(max_depth=max_depth, output_format=output_format, indent=indent, encoding=encoding)


# ################
# Implementation
# ################

_KEYS = frozenset({"max-depth", "output-format", "indent", "encoding"})


def _optional_int(mapping: dict[str, object], key: str, default: int, source_label: str) -> int:
    """Extract an optional integer field, raising ConfigError if it has the wrong type."""
    if key not in mapping:
        return default
    value = mapping[key]
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be an integer")
    return value


def _optional_string(mapping: dict[str, object], key: str, default: str, source_label: str) -> str:
    """Extract an optional string field, raising ConfigError if it has the wrong type."""
    if key not in mapping:
        return default
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value
