# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for the ocl command-line tool."""

from ocl.config.settings import (
    CONFIG_FILE_NAME,
    OUTPUT_FORMATS,
    ConfigError,
    OclConfig,
    find_config,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "OUTPUT_FORMATS",
    "ConfigError",
    "OclConfig",
    "find_config",
    "load_config",
    "parse_config",
]
