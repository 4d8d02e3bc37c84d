# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the ocl-parser documentation."""

project = "ocl-parser"
author = "OCL Parser Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
