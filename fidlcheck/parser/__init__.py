# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Franca IDL front end: turns `.fidl` source text into `fidlcheck.model`
documents.

Callers that work with files should go through `fidlcheck.loader.FileLoader`,
which converts syntax errors into `LoadFailure` values instead of raising.
"""

from __future__ import annotations

from .parser import FidlSyntaxError, parse_fidl

__all__ = ["FidlSyntaxError", "parse_fidl"]
