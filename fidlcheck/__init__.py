# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
fidlcheck: cross-file semantic validation for Franca IDL (`.fidl`) projects.

Runs before code generation and reports what a grammar-only parser cannot see:
import closure problems, package/name collisions between files, map key types,
enumerator literal formats and method argument naming.

The CLI entrypoint is `fidlcheck.fidlcheck:main`.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
