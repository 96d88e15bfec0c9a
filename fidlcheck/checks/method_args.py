# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Method arguments may not be named like the method itself."""

from __future__ import annotations

from typing import List

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import ERROR, Diagnostic
from fidlcheck.model import Argument, Document, Interface, Method

ARG_NAME_MESSAGE = "Parameters cannot share name with method"


def check_method_argument(document: Document, iface: Interface, method: Method, arg: Argument) -> List[Diagnostic]:
	if arg.name != method.name:
		return []
	path = f"{iface.name}.{method.name}.{arg.name}"
	return [make_diagnostic(ERROR, ARG_NAME_MESSAGE, document, path, "name", span=arg.span)]


def check_method_arguments(document: Document, iface: Interface) -> List[Diagnostic]:
	out: List[Diagnostic] = []
	for method in iface.methods:
		for arg in method.out_args:
			out.extend(check_method_argument(document, iface, method, arg))
		for arg in method.in_args:
			out.extend(check_method_argument(document, iface, method, arg))
	return out


__all__ = ["ARG_NAME_MESSAGE", "check_method_argument", "check_method_arguments"]
