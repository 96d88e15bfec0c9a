# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Element name checks for type collections and interfaces.

Generators map `package.Element` onto nested namespaces, so an element name
must not contain the package separator, and no other file may use
`package.Element` (or anything below it) as its own package: the generated
namespaces would clash.

Collisions with files the root imports are errors; collisions with files that
are merely part of the scanned project are warnings, since they only bite if
someone later imports both.
"""

from __future__ import annotations

from typing import List, Optional

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import ERROR, WARNING, Diagnostic
from fidlcheck.imports import ClosureResult
from fidlcheck.model import PACKAGE_SEPARATOR, Document, TypeCollection
from fidlcheck.paths import normalize_path
from fidlcheck.symbol_index import SymbolIndex, qualify


def _label(element: TypeCollection) -> str:
	return f"{element.kind} name"


def check_element_name(document: Document, element: TypeCollection) -> Optional[Diagnostic]:
	if PACKAGE_SEPARATOR in element.name:
		return make_diagnostic(ERROR, "Name may not contain '.'", document, element.name, "name", span=element.span)
	return None


def _is_nested_package(package: str, prefix: str) -> bool:
	return package == prefix or package.startswith(prefix + PACKAGE_SEPARATOR)


def check_collisions(
	root: Document,
	element: TypeCollection,
	index: SymbolIndex,
	closure: ClosureResult,
	*,
	same_name: bool = True,
) -> List[Diagnostic]:
	"""
	Package collisions of one element of `root` against `index`.

	Indexed files are visited sorted by package, then file, and each colliding
	file is reported once per kind of collision. A file whose only type
	collection is anonymous still occupies its package.
	"""
	if not element.name:
		return []
	out: List[Diagnostic] = []
	root_file = normalize_path(root.source_path)
	imported = closure.transitive_imports()
	prefix = qualify(root.name, element.name)
	label = _label(element)

	for file, package in index.file_packages():
		if file == root_file or not _is_nested_package(package, prefix):
			continue
		if file in imported:
			message = (
				f"Imported file's package {package} may not start with package "
				f"{root.name} + {label} {element.name}"
			)
			out.append(make_diagnostic(ERROR, message, root, element.name, "name", span=element.span))
		else:
			message = f"{file}. File's package {package} starts with package {root.name} + {label} {element.name}"
			out.append(make_diagnostic(WARNING, message, root, element.name, span=element.span))

	if same_name:
		for other in index.files_declaring(root.name, element.name):
			if other == root_file:
				continue
			if other in imported:
				message = f"Imported file {other} has interface or typeCollection with the same name and same package!"
				out.append(make_diagnostic(ERROR, message, root, element.name, "name", span=element.span))
			else:
				message = f"Interface or typeCollection in file {other} has the same name and same package!"
				out.append(make_diagnostic(WARNING, message, root, element.name, "name", span=element.span))
	return out


__all__ = ["check_element_name", "check_collisions"]
