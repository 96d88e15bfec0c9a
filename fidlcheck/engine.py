# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Validation engine: one run per root document.

Pipeline:
  root Document
    -> import closure (loader)
    -> symbol index (closure, or the whole project when configured)
    -> structural checks over the root's elements
    -> diagnostics

A run owns its closure, index and diagnostics; nothing is carried over to the
next run except the project index cache, which callers manage explicitly.
Diagnostics never abort a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from fidlcheck.checks.enum_literals import check_enumerators
from fidlcheck.checks.imports import check_imports
from fidlcheck.checks.map_keys import check_map_keys
from fidlcheck.checks.method_args import check_method_arguments
from fidlcheck.checks.names import check_collisions, check_element_name
from fidlcheck.checks.type_cycles import check_type_cycles, check_type_references
from fidlcheck.config import ValidatorConfig
from fidlcheck.core.diagnostics import ERROR, WARNING, Diagnostic, DiagnosticCollector, DiagnosticSink, ElementRef
from fidlcheck.core.span import Span
from fidlcheck.imports import ClosureResult, resolve_closure
from fidlcheck.loader import LoaderLike, LoadFailure, call_loader
from fidlcheck.model import Document
from fidlcheck.paths import normalize_path
from fidlcheck.symbol_index import PROJECT_INDEX_CACHE, ProjectIndexCache, SymbolIndex, build_index
from fidlcheck.type_resolver import TypeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
	"""Everything one run produced. `document` is None when the root failed to load."""

	path: str
	document: Optional[Document]
	closure: Optional[ClosureResult]
	index: Optional[SymbolIndex]
	diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

	@property
	def errors(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity == ERROR]

	@property
	def warnings(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity == WARNING]

	def has_errors(self) -> bool:
		return any(d.severity == ERROR for d in self.diagnostics)


def _index_documents(project_documents: Iterable[Document], closure: ClosureResult) -> List[Document]:
	# Project copies win so the cache fingerprint stays stable across roots.
	merged: Dict[str, Document] = {}
	for doc in project_documents:
		merged.setdefault(normalize_path(doc.source_path), doc)
	for path, doc in closure.documents.items():
		merged.setdefault(path, doc)
	return [merged[p] for p in sorted(merged)]


def validate_document(
	root: Document,
	loader: LoaderLike,
	*,
	cwd: Optional[str] = None,
	config: ValidatorConfig = ValidatorConfig(),
	project_documents: Optional[Iterable[Document]] = None,
	index_cache: Optional[ProjectIndexCache] = None,
	sink: Optional[DiagnosticSink] = None,
) -> ValidationResult:
	"""
	Validate `root` and return the run's result.

	- `cwd`: directory the root's relative imports resolve against (defaults
	  to the root's own directory).
	- `project_documents`: the project file set; used for the symbol index when
	  `config.whole_project` is set, ignored otherwise.
	- `index_cache`: cache for the project-wide index (defaults to the process
	  wide `PROJECT_INDEX_CACHE`).
	- `sink`: optional extra consumer; every diagnostic is streamed into it in
	  emission order after the run.
	"""
	root_path = normalize_path(root.source_path)
	if not config.enabled:
		return ValidationResult(path=root_path, document=root, closure=None, index=None)

	closure = resolve_closure(root, cwd, loader)
	documents = closure.loaded_documents()

	if config.whole_project and project_documents is not None:
		cache = index_cache if index_cache is not None else PROJECT_INDEX_CACHE
		index = cache.get(_index_documents(project_documents, closure))
	else:
		if config.whole_project:
			logger.debug("whole-project mode without project documents; indexing the closure of %s", root_path)
		index = build_index(documents)
	resolver = TypeResolver(documents)

	collector = DiagnosticCollector(prefix=config.message_prefix)
	collector.extend(check_imports(root, closure))
	for element in root.elements():
		name_diag = check_element_name(root, element)
		if name_diag is not None:
			collector.extend([name_diag])
		if config.package_collision_check:
			collector.extend(check_collisions(root, element, index, closure, same_name=config.same_name_check))
	collector.extend(check_type_cycles(root, resolver))
	collector.extend(check_type_references(root, resolver))
	collector.extend(check_map_keys(root, resolver))
	collector.extend(check_enumerators(root))
	for iface in root.interfaces:
		collector.extend(check_method_arguments(root, iface))

	if sink is not None:
		for diag in collector.diagnostics:
			sink.accept(diag.severity, diag.message, diag.element, diag.span, code=diag.code, notes=diag.notes)
	logger.debug("validated %s: %d diagnostic(s)", root_path, len(collector))
	return ValidationResult(
		path=root_path,
		document=root,
		closure=closure,
		index=index,
		diagnostics=tuple(collector.diagnostics),
	)


def validate_path(
	path: str,
	loader: LoaderLike,
	*,
	config: ValidatorConfig = ValidatorConfig(),
	project_documents: Optional[Iterable[Document]] = None,
	index_cache: Optional[ProjectIndexCache] = None,
	sink: Optional[DiagnosticSink] = None,
) -> ValidationResult:
	"""Load `path` through `loader` and validate it; a load failure becomes an error diagnostic."""
	ident = normalize_path(path)
	result = call_loader(loader, ident)
	if isinstance(result, LoadFailure):
		collector = DiagnosticCollector(prefix=config.message_prefix)
		collector.error(f"File could not be loaded: {result.reason}", ElementRef(document=ident), Span(file=ident))
		if sink is not None:
			for diag in collector.diagnostics:
				sink.accept(diag.severity, diag.message, diag.element, diag.span)
		return ValidationResult(path=ident, document=None, closure=None, index=None, diagnostics=tuple(collector.diagnostics))
	return validate_document(
		result,
		loader,
		config=config,
		project_documents=project_documents,
		index_cache=index_cache,
		sink=sink,
	)


__all__ = ["ValidationResult", "validate_document", "validate_path"]
