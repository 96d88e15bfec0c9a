# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records produced by the validators.

A Diagnostic is pure data: severity, message, a reference to the offending
model element and a best-effort source span. Validators never stop a run;
whoever consumes the diagnostics decides whether an error blocks generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from .span import Span

ERROR = "error"
WARNING = "warning"
INFO = "info"

SEVERITIES = (ERROR, WARNING, INFO)


@dataclass(frozen=True)
class ElementRef:
	"""
	Points at the element a diagnostic is about.

	- `document`: source path of the document holding the element.
	- `element`: dotted path of the element inside the document
	  (e.g. `Types.Color.RED`, empty for the document itself).
	- `feature`: which attribute of the element is at fault (`name`, `value`,
	  `keyType`, `imports`, ...).
	- `index`: position inside a multi-valued feature, or None.
	"""

	document: str
	element: str = ""
	feature: Optional[str] = None
	index: Optional[int] = None

	def describe(self) -> str:
		out = self.element or "<document>"
		if self.feature:
			out += f".{self.feature}"
		if self.index is not None:
			out += f"[{self.index}]"
		return out


@dataclass(frozen=True)
class Diagnostic:
	"""One validation finding (error/warning/info)."""

	severity: str
	message: str
	element: ElementRef
	span: Span = field(default_factory=Span)
	code: str | None = None
	notes: tuple[str, ...] = ()

	def __post_init__(self) -> None:
		if self.severity not in SEVERITIES:
			raise ValueError(f"unknown diagnostic severity '{self.severity}'")
		# Keep a structured span even when callers pass None.
		if self.span is None:  # type: ignore[unreachable]
			object.__setattr__(self, "span", Span(file=self.element.document))

	@property
	def is_error(self) -> bool:
		return self.severity == ERROR


class DiagnosticSink(Protocol):
	"""Anything diagnostics can be streamed into."""

	def accept(
		self,
		severity: str,
		message: str,
		element: ElementRef,
		span: Span | None = None,
		*,
		code: str | None = None,
		notes: tuple[str, ...] = (),
	) -> None:
		...


class DiagnosticCollector:
	"""
	Default sink: accumulates diagnostics in emission order.

	`prefix` is prepended to every message (the D-Bus generator flavour uses
	"DBus validation: ").
	"""

	def __init__(self, prefix: str = "") -> None:
		self.prefix = prefix
		self.diagnostics: list[Diagnostic] = []

	def accept(
		self,
		severity: str,
		message: str,
		element: ElementRef,
		span: Span | None = None,
		*,
		code: str | None = None,
		notes: tuple[str, ...] = (),
	) -> None:
		if span is None:
			span = Span(file=element.document)
		self.diagnostics.append(
			Diagnostic(
				severity=severity,
				message=self.prefix + message,
				element=element,
				span=span.with_file(element.document) if span.file is None else span,
				code=code,
				notes=tuple(notes),
			)
		)

	def error(self, message: str, element: ElementRef, span: Span | None = None, **kw) -> None:
		self.accept(ERROR, message, element, span, **kw)

	def warning(self, message: str, element: ElementRef, span: Span | None = None, **kw) -> None:
		self.accept(WARNING, message, element, span, **kw)

	def info(self, message: str, element: ElementRef, span: Span | None = None, **kw) -> None:
		self.accept(INFO, message, element, span, **kw)

	def extend(self, diagnostics: list[Diagnostic]) -> None:
		for diag in diagnostics:
			self.accept(
				diag.severity,
				diag.message,
				diag.element,
				diag.span,
				code=diag.code,
				notes=diag.notes,
			)

	def has_errors(self) -> bool:
		return any(d.is_error for d in self.diagnostics)

	def __len__(self) -> int:
		return len(self.diagnostics)

	def __iter__(self):
		return iter(self.diagnostics)


__all__ = [
	"ERROR",
	"WARNING",
	"INFO",
	"SEVERITIES",
	"ElementRef",
	"Diagnostic",
	"DiagnosticSink",
	"DiagnosticCollector",
]
