# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to model elements and diagnostics.

Spans are best-effort: documents built in memory (tests, editor buffers) may
carry no location at all, so every field is optional and `Span()` denotes
"unknown".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""File/line/column of a model element (1-based line and column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_meta(cls, meta: Any, file: str | None = None) -> "Span":
		"""
		Build a Span from a lark `Tree.meta` or `Token`.

		Lark leaves `meta` empty for rules that matched nothing; in that case the
		result only carries the file.
		"""
		if meta is None or getattr(meta, "empty", False):
			return cls(file=file)
		return cls(
			file=file,
			line=getattr(meta, "line", None),
			column=getattr(meta, "column", None),
			end_line=getattr(meta, "end_line", None),
			end_column=getattr(meta, "end_column", None),
		)

	def with_file(self, file: str | None) -> "Span":
		if file is None or self.file == file:
			return self
		return Span(file, self.line, self.column, self.end_line, self.end_column)

	def short(self) -> str:
		"""`file:line:col` with `?` for unknown parts."""
		line = "?" if self.line is None else str(self.line)
		col = "?" if self.column is None else str(self.column)
		return f"{self.file or '<unknown>'}:{line}:{col}"


__all__ = ["Span"]
