"""
fidlcheck.core: shared span/diagnostic types used by every validation stage.

Modules:
  - span: best-effort source locations
  - diagnostics: Diagnostic records, ElementRef and the collector sink
"""

__all__ = [
	"span",
	"diagnostics",
]
