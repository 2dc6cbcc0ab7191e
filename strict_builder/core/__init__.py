"""
strict_builder.core: shared location and diagnostic types.

Modules:
  - span: best-effort source location attached to diagnostics
  - diagnostics: Diagnostic record and the ordered DiagnosticSet
"""

__all__ = [
	"span",
	"diagnostics",
]
