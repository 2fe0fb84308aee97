# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind.bindgen.core: shared diagnostics, errors and lookup tables used by every stage.

Modules:
  - span: source span attached to diagnostics/errors
  - diagnostics: Diagnostic record and per-unit sink
  - errors: fatal BindgenError hierarchy
  - idents: TypeScript -> Rust identifier sanitizer
  - catalogs: known host-library type names (web_sys/js_sys/string enums)
"""

__all__ = [
	"span",
	"diagnostics",
	"errors",
	"idents",
	"catalogs",
]
