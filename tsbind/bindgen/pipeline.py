# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Single-unit pipeline.

  source text
    -> parse_module                (parser)
    -> ModuleComposer              (stage1 lowering + stage2 composition)
    -> resolve_unit                (stage3 collisions)
    -> legalize_unit               (stage3 ABI legalization)
    -> add_catalog_uses            (stage3 host imports)
    -> print_unit                  (printer)

A `BindgenError` anywhere halts the unit: it becomes an error diagnostic and
no Rust text is produced. Any other exception is a bug and propagates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.diagnostics import Diagnostic, DiagnosticSink
from tsbind.bindgen.core.errors import BindgenError
from tsbind.bindgen.parser import ast, parse_module
from tsbind.bindgen.printer import print_unit
from tsbind.bindgen.stage2 import ModuleComposer, TargetUnit
from tsbind.bindgen.stage3 import add_catalog_uses, legalize_unit, resolve_unit


@dataclass
class UnitResult:
	"""Outcome of compiling one source unit."""

	file: Optional[str] = None
	rust: Optional[str] = None
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.rust is not None and not any(d.is_error for d in self.diagnostics)


def compile_module(
	module: ast.Module,
	*,
	sink: Optional[DiagnosticSink] = None,
	options: Optional[BindgenOptions] = None,
) -> TargetUnit:
	"""Run everything between parsing and printing; raises `BindgenError`."""
	options = options or DEFAULT_OPTIONS
	sink = sink if sink is not None else DiagnosticSink()
	unit = ModuleComposer(sink, options).compose_module(module)
	resolve_unit(unit)
	legalize_unit(unit)
	if options.emit_catalog_uses:
		add_catalog_uses(unit, options)
	return unit


def compile_source(
	text: str,
	*,
	file: Optional[str] = None,
	options: Optional[BindgenOptions] = None,
) -> UnitResult:
	sink = DiagnosticSink(file)
	try:
		module = parse_module(text, file=file)
		unit = compile_module(module, sink=sink, options=options)
	except BindgenError as err:
		sink.emit(err.to_diagnostic(file=file))
		return UnitResult(file=file, rust=None, diagnostics=sink.diagnostics)
	return UnitResult(file=file, rust=print_unit(unit), diagnostics=sink.diagnostics)


__all__ = ["UnitResult", "compile_module", "compile_source"]
