# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import/Export Translator: module statements -> `use` items.

Each source unit becomes its own scope module, and every other unit is
reachable through the directory mirror, so imports turn into public re-exports
from sibling scopes:

  import { A, B as C } from "./x";   ->  pub use super::xMod::A;
                                         pub use super::xMod::B as C;
  import D from "./x";               ->  pub use super::xMod::default as D;
  export * from "./x";               ->  pub use super::xMod::*;
  export default Foo;                ->  pub use self::Foo as default;

Declarations are not handled here; the composer lowers them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.diagnostics import PHASE_COMPOSE, DiagnosticSink
from tsbind.bindgen.core.idents import import_path_prefix, sanitize, scope_ident
from tsbind.bindgen.parser import ast

from .target_nodes import UseItem


def _use(path, name: str, alias: Optional[str] = None, *, public: bool = True) -> UseItem:
	name = sanitize(name)
	alias = sanitize(alias) if alias is not None else None
	if alias == name:
		alias = None
	return UseItem(path=tuple(path), name=name, alias=alias, public=public)


def translate_imports(
	body: Iterable[ast.Statement],
	options: Optional[BindgenOptions] = None,
	sink: Optional[DiagnosticSink] = None,
) -> List[UseItem]:
	"""
	Translate the import/export statements of a unit, in source order.

	Namespace imports and `export * as ns` re-exports have no `use` form that
	keeps their meaning; they are dropped with a warning.
	"""
	options = options or DEFAULT_OPTIONS
	sink = sink if sink is not None else DiagnosticSink()
	suffix = options.module_suffix
	uses: List[UseItem] = []
	for stmt in body:
		if isinstance(stmt, ast.ImportDecl):
			prefix = import_path_prefix(stmt.source, suffix)
			for spec in stmt.specifiers:
				if spec.kind == "named":
					uses.append(_use(prefix, spec.imported or spec.local, spec.local))
				elif spec.kind == "default":
					uses.append(UseItem(path=prefix, name="default", alias=sanitize(spec.local)))
				else:
					sink.warn(
						f"namespace import `* as {spec.local}` from \"{stmt.source}\" is not supported; skipped",
						phase=PHASE_COMPOSE,
						code="W-DROPPED",
						loc=spec.loc,
					)
		elif isinstance(stmt, ast.ExportNamed):
			prefix = import_path_prefix(stmt.source, suffix) if stmt.source is not None else ("self",)
			for spec in stmt.specifiers:
				if spec.kind == "namespace":
					sink.warn(
						f"`export * as {spec.exported}` from \"{stmt.source}\" is not supported; skipped",
						phase=PHASE_COMPOSE,
						code="W-DROPPED",
						loc=spec.loc,
					)
					continue
				# `export { Foo }` of a local declaration is already public.
				if stmt.source is None and (spec.exported is None or sanitize(spec.exported) == sanitize(spec.orig)):
					continue
				uses.append(_use(prefix, spec.orig, spec.exported))
		elif isinstance(stmt, ast.ExportAll):
			uses.append(UseItem(path=import_path_prefix(stmt.source, suffix), glob=True))
		elif isinstance(stmt, ast.ExportDefaultExpr):
			uses.append(UseItem(path=("self",), name=sanitize(stmt.name), alias="default"))
		elif isinstance(stmt, ast.ImportEquals):
			use = _import_equals(stmt, suffix)
			if use is None:
				sink.warn(
					f"`import {stmt.name} = ...` does not name a module scope; skipped",
					phase=PHASE_COMPOSE,
					code="W-DROPPED",
					loc=stmt.loc,
				)
			else:
				uses.append(use)
	return uses


def _import_equals(stmt: ast.ImportEquals, suffix: str) -> Optional[UseItem]:
	if stmt.is_require:
		target = import_path_prefix(stmt.module_ref[0], suffix)
		if not target or target[-1] == "super":
			return None
		return UseItem(path=target[:-1], name=target[-1], alias=sanitize(stmt.name), public=stmt.is_export)
	if not stmt.module_ref:
		return None
	# `import A = N.M.T`: outer segments are namespaces of this unit.
	scopes = tuple(scope_ident(seg, suffix) for seg in stmt.module_ref[:-1])
	return _use(("self",) + scopes, stmt.module_ref[-1], stmt.name, public=stmt.is_export)


def exported_local_names(body: Iterable[ast.Statement]) -> Set[str]:
	"""
	Raw names a module file exports by reference (`export default X;`,
	`export = X;`, `export { X }` without a source).
	"""
	names: Set[str] = set()
	for stmt in body:
		if isinstance(stmt, (ast.ExportDefaultExpr, ast.ExportAssignment)):
			names.add(stmt.name.split(".")[0])
		elif isinstance(stmt, ast.ExportNamed) and stmt.source is None:
			names.update(spec.orig for spec in stmt.specifiers if spec.kind == "named")
	return names


__all__ = ["translate_imports", "exported_local_names"]
