# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind CLI: translate a tree of `.d.ts` files into wasm-bindgen extern bindings.

  python -m tsbind.bindgen <source> <dest> [--json] [-j N]

`source` is a directory (mirrored recursively) or a single `.d.ts` file.
Diagnostics go to stderr as `file:line:col: severity: message`; with --json a
single JSON document `{exit_code, diagnostics}` is printed to stdout instead.
Exit code is 0 when every unit compiled, 1 otherwise.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tsbind.bindgen.config import BindgenOptions
from tsbind.bindgen.core.diagnostics import PHASE_DRIVER, Diagnostic
from tsbind.bindgen.output_tree import OutputTree


def _diag_to_json(diag: Diagnostic, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return diag.to_json(default_file=str(source))


def _build_options(args: argparse.Namespace) -> BindgenOptions:
	return BindgenOptions(
		module_suffix=args.module_suffix,
		emit_catalog_uses=not args.no_catalog_uses,
		jobs=args.jobs,
	)


def main(argv: list[str] | None = None) -> int:
	"""
	Compile every declaration file under `source` into `dest`.

	With --json, prints structured diagnostics (phase/message/severity/file/line/column)
	and an exit_code; otherwise prints human-readable messages to stderr.
	"""
	parser = argparse.ArgumentParser(description="TypeScript declarations -> wasm-bindgen extern bindings")
	parser.add_argument("source", type=Path, help="Directory of .d.ts files, or a single .d.ts file")
	parser.add_argument("dest", type=Path, help="Output directory for the generated Rust modules")
	parser.add_argument(
		"--module-suffix",
		default="Mod",
		help="Suffix appended to namespace/file names to form Rust module names (default: Mod)",
	)
	parser.add_argument(
		"--no-catalog-uses",
		action="store_true",
		help="Do not add `use ::web_sys::X;`/`use ::js_sys::X;` for referenced host types",
	)
	parser.add_argument("-j", "--jobs", type=int, default=1, help="Compile units on N worker threads")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Print each processed input path")
	args = parser.parse_args(argv)

	source: Path = args.source
	diagnostics: list[Diagnostic] = []
	try:
		options = _build_options(args)
	except ValueError as err:
		diagnostics.append(Diagnostic(message=str(err), phase=PHASE_DRIVER, severity="error"))
		options = None

	if options is not None and not source.exists():
		diagnostics.append(
			Diagnostic(message=f"source path does not exist: {source}", phase=PHASE_DRIVER, severity="error")
		)
		options = None

	results = []
	if options is not None:
		results = OutputTree(source=source, dest=args.dest, options=options).run()
		for result in results:
			if args.verbose and not args.json:
				print(result.file)
			diagnostics.extend(result.diagnostics)

	failed = options is None or any(not r.ok for r in results)
	exit_code = 1 if failed else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d, source) for d in diagnostics],
		}
		print(json.dumps(payload))
	else:
		for d in diagnostics:
			print(d.render(default_file=str(source)), file=sys.stderr)
	return exit_code


__all__ = ["main"]
