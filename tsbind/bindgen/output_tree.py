# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Directory driver: mirror a tree of `.d.ts` files into Rust modules.

For `src/dom/events.d.ts` under the source root the driver writes
`<dest>/dom/events.rs` and records `events` as a child of `<dest>/dom`.
Once every unit is done, each directory gets a parent module listing its
children:

  #[path = "events.rs"]
  #[allow(non_snake_case)]
  pub mod eventsMod;

When a sibling file already provides the directory's module (`dom.rs` next to
`dom/`), the entries are appended there instead, with paths relative to its
location (`#[path = "dom/events.rs"]`). Only children whose output exists are
listed, so a unit that failed leaves no dangling `mod`; a failed unit also
removes whatever an earlier run wrote for it.

Two units mapping to one output (`a.d.ts`, `a.extra.d.ts`) are a driver error
for the later one in discovery order; the first keeps the file.

Units are independent and may compile on a thread pool; all bookkeeping of
parent-module entries and output claims goes through one lock.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.diagnostics import PHASE_DRIVER, DiagnosticSink
from tsbind.bindgen.core.idents import scope_ident
from tsbind.bindgen.pipeline import UnitResult, compile_source

DTS_SUFFIX = ".d.ts"
MOD_FILE = "mod.rs"


def unit_stem(path: Path) -> str:
	"""Module stem of a declaration file: the name up to its first `.`."""
	return path.name.split(".", 1)[0]


@dataclass
class OutputTree:
	"""
	Mirrors `source` (a directory or a single `.d.ts` file) into `dest`.

	`children` maps each parent-module file to the child names recorded for it.
	"""

	source: Path
	dest: Path
	options: BindgenOptions = DEFAULT_OPTIONS
	children: Dict[Path, Set[str]] = field(default_factory=dict)

	def __post_init__(self) -> None:
		self.source = Path(self.source)
		self.dest = Path(self.dest)
		self._lock = threading.Lock()
		self._claims: Dict[Path, Path] = {}

	def _record(self, parent_dir: Path, child: str) -> None:
		with self._lock:
			self.children.setdefault(parent_dir / MOD_FILE, set()).add(child)

	def discover(self) -> List[Path]:
		"""Declaration files under the source root (sorted); creates mirrored directories."""
		if self.source.is_file():
			return [self.source] if self.source.name.endswith(DTS_SUFFIX) else []
		units: List[Path] = []
		for path in sorted(self.source.rglob("*")):
			rel = path.relative_to(self.source)
			if path.is_dir():
				out_dir = self.dest / rel
				out_dir.mkdir(parents=True, exist_ok=True)
				self._record(out_dir.parent, path.name)
			elif path.name.endswith(DTS_SUFFIX):
				units.append(path)
		return units

	def output_path(self, unit: Path) -> Path:
		if self.source.is_file():
			return self.dest / f"{unit_stem(unit)}.rs"
		rel_dir = unit.parent.relative_to(self.source)
		return self.dest / rel_dir / f"{unit_stem(unit)}.rs"

	def claim_output(self, unit: Path) -> Optional[Path]:
		"""
		Reserve the output path of `unit`; returns the unit that already holds
		it, or None when the claim succeeded.
		"""
		out_path = self.output_path(unit)
		with self._lock:
			holder = self._claims.setdefault(out_path, unit)
		return None if holder == unit else holder

	def compile_unit(self, unit: Path) -> UnitResult:
		out_path = self.output_path(unit)
		holder = self.claim_output(unit)
		if holder is not None:
			return self._failed(unit, f"output {out_path} is already produced by {holder}", code="E-OUTPUT")
		self._record(out_path.parent, unit_stem(unit))
		try:
			text = unit.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as err:
			self._discard(out_path)
			return self._failed(unit, f"cannot read {unit}: {err}", code="E-READ")
		result = compile_source(text, file=str(unit), options=self.options)
		if result.ok:
			out_path.parent.mkdir(parents=True, exist_ok=True)
			out_path.write_text(result.rust, encoding="utf-8")
		else:
			# A stale output from an earlier run must not stay listed.
			self._discard(out_path)
		return result

	def _failed(self, unit: Path, message: str, *, code: str) -> UnitResult:
		sink = DiagnosticSink(str(unit))
		sink.error(message, phase=PHASE_DRIVER, code=code)
		return UnitResult(file=str(unit), rust=None, diagnostics=sink.diagnostics)

	@staticmethod
	def _discard(out_path: Path) -> None:
		if out_path.is_file():
			out_path.unlink()

	def run(self) -> List[UnitResult]:
		"""
		Compile every unit, then write parent modules. Results follow discovery
		order; output paths are claimed in that order before any unit runs, so
		which of two colliding units wins does not depend on scheduling.
		"""
		self.dest.mkdir(parents=True, exist_ok=True)
		units = self.discover()
		for unit in units:
			self.claim_output(unit)
		if self.options.jobs > 1 and len(units) > 1:
			results: Dict[Path, UnitResult] = {}
			with ThreadPoolExecutor(max_workers=self.options.jobs) as executor:
				futures = {executor.submit(self.compile_unit, unit): unit for unit in units}
				for future in as_completed(futures):
					results[futures[future]] = future.result()
			ordered = [results[unit] for unit in units]
		else:
			ordered = [self.compile_unit(unit) for unit in units]
		self.write_parent_modules()
		return ordered

	def write_parent_modules(self) -> List[Path]:
		"""
		Write (or append to) each directory's parent module, deepest first so a
		directory's own `mod.rs` exists before its parent checks for it.
		"""
		written: List[Path] = []
		for mod_path in sorted(self.children, key=lambda p: (-len(p.parts), str(p))):
			directory = mod_path.parent
			named_parent = directory.parent / f"{directory.name}.rs"
			use_named = directory != self.dest and named_parent.is_file()
			lines: List[str] = []
			for child in sorted(self.children[mod_path]):
				if (directory / f"{child}.rs").is_file():
					rel = f"{child}.rs"
				elif (directory / child / MOD_FILE).is_file():
					rel = f"{child}/{MOD_FILE}"
				else:
					continue
				if use_named:
					rel = f"{directory.name}/{rel}"
				lines.append(f'#[path = "{rel}"]')
				lines.append("#[allow(non_snake_case)]")
				lines.append(f"pub mod {scope_ident(child, self.options.module_suffix)};")
			if not lines:
				continue
			text = "\n".join(lines) + "\n"
			if use_named:
				with named_parent.open("a", encoding="utf-8") as fh:
					fh.write("\n" + text)
				written.append(named_parent)
			else:
				mod_path.write_text(text, encoding="utf-8")
				written.append(mod_path)
		return written


__all__ = ["OutputTree", "unit_stem", "DTS_SUFFIX", "MOD_FILE"]
