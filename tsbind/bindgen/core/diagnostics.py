# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostics shared by every bindgen stage.

Stages never print. Anything worth telling the user is appended to a
per-unit sink (`DiagnosticSink`) and rendered by the driver, either as
human-readable lines on stderr or as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from .span import Span

# Phase labels used across the pipeline.
PHASE_PARSER = "parser"
PHASE_TYPEMAP = "typemap"
PHASE_LOWER = "lower"
PHASE_COMPOSE = "compose"
PHASE_DRIVER = "driver"


@dataclass
class Diagnostic:
	"""Represents a bindgen diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def is_error(self) -> bool:
		return self.severity == "error"

	def render(self, *, default_file: Optional[str] = None) -> str:
		"""`file:line:col: severity: message` plus one ` note:` line per note."""
		span = self.span
		if span.file is None and default_file is not None:
			span = Span.from_loc(span, file=default_file)
		lines = [f"{span.describe()}: {self.severity}: {self.message}"]
		lines.extend(f"  note: {note}" for note in self.notes)
		return "\n".join(lines)

	def to_json(self, *, default_file: Optional[str] = None) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or default_file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


class DiagnosticSink:
	"""
	Ordered collector of diagnostics for one compilation unit.

	`file` is stamped onto spans that do not carry one so the driver can
	render locations without threading the path through every stage.
	"""

	def __init__(self, file: Optional[str] = None) -> None:
		self.file = file
		self._diags: List[Diagnostic] = []

	def emit(self, diag: Diagnostic) -> Diagnostic:
		if diag.span.file is None and self.file is not None:
			diag.span = Span.from_loc(diag.span, file=self.file)
		self._diags.append(diag)
		return diag

	def warn(
		self,
		message: str,
		*,
		phase: str,
		code: str | None = None,
		loc: Any = None,
		notes: Optional[List[str]] = None,
	) -> Diagnostic:
		return self.emit(
			Diagnostic(
				message=message,
				code=code,
				phase=phase,
				severity="warning",
				span=Span.from_loc(loc, file=self.file),
				notes=list(notes or []),
			)
		)

	def error(
		self,
		message: str,
		*,
		phase: str,
		code: str | None = None,
		loc: Any = None,
		notes: Optional[List[str]] = None,
	) -> Diagnostic:
		return self.emit(
			Diagnostic(
				message=message,
				code=code,
				phase=phase,
				severity="error",
				span=Span.from_loc(loc, file=self.file),
				notes=list(notes or []),
			)
		)

	@property
	def diagnostics(self) -> List[Diagnostic]:
		return list(self._diags)

	def has_errors(self) -> bool:
		return any(d.is_error for d in self._diags)

	def __iter__(self) -> Iterator[Diagnostic]:
		return iter(self._diags)

	def __len__(self) -> int:
		return len(self._diags)


__all__ = [
	"Diagnostic",
	"DiagnosticSink",
	"PHASE_PARSER",
	"PHASE_TYPEMAP",
	"PHASE_LOWER",
	"PHASE_COMPOSE",
	"PHASE_DRIVER",
]
