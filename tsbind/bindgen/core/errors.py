# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fatal bindgen errors.

These are raised (not collected) because they mean the supported grammar
subset has to be extended before the declaration can be translated. The
pipeline converts them into error diagnostics and halts the unit instead of
emitting an unsound binding.
"""

from __future__ import annotations

from typing import Any, Optional

from .diagnostics import PHASE_LOWER, PHASE_PARSER, Diagnostic
from .span import Span


class BindgenError(ValueError):
	"""
	Base class for errors that abort the translation of a unit.

	`decl_name`/`member_name` locate the offending construct for the user;
	`loc` is the parser location (or a Span) when one is known.
	"""

	code = "E-BINDGEN"
	phase = PHASE_LOWER

	def __init__(
		self,
		message: str,
		*,
		decl_name: Optional[str] = None,
		member_name: Optional[str] = None,
		loc: Any = None,
	) -> None:
		super().__init__(message)
		self.message = message
		self.decl_name = decl_name
		self.member_name = member_name
		self.loc = loc

	def with_context(
		self,
		*,
		decl_name: Optional[str] = None,
		member_name: Optional[str] = None,
		loc: Any = None,
	) -> "BindgenError":
		"""Fill in context that was unknown where the error was raised."""
		if self.decl_name is None:
			self.decl_name = decl_name
		if self.member_name is None:
			self.member_name = member_name
		if self.loc is None:
			self.loc = loc
		return self

	def context(self) -> str:
		if self.decl_name and self.member_name:
			return f"{self.decl_name}.{self.member_name}"
		return self.decl_name or self.member_name or ""

	def __str__(self) -> str:
		ctx = self.context()
		return f"{self.message} (in `{ctx}`)" if ctx else self.message

	def to_diagnostic(self, *, file: Optional[str] = None) -> Diagnostic:
		return Diagnostic(
			message=str(self),
			code=self.code,
			phase=self.phase,
			severity="error",
			span=Span.from_loc(self.loc, file=file),
		)


class UnsupportedConstructError(BindgenError):
	"""A structurally required construct has no defined lowering."""

	code = "E-UNSUPPORTED"


class InvariantViolationError(BindgenError):
	"""The input violates a shape the lowering relies on (internal error)."""

	code = "E-INVARIANT"


class DtsSyntaxError(BindgenError):
	"""The declaration source could not be parsed."""

	code = "E-SYNTAX"
	phase = PHASE_PARSER


__all__ = [
	"BindgenError",
	"UnsupportedConstructError",
	"InvariantViolationError",
	"DtsSyntaxError",
]
