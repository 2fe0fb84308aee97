# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for the supported `.d.ts` subset.

Nodes are produced by `parser.parse_module` (or built by hand in tests) and
are never mutated afterwards; the lowering stages only read them. Every node
carries an optional `loc` so hand-built trees need not invent positions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


# --- type expressions -------------------------------------------------------


class TypeNode:
	loc: Optional[Located]


@dataclass
class KeywordType(TypeNode):
	"""
	`any`, `unknown`, `number`, `boolean`, `string`, `void`, `null`,
	`undefined`, `never`, `object`, `bigint`, `symbol`, `intrinsic`.
	"""

	kind: str
	loc: Optional[Located] = None


@dataclass
class ThisType(TypeNode):
	loc: Optional[Located] = None


@dataclass
class TypeRef(TypeNode):
	"""Bare or dotted type reference: `Foo`, `A.B.C<T>`."""

	segments: List[str]
	type_args: List[TypeNode] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class FunctionType(TypeNode):
	params: List["Param"]
	return_type: TypeNode
	type_params: List["TypeParam"] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class ConstructorType(TypeNode):
	params: List["Param"]
	return_type: TypeNode
	type_params: List["TypeParam"] = field(default_factory=list)
	abstract: bool = False
	loc: Optional[Located] = None


@dataclass
class ArrayType(TypeNode):
	element: TypeNode
	loc: Optional[Located] = None


@dataclass
class OptionalType(TypeNode):
	"""Optional tuple element `T?`."""

	inner: TypeNode
	loc: Optional[Located] = None


@dataclass
class UnionType(TypeNode):
	members: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class IntersectionType(TypeNode):
	members: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class TupleType(TypeNode):
	"""Elements are types; labels are dropped, `x?` becomes OptionalType, `...x` RestType."""

	elements: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class ParenthesizedType(TypeNode):
	inner: TypeNode
	loc: Optional[Located] = None


@dataclass
class ImportType(TypeNode):
	"""`import("./x").A.B<T>`; `qualifier` may be empty."""

	argument: str
	qualifier: List[str] = field(default_factory=list)
	type_args: List[TypeNode] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class TypeLiteral(TypeNode):
	members: List["TypeMember"]
	loc: Optional[Located] = None


@dataclass
class LiteralType(TypeNode):
	"""`"a"`, `1`, `-1`, `true`, `` `x${string}` ``; `kind` is string/number/boolean/template."""

	kind: str
	value: str
	loc: Optional[Located] = None


@dataclass
class IndexedAccessType(TypeNode):
	object_type: TypeNode
	index_type: TypeNode
	loc: Optional[Located] = None


@dataclass
class TypeQuery(TypeNode):
	"""`typeof a.b`."""

	segments: List[str]
	loc: Optional[Located] = None


@dataclass
class MappedType(TypeNode):
	param_name: str
	constraint: TypeNode
	type_ann: Optional[TypeNode] = None
	loc: Optional[Located] = None


@dataclass
class ConditionalType(TypeNode):
	check_type: TypeNode
	extends_type: TypeNode
	true_type: TypeNode
	false_type: TypeNode
	loc: Optional[Located] = None


@dataclass
class TypePredicate(TypeNode):
	"""`x is T`, `asserts x`, `asserts x is T`."""

	param_name: str
	type_ann: Optional[TypeNode] = None
	asserts: bool = False
	loc: Optional[Located] = None


@dataclass
class InferType(TypeNode):
	name: str
	loc: Optional[Located] = None


@dataclass
class RestType(TypeNode):
	inner: TypeNode
	loc: Optional[Located] = None


@dataclass
class TypeOperator(TypeNode):
	"""`keyof T`, `unique symbol`, `readonly T[]`."""

	op: str
	inner: TypeNode
	loc: Optional[Located] = None


# --- parameters, keys, type parameters --------------------------------------


@dataclass
class PropertyKey:
	"""
	Member key. `kind` is one of:
	  - "ident": `foo`
	  - "string": `"foo-bar"`
	  - "number": `0`
	  - "computed": `[Symbol.iterator]` (value is the raw source text)
	  - "private": `#foo`
	"""

	kind: str
	value: str
	loc: Optional[Located] = None


@dataclass
class IdentPattern:
	name: str
	loc: Optional[Located] = None


@dataclass
class ObjectPattern:
	loc: Optional[Located] = None


@dataclass
class ArrayPattern:
	loc: Optional[Located] = None


Pattern = Union[IdentPattern, ObjectPattern, ArrayPattern]


@dataclass
class Param:
	pattern: Pattern
	type_ann: Optional[TypeNode] = None
	optional: bool = False
	rest: bool = False
	loc: Optional[Located] = None


@dataclass
class TypeParam:
	name: str
	constraint: Optional[TypeNode] = None
	default: Optional[TypeNode] = None
	loc: Optional[Located] = None


@dataclass
class HeritageExpr:
	"""`extends`/`implements` target: dotted name plus ignored type arguments."""

	segments: List[str]
	type_args: List[TypeNode] = field(default_factory=list)
	loc: Optional[Located] = None


# --- class members ----------------------------------------------------------


class ClassMember:
	loc: Optional[Located]


class TypeMember:
	loc: Optional[Located]


@dataclass
class ClassConstructor(ClassMember):
	key: PropertyKey
	params: List[Param]
	accessibility: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class ClassMethod(ClassMember):
	"""`kind` is "method", "getter" or "setter"."""

	key: PropertyKey
	kind: str
	params: List[Param]
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	is_static: bool = False
	accessibility: Optional[str] = None
	optional: bool = False
	abstract: bool = False
	loc: Optional[Located] = None


@dataclass
class ClassProperty(ClassMember):
	key: PropertyKey
	type_ann: Optional[TypeNode] = None
	is_static: bool = False
	accessibility: Optional[str] = None
	readonly: bool = False
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class IndexSignature(ClassMember, TypeMember):
	"""`[key: string]: T`; shared by class bodies and type members."""

	params: List[Param]
	type_ann: Optional[TypeNode] = None
	readonly: bool = False
	is_static: bool = False
	loc: Optional[Located] = None


@dataclass
class StaticBlock(ClassMember):
	loc: Optional[Located] = None


@dataclass
class EmptyMember(ClassMember):
	"""A stray `;` in a class body."""

	loc: Optional[Located] = None


# --- type members (interfaces, type literals) -------------------------------


@dataclass
class PropertySignature(TypeMember):
	key: PropertyKey
	type_ann: Optional[TypeNode] = None
	optional: bool = False
	readonly: bool = False
	loc: Optional[Located] = None


@dataclass
class MethodSignature(TypeMember):
	key: PropertyKey
	params: List[Param]
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class GetterSignature(TypeMember):
	key: PropertyKey
	return_type: Optional[TypeNode] = None
	loc: Optional[Located] = None


@dataclass
class SetterSignature(TypeMember):
	key: PropertyKey
	param: Param
	loc: Optional[Located] = None


@dataclass
class CallSignature(TypeMember):
	params: List[Param]
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class ConstructSignature(TypeMember):
	params: List[Param]
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	loc: Optional[Located] = None


# --- declarations -----------------------------------------------------------


class Decl:
	loc: Optional[Located]


@dataclass
class ClassDecl(Decl):
	name: str
	members: List[ClassMember] = field(default_factory=list)
	type_params: List[TypeParam] = field(default_factory=list)
	super_class: Optional[HeritageExpr] = None
	implements: List[HeritageExpr] = field(default_factory=list)
	abstract: bool = False
	loc: Optional[Located] = None


@dataclass
class FunctionDecl(Decl):
	name: str
	params: List[Param] = field(default_factory=list)
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class VarDeclarator:
	pattern: Pattern
	type_ann: Optional[TypeNode] = None
	loc: Optional[Located] = None


@dataclass
class VariableDecl(Decl):
	"""`kind` is var/let/const."""

	kind: str
	declarators: List[VarDeclarator]
	loc: Optional[Located] = None


@dataclass
class TypeAliasDecl(Decl):
	name: str
	type_ann: TypeNode
	type_params: List[TypeParam] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class InterfaceDecl(Decl):
	name: str
	body: List[TypeMember] = field(default_factory=list)
	type_params: List[TypeParam] = field(default_factory=list)
	extends: List[HeritageExpr] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class EnumMember:
	key: PropertyKey
	init: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class EnumDecl(Decl):
	name: str
	members: List[EnumMember] = field(default_factory=list)
	const: bool = False
	loc: Optional[Located] = None


@dataclass
class NamespaceBlock:
	body: List["Statement"] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class NamespaceDecl(Decl):
	"""
	`namespace A { ... }`, `module "x" { ... }`, `declare global { ... }`.

	Dotted names nest: `namespace A.B {}` is NamespaceDecl("A", body=NamespaceDecl("B", ...)).
	`body` is None for a bodiless `declare module "x";`.
	"""

	name: str
	body: Union[NamespaceBlock, "NamespaceDecl", None] = None
	is_string_name: bool = False
	is_global: bool = False
	loc: Optional[Located] = None


Declaration = Union[ClassDecl, FunctionDecl, VariableDecl, TypeAliasDecl, InterfaceDecl, EnumDecl, NamespaceDecl]


def decl_name(decl: Decl) -> Optional[str]:
	"""Declared identifier, if the declaration has a simple one."""
	if isinstance(decl, VariableDecl):
		if decl.declarators and isinstance(decl.declarators[0].pattern, IdentPattern):
			return decl.declarators[0].pattern.name
		return None
	return getattr(decl, "name", None)


# --- module statements ------------------------------------------------------


@dataclass
class ImportSpecifier:
	"""
	`kind` is "named" (`{a}` / `{a as b}`), "default" (`a`), or
	"namespace" (`* as a`). `imported` is the exported name for renamed/named
	specifiers, None when it equals `local`.
	"""

	kind: str
	local: str
	imported: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class ImportDecl:
	specifiers: List[ImportSpecifier]
	source: str
	type_only: bool = False
	loc: Optional[Located] = None


@dataclass
class ImportEquals:
	"""`import a = require("x")` / `import a = B.C`, optionally exported."""

	name: str
	module_ref: List[str]
	is_require: bool = False
	is_export: bool = False
	loc: Optional[Located] = None


@dataclass
class ExportSpecifier:
	"""`kind` is "named" (`a` / `a as b`) or "namespace" (`* as ns`)."""

	kind: str
	orig: str
	exported: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class ExportNamed:
	specifiers: List[ExportSpecifier]
	source: Optional[str] = None
	type_only: bool = False
	loc: Optional[Located] = None


@dataclass
class ExportDecl:
	decl: Declaration
	loc: Optional[Located] = None


@dataclass
class ExportDefaultExpr:
	"""`export default Foo;`"""

	name: str
	loc: Optional[Located] = None


@dataclass
class ExportDefaultDecl:
	"""`export default class Foo {}` / `export default function f(): void;`"""

	decl: Declaration
	loc: Optional[Located] = None


@dataclass
class ExportAll:
	source: str
	type_only: bool = False
	loc: Optional[Located] = None


@dataclass
class ExportAssignment:
	"""`export = Foo;`"""

	name: str
	loc: Optional[Located] = None


@dataclass
class NamespaceExport:
	"""`export as namespace Foo;`"""

	name: str
	loc: Optional[Located] = None


ModuleDecl = Union[
	ImportDecl,
	ImportEquals,
	ExportNamed,
	ExportDecl,
	ExportDefaultExpr,
	ExportDefaultDecl,
	ExportAll,
	ExportAssignment,
	NamespaceExport,
]

Statement = Union[Declaration, ModuleDecl]

MODULE_SYNTAX = (
	ImportDecl,
	ImportEquals,
	ExportNamed,
	ExportDecl,
	ExportDefaultExpr,
	ExportDefaultDecl,
	ExportAll,
	ExportAssignment,
)


@dataclass
class Module:
	body: List[Statement] = field(default_factory=list)
	loc: Optional[Located] = None

	def is_module_file(self) -> bool:
		"""True when the unit uses import/export syntax (ES module vs global script)."""
		return any(isinstance(stmt, MODULE_SYNTAX) for stmt in self.body)
