# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark-based front-end for `.d.ts` sources.

`parse_module` runs the Earley parser over `grammar.lark` and walks the parse
tree into the dataclass AST in `ast.py`. The tree walk is a set of `_build_*`
functions keyed on rule names; tokens that only matter by presence
(`abstract`, `?`, `readonly`, ...) are kept as named terminals in the grammar.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from ..core.errors import DtsSyntaxError
from ..core.span import Span
from .ast import (
	ArrayPattern,
	ArrayType,
	CallSignature,
	ClassConstructor,
	ClassDecl,
	ClassMember,
	ClassMethod,
	ClassProperty,
	ConditionalType,
	ConstructorType,
	ConstructSignature,
	EmptyMember,
	EnumDecl,
	EnumMember,
	ExportAll,
	ExportAssignment,
	ExportDecl,
	ExportDefaultDecl,
	ExportDefaultExpr,
	ExportNamed,
	ExportSpecifier,
	FunctionDecl,
	FunctionType,
	GetterSignature,
	HeritageExpr,
	IdentPattern,
	ImportDecl,
	ImportEquals,
	ImportSpecifier,
	ImportType,
	IndexedAccessType,
	IndexSignature,
	InferType,
	InterfaceDecl,
	IntersectionType,
	KeywordType,
	LiteralType,
	Located,
	MappedType,
	MethodSignature,
	Module,
	NamespaceBlock,
	NamespaceDecl,
	NamespaceExport,
	ObjectPattern,
	OptionalType,
	Param,
	ParenthesizedType,
	Pattern,
	PropertyKey,
	PropertySignature,
	RestType,
	SetterSignature,
	Statement,
	StaticBlock,
	ThisType,
	TupleType,
	TypeAliasDecl,
	TypeLiteral,
	TypeMember,
	TypeNode,
	TypeOperator,
	TypeParam,
	TypePredicate,
	TypeQuery,
	TypeRef,
	UnionType,
	VarDeclarator,
	VariableDecl,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

# Single-identifier type references that name a keyword type.
KEYWORD_TYPES = frozenset(
	{
		"any",
		"unknown",
		"number",
		"boolean",
		"string",
		"void",
		"null",
		"undefined",
		"never",
		"object",
		"bigint",
		"symbol",
		"intrinsic",
	}
)

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	ambiguity="resolve",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def parse_module(source: str, *, file: Optional[str] = None) -> Module:
	"""
	Parse one declaration file into a `Module`.

	Raises DtsSyntaxError (carrying file/line/column) when the source falls
	outside the supported grammar.
	"""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as exc:
		line = getattr(exc, "line", None)
		column = getattr(exc, "column", None)
		if not isinstance(line, int) or line < 1:
			line, column = None, None
		raise DtsSyntaxError(
			_syntax_message(exc),
			loc=Span(file=file, line=line, column=column),
		) from exc
	return _build_module(tree)


def _syntax_message(exc: UnexpectedInput) -> str:
	token = getattr(exc, "token", None)
	if isinstance(token, Token):
		if token.type == "$END":
			return "unexpected end of input"
		return f"unexpected token {token.value!r}"
	char = getattr(exc, "char", None)
	if char is not None:
		return f"unexpected character {char!r}"
	return "unexpected end of input"


# --- tree helpers -----------------------------------------------------------


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree) -> List[Tree]:
	return [child for child in tree.children if isinstance(child, Tree)]


def _find(tree: Tree, kind: str) -> Optional[Tree]:
	return next((child for child in _trees(tree) if _name(child) == kind), None)


def _find_all(tree: Tree, kind: str) -> List[Tree]:
	return [child for child in _trees(tree) if _name(child) == kind]


def _has_token(tree: Tree, ttype: str) -> bool:
	return any(isinstance(child, Token) and child.type == ttype for child in tree.children)


def _token(tree: Tree, ttype: str) -> Optional[Token]:
	return next((child for child in tree.children if isinstance(child, Token) and child.type == ttype), None)


def _ident(node: Tree | Token) -> str:
	"""Text of an `ident`/`reserved_word` node (keywords double as names)."""
	if isinstance(node, Token):
		return node.value
	tok = next((c for c in node.children if isinstance(c, Token)), None)
	if tok is None:
		raise TypeError(f"{_name(node)} node missing token child")
	return tok.value


def _entity_segments(tree: Tree) -> List[str]:
	return [_ident(child) for child in _trees(tree)]


def _raw_text(tree: Tree) -> str:
	return " ".join(tok.value for tok in tree.scan_values(lambda v: isinstance(v, Token)))


_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "b": "\b", "f": "\f", "v": "\v", "\n": ""}


def _unescape(match: re.Match) -> str:
	esc = match.group(1)
	if esc.startswith("u{"):
		return chr(int(esc[2:-1], 16))
	if len(esc) > 1:
		return chr(int(esc[1:], 16))
	return _SIMPLE_ESCAPES.get(esc, esc)


def _decode_string_token(tok: Token) -> str:
	"""Strip quotes and resolve JS escapes of a STRING token."""
	return _ESCAPE_RE.sub(_unescape, tok.value[1:-1])


# --- module / statements ----------------------------------------------------


def _build_module(tree: Tree) -> Module:
	return Module(body=_build_items(tree.children), loc=_loc(tree))


def _build_items(children: Iterable[object]) -> List[Statement]:
	return [_build_statement(child) for child in children if isinstance(child, Tree)]


def _build_statement(tree: Tree) -> Statement:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "import_decl":
		source = _decode_string_token(_token(tree, "STRING"))
		clause = _find(tree, "import_clause")
		specifiers = _build_import_clause(clause) if clause is not None else []
		return ImportDecl(specifiers=specifiers, source=source, type_only=_has_token(tree, "TYPE"), loc=loc)
	if kind == "import_bare":
		return ImportDecl(specifiers=[], source=_decode_string_token(_token(tree, "STRING")), loc=loc)
	if kind == "import_equals":
		name = _ident(_find(tree, "ident"))
		require = _find(tree, "require_call")
		if require is not None:
			module_ref = [_decode_string_token(_token(require, "STRING"))]
		else:
			module_ref = _entity_segments(_find(tree, "entity_name"))
		return ImportEquals(
			name=name,
			module_ref=module_ref,
			is_require=require is not None,
			is_export=_has_token(tree, "EXPORT"),
			loc=loc,
		)
	if kind == "export_decl":
		return ExportDecl(decl=_build_decl(_trees(tree)[0]), loc=loc)
	if kind == "export_default_decl":
		return ExportDefaultDecl(decl=_build_decl(_trees(tree)[0]), loc=loc)
	if kind == "export_default_expr":
		return ExportDefaultExpr(name=_ident(_find(tree, "ident")), loc=loc)
	if kind == "export_named":
		source_tok = _token(tree, "STRING")
		return ExportNamed(
			specifiers=[_build_export_spec(spec) for spec in _find_all(tree, "export_spec")],
			source=_decode_string_token(source_tok) if source_tok is not None else None,
			type_only=_has_token(tree, "TYPE"),
			loc=loc,
		)
	if kind == "export_ns_from":
		exported = _module_export_name(_find(tree, "module_export_name"))
		spec = ExportSpecifier(kind="namespace", orig="*", exported=exported, loc=loc)
		return ExportNamed(
			specifiers=[spec],
			source=_decode_string_token(_token(tree, "STRING")),
			type_only=_has_token(tree, "TYPE"),
			loc=loc,
		)
	if kind == "export_all":
		return ExportAll(source=_decode_string_token(_token(tree, "STRING")), type_only=_has_token(tree, "TYPE"), loc=loc)
	if kind == "export_assignment":
		return ExportAssignment(name=".".join(_entity_segments(_find(tree, "entity_name"))), loc=loc)
	if kind == "namespace_export":
		return NamespaceExport(name=_ident(_find(tree, "ident")), loc=loc)
	return _build_decl(tree)


def _build_import_clause(tree: Tree) -> List[ImportSpecifier]:
	specifiers: List[ImportSpecifier] = []
	for child in _trees(tree):
		kind = _name(child)
		if kind == "default_import":
			specifiers.append(ImportSpecifier(kind="default", local=_ident(_trees(child)[0]), loc=_loc(child)))
		elif kind == "namespace_import":
			specifiers.append(ImportSpecifier(kind="namespace", local=_ident(_trees(child)[0]), loc=_loc(child)))
		elif kind == "named_imports":
			for spec in _find_all(child, "import_spec"):
				exported = _module_export_name(_find(spec, "module_export_name"))
				local = _find(spec, "ident")
				if local is not None:
					specifiers.append(
						ImportSpecifier(kind="named", local=_ident(local), imported=exported, loc=_loc(spec))
					)
				else:
					specifiers.append(ImportSpecifier(kind="named", local=exported, loc=_loc(spec)))
	return specifiers


def _build_export_spec(tree: Tree) -> ExportSpecifier:
	names = [_module_export_name(child) for child in _find_all(tree, "module_export_name")]
	exported = names[1] if len(names) > 1 else None
	return ExportSpecifier(kind="named", orig=names[0], exported=exported, loc=_loc(tree))


def _module_export_name(tree: Tree) -> str:
	child = tree.children[0]
	if isinstance(child, Token) and child.type == "STRING":
		return _decode_string_token(child)
	return _ident(child)


# --- declarations -----------------------------------------------------------


def _build_decl(tree: Tree):
	kind = _name(tree)
	if kind == "declaration":
		return _build_decl(_trees(tree)[0])
	if kind == "class_decl":
		return _build_class(tree)
	if kind == "function_decl":
		return _build_function(tree)
	if kind == "variable_decl":
		return _build_variable(tree)
	if kind == "type_alias_decl":
		return _build_type_alias(tree)
	if kind == "interface_decl":
		return _build_interface(tree)
	if kind == "enum_decl":
		return _build_enum(tree)
	if kind == "namespace_decl":
		return _build_namespace(tree)
	if kind == "global_decl":
		return NamespaceDecl(
			name="global",
			body=_build_namespace_block(_find(tree, "namespace_block")),
			is_global=True,
			loc=_loc(tree),
		)
	raise TypeError(f"unexpected declaration node {kind}")


def _build_function(tree: Tree) -> FunctionDecl:
	name_node = _find(tree, "ident")
	return FunctionDecl(
		name=_ident(name_node) if name_node is not None else None,
		params=_build_params(_find(tree, "params")),
		return_type=_build_return_annotation(_find(tree, "return_annotation")),
		type_params=_build_type_params(_find(tree, "type_params")),
		loc=_loc(tree),
	)


def _build_variable(tree: Tree) -> VariableDecl:
	kind_node = _find(tree, "var_kind")
	declarators: List[VarDeclarator] = []
	for decl in _find_all(tree, "var_declarator"):
		pattern_node = _trees(decl)[0]
		declarators.append(
			VarDeclarator(
				pattern=_build_pattern(pattern_node),
				type_ann=_build_type_annotation(_find(decl, "type_annotation")),
				loc=_loc(decl),
			)
		)
	return VariableDecl(kind=_ident(kind_node), declarators=declarators, loc=_loc(tree))


def _build_type_alias(tree: Tree) -> TypeAliasDecl:
	children = _trees(tree)
	name = _ident(children[0])
	type_params = _build_type_params(_find(tree, "type_params"))
	return TypeAliasDecl(name=name, type_ann=_build_type(children[-1]), type_params=type_params, loc=_loc(tree))


def _build_interface(tree: Tree) -> InterfaceDecl:
	extends_node = _find(tree, "interface_extends")
	extends = [_build_heritage(h) for h in _trees(extends_node)] if extends_node is not None else []
	return InterfaceDecl(
		name=_ident(_find(tree, "ident")),
		body=_build_type_body(_find(tree, "type_body")),
		type_params=_build_type_params(_find(tree, "type_params")),
		extends=extends,
		loc=_loc(tree),
	)


def _build_enum(tree: Tree) -> EnumDecl:
	members: List[EnumMember] = []
	for member in _find_all(tree, "enum_member"):
		init = _find(member, "enum_init")
		members.append(
			EnumMember(
				key=_build_property_key(_find(member, "property_key")),
				init=_raw_text(init) if init is not None else None,
				loc=_loc(member),
			)
		)
	return EnumDecl(
		name=_ident(_find(tree, "ident")),
		members=members,
		const=_has_token(tree, "CONST"),
		loc=_loc(tree),
	)


def _build_namespace(tree: Tree) -> NamespaceDecl:
	loc = _loc(tree)
	block_node = _find(tree, "namespace_block")
	body: NamespaceBlock | NamespaceDecl | None = (
		_build_namespace_block(block_node) if block_node is not None else None
	)
	string_name = _token(tree, "STRING")
	if string_name is not None:
		return NamespaceDecl(name=_decode_string_token(string_name), body=body, is_string_name=True, loc=loc)
	segments = _entity_segments(_find(tree, "entity_name"))
	# `namespace A.B.C {}` nests innermost-first.
	for segment in reversed(segments[1:]):
		body = NamespaceDecl(name=segment, body=body, loc=loc)
	return NamespaceDecl(name=segments[0], body=body, loc=loc)


def _build_namespace_block(tree: Tree) -> NamespaceBlock:
	return NamespaceBlock(body=_build_items(tree.children), loc=_loc(tree))


def _build_heritage(tree: Tree) -> HeritageExpr:
	type_args = _find(tree, "type_args")
	return HeritageExpr(
		segments=_entity_segments(_find(tree, "entity_name")),
		type_args=[_build_type(arg) for arg in _trees(type_args)] if type_args is not None else [],
		loc=_loc(tree),
	)


# --- classes ----------------------------------------------------------------


def _build_class(tree: Tree) -> ClassDecl:
	name: Optional[str] = None
	type_params: List[TypeParam] = []
	super_class: Optional[HeritageExpr] = None
	implements: List[HeritageExpr] = []
	members: List[ClassMember] = []
	for child in _trees(tree):
		kind = _name(child)
		if kind == "ident":
			name = _ident(child)
		elif kind == "type_params":
			type_params = _build_type_params(child)
		elif kind == "class_extends":
			super_class = _build_heritage(_trees(child)[0])
		elif kind == "class_implements":
			implements = [_build_heritage(h) for h in _trees(child)]
		elif kind == "class_body":
			members = _build_class_body(child)
	return ClassDecl(
		name=name,
		members=members,
		type_params=type_params,
		super_class=super_class,
		implements=implements,
		abstract=_has_token(tree, "ABSTRACT"),
		loc=_loc(tree),
	)


def _build_class_body(tree: Tree) -> List[ClassMember]:
	"""
	Members plus empty members.

	A `;` directly after a member terminates it; any other `;` (leading, doubled,
	or after a member that already ended) is an empty member.
	"""
	members: List[ClassMember] = []
	terminated = True
	for child in tree.children:
		if isinstance(child, Token):
			if child.type == "SEMI":
				if terminated:
					members.append(EmptyMember(loc=_loc_from_token(child)))
				terminated = True
			continue
		members.append(_build_class_member(child))
		terminated = _has_token(child, "SEMI") or _find(child, "function_body") is not None
	return members


def _modifiers(tree: Tree) -> List[str]:
	return [_ident(child) for child in _find_all(tree, "member_modifier")]


def _accessibility(modifiers: List[str]) -> Optional[str]:
	return next((m for m in modifiers if m in ("public", "private", "protected")), None)


def _build_class_member(tree: Tree) -> ClassMember:
	kind = _name(tree)
	loc = _loc(tree)
	modifiers = _modifiers(tree)
	if kind == "static_block":
		return StaticBlock(loc=loc)
	if kind == "index_member":
		return IndexSignature(
			params=[Param(pattern=IdentPattern(name=_ident(_find(tree, "ident"))), type_ann=_build_type(_index_key_type(tree)))],
			type_ann=_build_type_annotation(_find(tree, "type_annotation")),
			readonly="readonly" in modifiers,
			is_static="static" in modifiers,
			loc=loc,
		)
	key = _build_property_key(_find(tree, "property_key"))
	if kind == "method_member":
		params = _build_params(_find(tree, "params"))
		if key.value == "constructor" and key.kind in ("ident", "string") and "static" not in modifiers:
			return ClassConstructor(key=key, params=params, accessibility=_accessibility(modifiers), loc=loc)
		return ClassMethod(
			key=key,
			kind="method",
			params=params,
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			type_params=_build_type_params(_find(tree, "type_params")),
			is_static="static" in modifiers,
			accessibility=_accessibility(modifiers),
			optional=_has_token(tree, "QMARK"),
			abstract="abstract" in modifiers,
			loc=loc,
		)
	if kind == "accessor_member":
		is_getter = _has_token(tree, "GET")
		param = _find(tree, "param")
		return ClassMethod(
			key=key,
			kind="getter" if is_getter else "setter",
			params=[_build_param(param)] if param is not None else [],
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			is_static="static" in modifiers,
			accessibility=_accessibility(modifiers),
			abstract="abstract" in modifiers,
			loc=loc,
		)
	if kind == "property_member":
		return ClassProperty(
			key=key,
			type_ann=_build_type_annotation(_find(tree, "type_annotation")),
			is_static="static" in modifiers,
			accessibility=_accessibility(modifiers),
			readonly="readonly" in modifiers,
			optional=_has_token(tree, "QMARK"),
			loc=loc,
		)
	raise TypeError(f"unexpected class member node {kind}")


def _index_key_type(tree: Tree) -> Tree:
	"""The key type of an index signature: the tree between the name and the annotation."""
	return next(
		child for child in _trees(tree) if _name(child) not in ("ident", "type_annotation", "member_modifier")
	)


def _build_property_key(tree: Tree) -> PropertyKey:
	child = tree.children[0]
	loc = _loc(tree)
	if isinstance(child, Token):
		if child.type == "STRING":
			return PropertyKey(kind="string", value=_decode_string_token(child), loc=loc)
		if child.type == "NUMBER":
			return PropertyKey(kind="number", value=child.value, loc=loc)
		if child.type == "PRIVATE_NAME":
			return PropertyKey(kind="private", value=child.value, loc=loc)
		return PropertyKey(kind="ident", value=child.value, loc=loc)
	if _name(child) == "computed_key":
		return PropertyKey(kind="computed", value=_computed_text(child), loc=loc)
	return PropertyKey(kind="ident", value=_ident(child), loc=loc)


def _computed_text(tree: Tree) -> str:
	entity = _find(tree, "entity_name")
	if entity is not None:
		return ".".join(_entity_segments(entity))
	return next(tok.value for tok in tree.children if isinstance(tok, Token))


# --- parameters -------------------------------------------------------------


def _build_params(tree: Optional[Tree]) -> List[Param]:
	if tree is None:
		return []
	return [_build_param(child) for child in _trees(tree)]


def _build_param(tree: Tree) -> Param:
	pattern_node = next(
		child
		for child in _trees(tree)
		if _name(child) in ("ident", "object_pattern", "array_pattern")
	)
	type_ann = _build_type_annotation(_find(tree, "type_annotation"))
	if _name(tree) == "rest_param":
		return Param(pattern=_build_pattern(pattern_node), type_ann=type_ann, rest=True, loc=_loc(tree))
	return Param(
		pattern=_build_pattern(pattern_node),
		type_ann=type_ann,
		optional=_has_token(tree, "QMARK") or _find(tree, "initializer") is not None,
		loc=_loc(tree),
	)


def _build_pattern(tree: Tree) -> Pattern:
	kind = _name(tree)
	if kind == "object_pattern":
		return ObjectPattern(loc=_loc(tree))
	if kind == "array_pattern":
		return ArrayPattern(loc=_loc(tree))
	return IdentPattern(name=_ident(tree), loc=_loc(tree))


def _build_type_params(tree: Optional[Tree]) -> List[TypeParam]:
	if tree is None:
		return []
	params: List[TypeParam] = []
	for child in _find_all(tree, "type_param"):
		constraint = _find(child, "type_constraint")
		default = _find(child, "type_default")
		params.append(
			TypeParam(
				name=_ident(_find(child, "ident")),
				constraint=_build_type(_trees(constraint)[0]) if constraint is not None else None,
				default=_build_type(_trees(default)[0]) if default is not None else None,
				loc=_loc(child),
			)
		)
	return params


def _build_type_annotation(tree: Optional[Tree]) -> Optional[TypeNode]:
	if tree is None:
		return None
	return _build_type(_trees(tree)[0])


def _build_return_annotation(tree: Optional[Tree]) -> Optional[TypeNode]:
	if tree is None:
		return None
	return _build_type(_trees(tree)[0])


# --- types ------------------------------------------------------------------


def _build_type(tree: Tree) -> TypeNode:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "type_ref":
		segments = _entity_segments(_find(tree, "entity_name"))
		type_args = _find(tree, "type_args")
		args = [_build_type(arg) for arg in _trees(type_args)] if type_args is not None else []
		if len(segments) == 1 and not args:
			word = segments[0]
			if word in KEYWORD_TYPES:
				return KeywordType(kind=word, loc=loc)
			if word == "this":
				return ThisType(loc=loc)
			if word in ("true", "false"):
				return LiteralType(kind="boolean", value=word, loc=loc)
		return TypeRef(segments=segments, type_args=args, loc=loc)
	if kind == "paren_type":
		return ParenthesizedType(inner=_build_type(_trees(tree)[0]), loc=loc)
	if kind == "function_type":
		children = _trees(tree)
		return FunctionType(
			params=_build_params(_find(tree, "params")),
			return_type=_build_type(children[-1]),
			type_params=_build_type_params(_find(tree, "type_params")),
			loc=loc,
		)
	if kind == "constructor_type":
		children = _trees(tree)
		return ConstructorType(
			params=_build_params(_find(tree, "params")),
			return_type=_build_type(children[-1]),
			type_params=_build_type_params(_find(tree, "type_params")),
			abstract=_has_token(tree, "ABSTRACT"),
			loc=loc,
		)
	if kind == "conditional_type":
		check, extends, true_type, false_type = (_build_type(child) for child in _trees(tree))
		return ConditionalType(
			check_type=check,
			extends_type=extends,
			true_type=true_type,
			false_type=false_type,
			loc=loc,
		)
	if kind == "union":
		return UnionType(members=[_build_type(child) for child in _trees(tree)], loc=loc)
	if kind == "intersection":
		return IntersectionType(members=[_build_type(child) for child in _trees(tree)], loc=loc)
	if kind == "type_operator":
		op = next(child.value for child in tree.children if isinstance(child, Token))
		return TypeOperator(op=op, inner=_build_type(_trees(tree)[0]), loc=loc)
	if kind == "infer_type":
		return InferType(name=_ident(_find(tree, "ident")), loc=loc)
	if kind == "array_type":
		return ArrayType(element=_build_type(_trees(tree)[0]), loc=loc)
	if kind == "indexed_access_type":
		obj, index = (_build_type(child) for child in _trees(tree))
		return IndexedAccessType(object_type=obj, index_type=index, loc=loc)
	if kind == "literal_type":
		return _build_literal(_trees(tree)[0])
	if kind == "tuple_type":
		return TupleType(elements=[_build_tuple_element(child) for child in _trees(tree)], loc=loc)
	if kind == "object_type":
		return TypeLiteral(members=_build_type_body(_find(tree, "type_body")), loc=loc)
	if kind == "mapped_type":
		constraint = next(
			child
			for child in _trees(tree)
			if _name(child) not in ("ident", "mapped_readonly", "mapped_as", "mapped_optional", "type_annotation")
		)
		return MappedType(
			param_name=_ident(_find(tree, "ident")),
			constraint=_build_type(constraint),
			type_ann=_build_type_annotation(_find(tree, "type_annotation")),
			loc=loc,
		)
	if kind == "type_query":
		return TypeQuery(segments=_entity_segments(_find(tree, "entity_name")), loc=loc)
	if kind == "import_type":
		entity = _find(tree, "entity_name")
		type_args = _find(tree, "type_args")
		return ImportType(
			argument=_decode_string_token(_token(tree, "STRING")),
			qualifier=_entity_segments(entity) if entity is not None else [],
			type_args=[_build_type(arg) for arg in _trees(type_args)] if type_args is not None else [],
			loc=loc,
		)
	if kind == "type_predicate":
		type_node = next((child for child in _trees(tree)[1:]), None)
		return TypePredicate(
			param_name=_ident(_find(tree, "ident")),
			type_ann=_build_type(type_node) if type_node is not None else None,
			asserts=_has_token(tree, "ASSERTS"),
			loc=loc,
		)
	raise TypeError(f"unexpected type node {kind}")


def _build_literal(tree: Tree) -> LiteralType:
	tok = next(child for child in tree.children if isinstance(child, Token) and child.type != "MINUS")
	loc = _loc(tree)
	if tok.type == "STRING":
		return LiteralType(kind="string", value=_decode_string_token(tok), loc=loc)
	if tok.type == "TEMPLATE":
		return LiteralType(kind="template", value=tok.value[1:-1], loc=loc)
	sign = "-" if _has_token(tree, "MINUS") else ""
	return LiteralType(kind="number", value=f"{sign}{tok.value}", loc=loc)


def _build_tuple_element(tree: Tree) -> TypeNode:
	kind = _name(tree)
	loc = _loc(tree)
	inner = _build_type(_trees(tree)[-1])
	if kind == "tuple_optional":
		return OptionalType(inner=inner, loc=loc)
	if kind == "tuple_named":
		return OptionalType(inner=inner, loc=loc) if _has_token(tree, "QMARK") else inner
	if kind in ("tuple_rest", "tuple_named_rest"):
		return RestType(inner=inner, loc=loc)
	return inner


def _build_type_body(tree: Tree) -> List[TypeMember]:
	return [_build_type_member(child) for child in _trees(tree)]


def _build_type_member(tree: Tree) -> TypeMember:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "property_signature":
		return PropertySignature(
			key=_build_property_key(_find(tree, "property_key")),
			type_ann=_build_type_annotation(_find(tree, "type_annotation")),
			optional=_has_token(tree, "QMARK"),
			readonly=_has_token(tree, "READONLY"),
			loc=loc,
		)
	if kind == "method_signature":
		return MethodSignature(
			key=_build_property_key(_find(tree, "property_key")),
			params=_build_params(_find(tree, "params")),
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			type_params=_build_type_params(_find(tree, "type_params")),
			optional=_has_token(tree, "QMARK"),
			loc=loc,
		)
	if kind == "call_signature":
		return CallSignature(
			params=_build_params(_find(tree, "params")),
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			type_params=_build_type_params(_find(tree, "type_params")),
			loc=loc,
		)
	if kind == "construct_signature":
		return ConstructSignature(
			params=_build_params(_find(tree, "params")),
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			type_params=_build_type_params(_find(tree, "type_params")),
			loc=loc,
		)
	if kind == "getter_signature":
		return GetterSignature(
			key=_build_property_key(_find(tree, "property_key")),
			return_type=_build_return_annotation(_find(tree, "return_annotation")),
			loc=loc,
		)
	if kind == "setter_signature":
		return SetterSignature(
			key=_build_property_key(_find(tree, "property_key")),
			param=_build_param(_find(tree, "param")),
			loc=loc,
		)
	if kind == "index_signature":
		return IndexSignature(
			params=[Param(pattern=IdentPattern(name=_ident(_find(tree, "ident"))), type_ann=_build_type(_index_key_type(tree)))],
			type_ann=_build_type_annotation(_find(tree, "type_annotation")),
			readonly=_has_token(tree, "READONLY"),
			loc=loc,
		)
	raise TypeError(f"unexpected type member node {kind}")


__all__ = ["parse_module", "KEYWORD_TYPES"]
