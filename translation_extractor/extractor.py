"""Static extraction of translation keys from JS/TS sources.

The source is parsed with tree-sitter (TSX grammar for .js/.jsx/.tsx, the
TypeScript grammar for .ts so that ``<T>value`` casts keep parsing). Every call
whose callee is ``t(...)`` or ``something.t(...)`` contributes a key:

- ``t("key")``                      -> "key"
- ``t(`Hello ${name}`)``            -> "Hello ${}"
- ``t("item", { count: n })``       -> "item", plural, params {"count"}
- ``t("ok", { context: "admin" })`` -> "ok" in context "admin" (contexts enabled)

Keys that cannot be resolved statically (``t(variable)``, ``t(a + b)``) are
skipped.
"""
from __future__ import annotations

import logging
import pathlib
import re
from typing import Dict, Iterator, List, Optional, Set, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .errors import ParseError, SourceReadError
from .keys import DEFAULT_CONTEXT, ExtractionResult, KeyMetadata, add_key, is_valid_context

TEMPLATE_PLACEHOLDER = "${}"
PLURAL_OPTION = "count"
CONTEXT_OPTION = "context"

logger = logging.getLogger(__name__)

# ── Grammars ──────────────────────────────────────────────────────────────────
_LANGUAGES: Dict[str, Language] = {
	"tsx": Language(tree_sitter_typescript.language_tsx()),
	"typescript": Language(tree_sitter_typescript.language_typescript()),
}

DIALECT_BY_SUFFIX = {
	".js": "tsx",
	".jsx": "tsx",
	".tsx": "tsx",
	".ts": "typescript",
}


def dialect_for(path: Union[str, pathlib.Path]) -> str:
	return DIALECT_BY_SUFFIX.get(pathlib.Path(path).suffix, "tsx")


def _first_error(root: Node) -> Optional[Node]:
	stack = [root]
	while stack:
		node = stack.pop()
		if node.type == "ERROR" or node.is_missing:
			return node
		stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
	return None


def parse_source(source: Union[str, bytes], dialect: str = "tsx", path=None) -> Tree:
	"""Parse ``source`` and raise ``ParseError`` if the tree holds any error node."""
	if dialect not in _LANGUAGES:
		raise ValueError(f"Unknown dialect: {dialect!r}")
	data = source.encode("utf-8") if isinstance(source, str) else source
	tree = Parser(_LANGUAGES[dialect]).parse(data)
	if tree.root_node.has_error:
		bad = _first_error(tree.root_node) or tree.root_node
		row, column = bad.start_point[0], bad.start_point[1]
		message = f"Missing {bad.type}" if bad.is_missing else "Syntax error"
		raise ParseError(message, line=row + 1, column=column + 1, path=path)
	return tree


def iter_call_expressions(tree: Tree) -> Iterator[Node]:
	stack = [tree.root_node]
	while stack:
		node = stack.pop()
		if node.type == "call_expression":
			yield node
		stack.extend(reversed(node.children))


# ── String literals ───────────────────────────────────────────────────────────
_ESCAPE_RE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|0(?![0-9])|\r\n|[\s\S])")

_SIMPLE_ESCAPES = {
	"n": "\n",
	"r": "\r",
	"t": "\t",
	"b": "\b",
	"f": "\f",
	"v": "\v",
	"0": "\0",
}

_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


def _unescape(m: re.Match) -> str:
	esc = m.group(1)
	if esc[0] in "ux" and len(esc) > 1:
		digits = esc[2:-1] if esc.startswith("u{") else esc[1:]
		code = int(digits, 16)
		return chr(code) if code <= 0x10FFFF else m.group(0)
	if esc in _SIMPLE_ESCAPES:
		return _SIMPLE_ESCAPES[esc]
	if esc in _LINE_CONTINUATIONS:
		return ""
	return esc


def cook(raw: str) -> str:
	"""Decode the escape sequences of a JS string body."""
	value = _ESCAPE_RE.sub(_unescape, raw)
	if any("\ud800" <= ch <= "\udfff" for ch in value):
		# \uD83D\uDE00 style pairs
		try:
			value = value.encode("utf-16", "surrogatepass").decode("utf-16")
		except UnicodeDecodeError:
			pass
	return value


def _text(node: Node, data: bytes) -> str:
	return data[node.start_byte:node.end_byte].decode("utf-8")


def _string_value(node: Node, data: bytes) -> str:
	return cook(data[node.start_byte + 1:node.end_byte - 1].decode("utf-8"))


def _template_key(node: Node, data: bytes) -> str:
	quasis: List[str] = []
	start = node.start_byte + 1
	for child in node.children:
		if child.type == "template_substitution":
			quasis.append(data[start:child.start_byte].decode("utf-8"))
			start = child.end_byte
	quasis.append(data[start:node.end_byte - 1].decode("utf-8"))
	cooked = [cook(q.replace("\r\n", "\n").replace("\r", "\n")) for q in quasis]
	return TEMPLATE_PLACEHOLDER.join(cooked)


def _key_from_argument(node: Node, data: bytes) -> Optional[str]:
	if node.type == "string":
		return _string_value(node, data)
	if node.type == "template_string":
		return _template_key(node, data)
	return None


# ── Calls and options ─────────────────────────────────────────────────────────
def _callee_name(call: Node, data: bytes) -> Optional[str]:
	fn = call.child_by_field_name("function")
	if fn is None:
		return None
	if fn.type == "identifier":
		return _text(fn, data)
	if fn.type == "member_expression":
		prop = fn.child_by_field_name("property")
		if prop is not None and prop.type == "property_identifier":
			return _text(prop, data)
	return None


def _call_arguments(call: Node) -> List[Node]:
	args = call.child_by_field_name("arguments")
	# t`tagged ${template}` has a template_string here
	if args is None or args.type != "arguments":
		return []
	return [arg for arg in args.named_children if arg.type != "comment"]


def _property_name(node: Optional[Node], data: bytes) -> Optional[str]:
	"""Best-effort name of an object-literal key; None when it cannot be resolved."""
	if node is None:
		return None
	kind = node.type
	if kind in ("property_identifier", "identifier", "shorthand_property_identifier", "private_property_identifier"):
		return _text(node, data)
	if kind == "string":
		return _string_value(node, data)
	if kind == "number":
		return _text(node, data)
	if kind == "computed_property_name":
		inner = [child for child in node.named_children if child.type != "comment"]
		if len(inner) == 1 and inner[0].type != "computed_property_name":
			return _property_name(inner[0], data)
	return None


def _scan_options(obj: Node, data: bytes, contexts: bool):
	plural = False
	params: Set[str] = set()
	context = DEFAULT_CONTEXT
	for prop in obj.named_children:
		if prop.type == "pair":
			name = _property_name(prop.child_by_field_name("key"), data)
			value = prop.child_by_field_name("value")
		elif prop.type == "shorthand_property_identifier":
			name, value = _text(prop, data), prop
		elif prop.type == "method_definition":
			name, value = _property_name(prop.child_by_field_name("name"), data), None
		else:
			continue
		if name is None:
			continue
		if name == PLURAL_OPTION:
			plural = True
			params.add(name)
		elif contexts and name == CONTEXT_OPTION:
			if value is not None and value.type == "string":
				literal = _string_value(value, data)
				if is_valid_context(literal):
					context = literal
				else:
					logger.warning("Ignoring invalid context %r at line %d", literal, value.start_point[0] + 1)
		else:
			params.add(name)
	return plural, params, context


def extract_keys(
	source: Union[str, bytes],
	function_name: str = "t",
	*,
	dialect: str = "tsx",
	contexts: bool = False,
	path=None,
) -> ExtractionResult:
	data = source.encode("utf-8") if isinstance(source, str) else source
	tree = parse_source(data, dialect, path=path)
	result: ExtractionResult = {}
	for call in iter_call_expressions(tree):
		if _callee_name(call, data) != function_name:
			continue
		args = _call_arguments(call)
		if not args:
			continue
		key = _key_from_argument(args[0], data)
		if key is None:
			continue
		plural, params, context = False, set(), DEFAULT_CONTEXT
		if len(args) > 1 and args[1].type == "object":
			plural, params, context = _scan_options(args[1], data, contexts)
		add_key(result, key, KeyMetadata(plural=plural, params=frozenset(params)), context)
	return result


def extract_keys_from_file(
	path: Union[str, pathlib.Path],
	function_name: str = "t",
	*,
	contexts: bool = False,
) -> ExtractionResult:
	p = pathlib.Path(path)
	try:
		text = p.read_text(encoding="utf-8")
	except (UnicodeDecodeError, OSError) as e:
		raise SourceReadError(p, str(e)) from e
	return extract_keys(text, function_name, dialect=dialect_for(p), contexts=contexts, path=p)
