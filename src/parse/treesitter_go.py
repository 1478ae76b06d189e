"""Tree-sitter based symbol extraction for Go source files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_go import language as get_go_language

from models.symbols import Symbol, SymbolKind
from parse.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Iterator

_PARSER: Parser | None = None


def get_go_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Go language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_go_language())
        _PARSER = Parser(lang)

    return _PARSER


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8", errors="replace")


def _type_text(node: Node | None) -> str:
    """Source text of a type expression with whitespace collapsed."""
    return " ".join(_text(node).split())


def _is_exported(name: str) -> bool:
    return name[:1].isupper()


def _start_line(node: Node) -> int:
    return node.start_point[0] + 1


def _end_line(node: Node) -> int:
    return node.end_point[0] + 1


def _receiver_type_name(node: Node | None) -> str:
    """Bare owner type name with pointer and generic wrapping stripped."""
    if node is None:
        return ""
    if node.type == "type_identifier":
        return _text(node)
    if node.type == "generic_type":
        return _receiver_type_name(node.child_by_field_name("type"))
    if node.type in ("pointer_type", "parenthesized_type"):
        for child in node.named_children:
            return _receiver_type_name(child)
    return ""


def _receiver_type_node(method: Node) -> Node | None:
    receiver = method.child_by_field_name("receiver")
    if receiver is None:
        return None
    for child in receiver.named_children:
        if child.type == "parameter_declaration":
            return child.child_by_field_name("type")
    return None


def _parameter_list_string(node: Node | None) -> tuple[str, int]:
    """Render a parameter list without its parentheses.

    Returns the rendered text and the number of declarations in it.
    """
    if node is None:
        return "", 0

    parts: list[str] = []
    for child in node.named_children:
        if child.type not in (
            "parameter_declaration",
            "variadic_parameter_declaration",
        ):
            continue
        names = [_text(n) for n in child.children_by_field_name("name")]
        type_str = _type_text(child.child_by_field_name("type"))
        if child.type == "variadic_parameter_declaration":
            type_str = f"...{type_str}"
        if names:
            parts.append(f"{', '.join(names)} {type_str}")
        else:
            parts.append(type_str)
    return ", ".join(parts), len(parts)


def _result_string(node: Node | None) -> str:
    if node is None:
        return ""
    if node.type == "parameter_list":
        rendered, count = _parameter_list_string(node)
        if count == 0:
            return ""
        if count > 1 or node.named_children[0].child_by_field_name("name"):
            return f" ({rendered})"
        return f" {rendered}"
    return f" {_type_text(node)}"


def _function_signature(node: Node, name: str) -> str:
    receiver = ""
    if node.type == "method_declaration":
        receiver = f"({_type_text(_receiver_type_node(node))}) "
    params, _ = _parameter_list_string(node.child_by_field_name("parameters"))
    results = _result_string(node.child_by_field_name("result"))
    return f"func {receiver}{name}({params}){results}"


def _function_symbol(node: Node) -> Symbol | None:
    name = _text(node.child_by_field_name("name"))
    if not name:
        return None

    kind: SymbolKind = "func"
    parent = ""
    if node.type == "method_declaration":
        kind = "method"
        parent = _receiver_type_name(_receiver_type_node(node))

    return Symbol(
        name=name,
        kind=kind,
        line=_start_line(node),
        end_line=_end_line(node),
        exported=_is_exported(name),
        signature=_function_signature(node, name),
        parent=parent,
    )


def _iter_specs(node: Node, spec_types: tuple[str, ...]) -> Iterator[Node]:
    """Yield spec nodes of a declaration, flattening grouped blocks."""
    for child in node.named_children:
        if child.type in spec_types:
            yield child
        elif child.type.endswith("_list"):
            yield from _iter_specs(child, spec_types)


def _type_kind(spec: Node) -> SymbolKind:
    if spec.type == "type_alias":
        return "type"
    underlying = spec.child_by_field_name("type")
    if underlying is not None and underlying.type == "struct_type":
        return "struct"
    if underlying is not None and underlying.type == "interface_type":
        return "interface"
    return "type"


def _type_symbols(node: Node) -> list[Symbol]:
    symbols: list[Symbol] = []
    for spec in _iter_specs(node, ("type_spec", "type_alias")):
        name = _text(spec.child_by_field_name("name"))
        if not name:
            continue
        symbols.append(
            Symbol(
                name=name,
                kind=_type_kind(spec),
                line=_start_line(spec),
                end_line=_end_line(spec),
                exported=_is_exported(name),
                signature=f"type {name}",
            )
        )
    return symbols


def _value_symbols(node: Node) -> list[Symbol]:
    kind: SymbolKind = "const" if node.type == "const_declaration" else "var"
    symbols: list[Symbol] = []
    for spec in _iter_specs(node, ("const_spec", "var_spec")):
        for name_node in spec.children_by_field_name("name"):
            name = _text(name_node)
            symbols.append(
                Symbol(
                    name=name,
                    kind=kind,
                    line=_start_line(name_node),
                    end_line=_end_line(name_node),
                    exported=_is_exported(name),
                    signature=f"{kind} {name}",
                )
            )
    return symbols


class GoParser:
    """Extracts top-level Go declarations from a full syntax tree."""

    extensions: tuple[str, ...] = (".go",)

    def parse(self, path: str, content: bytes) -> list[Symbol]:
        tree = get_go_parser().parse(content)
        root = tree.root_node
        if root.has_error:
            msg = "syntax error"
            raise ParseError(path, msg)

        symbols: list[Symbol] = []
        for decl in root.named_children:
            if decl.type in ("function_declaration", "method_declaration"):
                symbol = _function_symbol(decl)
                if symbol is not None:
                    symbols.append(symbol)
            elif decl.type == "type_declaration":
                symbols.extend(_type_symbols(decl))
            elif decl.type in ("const_declaration", "var_declaration"):
                symbols.extend(_value_symbols(decl))

        return symbols


__all__ = ["GoParser", "get_go_parser"]
