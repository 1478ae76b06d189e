"""Raw import specifiers for Go and JavaScript/TypeScript sources.

Python imports are extracted separately (see ``parse.ast_imports``) because
their resolution needs the module level and imported names.
"""

from __future__ import annotations

import re

from parse.treesitter_go import get_go_parser

JS_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")

_JS_IMPORT_FROM_RE = re.compile(r"""(?:import|export)\s+.*?from\s+['"]([^'"]+)['"]""")
_JS_SIDE_EFFECT_RE = re.compile(r"""^\s*import\s+['"]([^'"]+)['"]""")
_JS_REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")


def extract_go_imports(content: bytes) -> list[str]:
    """Import paths of a Go file, in source order.

    Partially malformed files still report the imports the parser recovered.
    """
    tree = get_go_parser().parse(content)
    paths: list[str] = []

    for decl in tree.root_node.named_children:
        if decl.type != "import_declaration":
            continue
        specs = [
            spec
            for child in decl.named_children
            for spec in (
                child.named_children if child.type == "import_spec_list" else [child]
            )
            if spec.type == "import_spec"
        ]
        for spec in specs:
            path_node = spec.child_by_field_name("path")
            if path_node is None or path_node.text is None:
                continue
            path = path_node.text.decode("utf8", errors="replace").strip("\"`")
            if path:
                paths.append(path)

    return paths


def extract_js_imports(text: str) -> list[str]:
    """Module specifiers from ``import``/``export ... from`` and ``require()``."""
    specifiers: list[str] = []
    for line in text.splitlines():
        for pattern in (_JS_IMPORT_FROM_RE, _JS_SIDE_EFFECT_RE, _JS_REQUIRE_RE):
            match = pattern.search(line)
            if match is not None:
                specifiers.append(match.group(1))
    return specifiers


__all__ = ["JS_EXTENSIONS", "extract_go_imports", "extract_js_imports"]
