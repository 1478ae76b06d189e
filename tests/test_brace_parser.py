from __future__ import annotations

import pytest

from models.symbols import Symbol
from parse.brace_symbols import (
    BraceParser,
    count_braces,
    find_block_end,
    strip_comments,
)

SAMPLE_JS = """\
// A sample JavaScript file
import { useState } from 'react';
import axios from 'axios';

const API_URL = "https://api.example.com";

function hello() {
  console.log("hello");
}

async function fetchData(url) {
  return await fetch(url);
}

export function greet(name) {
  return "Hello, " + name;
}

export default function main() {
  greet("world");
}

const handler = (event) => {
  console.log(event);
};

export const processData = async (data) => {
  return data;
};

let mutableState = 0;

class UserService {
  constructor(db) {
    this.db = db;
  }

  async getUser(id) {
    return this.db.find(id);
  }

  _internalHelper() {
    if (this.db) {
      return true;
    }
    return false;
  }
}

export class ApiClient {
  fetch(url) {
    return axios.get(url);
  }
}

function outerFunction() {
  function innerFunction() {
    return true;
  }
  return innerFunction();
}
"""

SAMPLE_TS = """\
// TypeScript sample
import type { Request, Response } from 'express';

export interface Config {
  port: number;
  host: string;
}

interface InternalConfig {
  secret: string;
}

export type Result<T> = Success<T> | Failure;

type InternalID = string;

export enum Status {
  Active = "ACTIVE",
  Inactive = "INACTIVE",
}

const enum Direction {
  Up,
  Down,
}

export const VERSION = "1.0.0";

export abstract class BaseService {
  abstract process(data: unknown): Promise<void>;

  protected log(msg: string) {
    console.log(msg);
  }
}

@Injectable()
export class UserController extends BaseService {
  async process(data: unknown): Promise<void> {
    console.log(data);
  }

  public getUsers(): User[] {
    return [];
  }

  private validate(input: string): boolean {
    return input.length > 0;
  }

  #secret() {
    return 1;
  }
}

export type Handler = (req: Request) => Response;
"""


def _parse(source: str, path: str = "sample.js") -> list[Symbol]:
    return BraceParser().parse(path, source.encode("utf-8"))


def _by_key(symbols: list[Symbol]) -> dict[tuple[str, str], Symbol]:
    return {(symbol.parent, symbol.name): symbol for symbol in symbols}


@pytest.mark.parametrize(
    ("name", "kind", "exported"),
    [
        ("hello", "func", False),
        ("fetchData", "func", False),
        ("greet", "func", True),
        ("main", "func", True),
        ("API_URL", "const", False),
        ("handler", "const", False),
        ("processData", "const", True),
        ("mutableState", "const", False),
        ("UserService", "class", False),
        ("ApiClient", "class", True),
        ("outerFunction", "func", False),
    ],
)
def test_js_top_level_declarations(name: str, kind: str, exported: bool) -> None:
    symbol = _by_key(_parse(SAMPLE_JS))[("", name)]

    assert symbol.kind == kind
    assert symbol.exported is exported


def test_js_class_methods_carry_parent() -> None:
    methods = {
        (s.parent, s.name): s.exported for s in _parse(SAMPLE_JS) if s.kind == "method"
    }

    assert methods == {
        ("UserService", "constructor"): True,
        ("UserService", "getUser"): True,
        ("UserService", "_internalHelper"): False,
        ("ApiClient", "fetch"): True,
    }


def test_js_nested_functions_and_keywords_are_skipped() -> None:
    names = {symbol.name for symbol in _parse(SAMPLE_JS)}

    assert "innerFunction" not in names
    assert "if" not in names
    assert "useState" not in names


def test_js_line_ranges_cover_bodies() -> None:
    by_key = _by_key(_parse(SAMPLE_JS))

    hello = by_key[("", "hello")]
    assert (hello.line, hello.end_line) == (7, 9)

    api_url = by_key[("", "API_URL")]
    assert (api_url.line, api_url.end_line) == (5, 5)

    handler = by_key[("", "handler")]
    assert (handler.line, handler.end_line) == (23, 25)

    service = by_key[("", "UserService")]
    helper = by_key[("UserService", "_internalHelper")]
    assert service.line < helper.line <= helper.end_line < service.end_line
    assert (helper.line, helper.end_line) == (42, 47)

    for symbol in by_key.values():
        assert symbol.line <= symbol.end_line


def test_js_signatures() -> None:
    by_key = _by_key(_parse(SAMPLE_JS))

    assert by_key[("", "hello")].signature == "function hello() {"
    assert by_key[("", "fetchData")].signature == "async function fetchData(url) {"
    assert by_key[("", "UserService")].signature == "class UserService"
    assert by_key[("", "ApiClient")].signature == "export class ApiClient"


@pytest.mark.parametrize(
    ("name", "kind", "exported"),
    [
        ("Config", "interface", True),
        ("InternalConfig", "interface", False),
        ("Result", "type", True),
        ("InternalID", "type", False),
        ("Handler", "type", True),
        ("Status", "enum", True),
        ("Direction", "enum", False),
        ("VERSION", "const", True),
        ("BaseService", "class", True),
        ("UserController", "class", True),
    ],
)
def test_ts_declarations(name: str, kind: str, exported: bool) -> None:
    symbol = _by_key(_parse(SAMPLE_TS, "sample.ts"))[("", name)]

    assert symbol.kind == kind
    assert symbol.exported is exported


def test_ts_methods_and_visibility() -> None:
    methods = {
        (s.parent, s.name): s.exported
        for s in _parse(SAMPLE_TS, "sample.ts")
        if s.kind == "method"
    }

    assert methods == {
        ("BaseService", "process"): True,
        ("BaseService", "log"): True,
        ("UserController", "process"): True,
        ("UserController", "getUsers"): True,
        ("UserController", "validate"): False,
        ("UserController", "#secret"): False,
    }


def test_abstract_method_without_body_ends_on_its_line() -> None:
    by_key = _by_key(_parse(SAMPLE_TS, "sample.ts"))

    process = by_key[("BaseService", "process")]
    assert process.end_line == process.line


def test_braces_in_strings_do_not_shift_depth() -> None:
    source = (
        "function test() {\n"
        '  const x = "{ not a brace }";\n'
        "  const y = '{ also not }';\n"
        "  const z = `template ${expr} literal`;\n"
        '  return { key: "value" };\n'
        "}\n"
        "\n"
        "function afterTest() {\n"
        "  return true;\n"
        "}\n"
    )

    by_key = _by_key(_parse(source))

    assert by_key[("", "test")].end_line == 6
    assert by_key[("", "afterTest")].line == 8


def test_block_comments_hide_declarations() -> None:
    source = (
        "/*\n"
        "function hidden() {\n"
        "}\n"
        "*/\n"
        "/* inline */ function visible() { return 1; }\n"
        "// function alsoHidden() {}\n"
    )

    symbols = _parse(source)

    assert [(s.name, s.line, s.end_line) for s in symbols] == [("visible", 5, 5)]


def test_multiline_import_keeps_depth_balanced() -> None:
    source = (
        "import {\n"
        "  a,\n"
        "  b,\n"
        "} from './mod';\n"
        "export function after() {}\n"
    )

    assert [s.name for s in _parse(source)] == ["after"]


def test_jsx_components() -> None:
    source = (
        "import React from 'react';\n"
        "\n"
        "export function App() {\n"
        "  return <div>Hello</div>;\n"
        "}\n"
        "\n"
        "export const Header: React.FC = () => {\n"
        "  return <header>Header</header>;\n"
        "};\n"
        "\n"
        "export default function Layout({ children }) {\n"
        "  return <main>{children}</main>;\n"
        "}\n"
    )

    by_key = _by_key(_parse(source, "app.tsx"))

    assert by_key[("", "App")].kind == "func"
    assert by_key[("", "Header")].kind == "const"
    assert by_key[("", "Layout")].kind == "func"
    assert by_key[("", "Layout")].end_line == 13


def test_object_literal_after_one_line_class_is_not_a_class_body() -> None:
    source = (
        "class Empty {}\n"
        "const table = {\n"
        "  lookup(key) {\n"
        "    return key;\n"
        "  },\n"
        "};\n"
    )

    symbols = _parse(source)

    assert [(s.name, s.kind) for s in symbols] == [
        ("Empty", "class"),
        ("table", "const"),
    ]


def test_multiline_decorator_keeps_depth_balanced() -> None:
    source = (
        "@Component({\n"
        "  selector: 'app',\n"
        "})\n"
        "export class AppComponent {\n"
        "  @Input({ required: true }) title: string;\n"
        "\n"
        "  render() {\n"
        "    return this.title;\n"
        "  }\n"
        "}\n"
        "\n"
        "export function helper() {}\n"
    )

    symbols = _parse(source, "app.component.ts")

    assert [(s.parent, s.name, s.kind) for s in symbols] == [
        ("", "AppComponent", "class"),
        ("AppComponent", "render", "method"),
        ("", "helper", "func"),
    ]
    assert (symbols[0].line, symbols[0].end_line) == (4, 10)


def test_empty_and_comment_only_sources() -> None:
    assert _parse("") == []
    assert _parse("// one\n/* two */\n/*\n * three\n */\n") == []


def test_parse_is_idempotent() -> None:
    parser = BraceParser()
    content = SAMPLE_TS.encode("utf-8")

    assert parser.parse("a.ts", content) == parser.parse("a.ts", content)


def test_count_braces_ignores_quotes_and_escapes() -> None:
    assert count_braces("if (a) {") == 1
    assert count_braces("'{' + \"}\" + `{`") == 0
    assert count_braces(r"const s = '\'{';") == 0
    assert count_braces("}) }") == -2


def test_strip_comments_reports_open_block() -> None:
    assert strip_comments("a /* b */ c") == ("a   c", False)
    assert strip_comments("x = 1; // note") == ("x = 1; ", False)
    assert strip_comments("y /* open") == ("y ", True)
    assert strip_comments("s = '// not a comment'") == ("s = '// not a comment'", False)


def test_find_block_end_follows_multiline_signature() -> None:
    lines = [
        "function long(",
        "  a,",
        "  b,",
        ") {",
        "  return a + b;",
        "}",
    ]

    assert find_block_end(lines, 0, 0) == 6
