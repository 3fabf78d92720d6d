"""Generate a file from a text template and JSON data."""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from typing import Any, Sequence


class TemplateError(Exception):
    """Raised when a template cannot be parsed or executed."""


class GotmplError(Exception):
    """Raised when file generation fails."""


_ACTION = re.compile(r"\{\{(-[ \t\r\n])?(.*?)([ \t\r\n]-)?\}\}", re.DOTALL)


@dataclass
class _Text:
    text: str


@dataclass
class _Output:
    expr: str


@dataclass
class _Block:
    kind: str
    expr: str
    body: list = field(default_factory=list)
    orelse: list = field(default_factory=list)


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    trim_next = False
    for m in _ACTION.finditer(text):
        chunk = text[pos : m.start()]
        if trim_next:
            chunk = chunk.lstrip()
        if m.group(1):
            chunk = chunk.rstrip()
        if chunk:
            tokens.append(("text", chunk))
        inner = m.group(2).strip()
        if not (inner.startswith("/*") and inner.endswith("*/")):
            tokens.append(("action", inner))
        trim_next = bool(m.group(3))
        pos = m.end()
    chunk = text[pos:]
    if trim_next:
        chunk = chunk.lstrip()
    if "{{" in chunk:
        raise TemplateError("unclosed action")
    if chunk:
        tokens.append(("text", chunk))
    return tokens


class _Parser:
    def __init__(self, tokens: list[tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> list:
        nodes, term = self._list()
        if term is not None:
            raise TemplateError(f"unexpected {{{{{term}}}}}")
        return nodes

    def _list(self) -> tuple[list, str | None]:
        nodes: list = []
        while self.pos < len(self.tokens):
            kind, value = self.tokens[self.pos]
            self.pos += 1
            if kind == "text":
                nodes.append(_Text(value))
                continue
            word = value.split(None, 1)[0] if value else ""
            if word in ("end", "else"):
                return nodes, value
            if word in ("if", "range", "with"):
                expr = value[len(word) :].strip()
                if not expr:
                    raise TemplateError(f"missing value for {word}")
                nodes.append(self._block(word, expr))
            else:
                nodes.append(_Output(value))
        return nodes, None

    def _block(self, kind: str, expr: str) -> _Block:
        block = _Block(kind, expr)
        block.body, term = self._list()
        if term is None:
            raise TemplateError(f"unexpected EOF in {kind}")
        if term == "else":
            block.orelse, term = self._list()
            if term != "end":
                raise TemplateError(f"expected end in {kind}")
        elif term.startswith("else ") and kind == "if":
            rest = term[len("else ") :].strip()
            if not rest.startswith("if "):
                raise TemplateError(f"unexpected {{{{{term}}}}}")
            block.orelse = [self._block("if", rest[3:].strip())]
        elif term != "end":
            raise TemplateError(f"unexpected {{{{{term}}}}}")
        return block


def _format(value: Any) -> str:
    if value is None:
        return "<no value>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, dict):
        return "map[" + " ".join(f"{k}:{_format(value[k])}" for k in sorted(value)) + "]"
    if isinstance(value, list):
        return "[" + " ".join(_format(v) for v in value) + "]"
    return str(value)


def _field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        if name not in value:
            raise TemplateError(f'map has no entry for key "{name}"')
        return value[name]
    if value is None:
        raise TemplateError(f"nil pointer evaluating interface {{}}.{name}")
    raise TemplateError(f"can't evaluate field {name} in type {type(value).__name__}")


def _evaluate(expr: str, dot: Any, root: Any) -> Any:
    expr = expr.strip()
    if expr in (".", "$"):
        return dot if expr == "." else root
    if expr.startswith(".") or expr.startswith("$."):
        value = root if expr.startswith("$") else dot
        for part in expr.lstrip("$").split(".")[1:]:
            if not part:
                raise TemplateError(f"bad field path {expr!r}")
            value = _field(value, part)
        return value
    if expr in ("true", "false"):
        return expr == "true"
    if expr == "nil":
        raise TemplateError("nil is not a command")
    if len(expr) >= 2 and expr[0] == expr[-1] and expr[0] in "\"`":
        return json.loads(expr) if expr[0] == '"' else expr[1:-1]
    try:
        return json.loads(expr)
    except ValueError:
        raise TemplateError(f"function {expr.split()[0]!r} not defined") from None


def _execute(nodes: list, dot: Any, root: Any, out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, _Text):
            out.append(node.text)
        elif isinstance(node, _Output):
            out.append(_format(_evaluate(node.expr, dot, root)))
        elif node.kind == "if":
            branch = node.body if _evaluate(node.expr, dot, root) else node.orelse
            _execute(branch, dot, root, out)
        elif node.kind == "with":
            value = _evaluate(node.expr, dot, root)
            if value:
                _execute(node.body, value, root, out)
            else:
                _execute(node.orelse, dot, root, out)
        else:
            value = _evaluate(node.expr, dot, root)
            if isinstance(value, dict):
                items = [value[k] for k in sorted(value)]
            elif isinstance(value, list) or value is None:
                items = value or []
            else:
                raise TemplateError(f"range can't iterate over {_format(value)}")
            if not items:
                _execute(node.orelse, dot, root, out)
            for item in items:
                _execute(node.body, item, root, out)


def render(text: str, data: Any) -> str:
    """Render template text with data, failing on any missing map key."""
    nodes = _Parser(_tokenize(text)).parse()
    out: list[str] = []
    _execute(nodes, data, data, out)
    return "".join(out)


def gotmpl(body_path: str, json_data: str, out_path: str) -> None:
    """Render the template at body_path with JSON data into out_path."""
    if not body_path:
        raise GotmplError("gotmpl: template body filepath must be set")
    if not out_path:
        raise GotmplError("gotmpl: output filepath must be set")
    try:
        with open(body_path, encoding="utf-8") as fh:
            nodes = _Parser(_tokenize(fh.read())).parse()
    except (OSError, TemplateError) as exc:
        raise GotmplError(f"gotmpl: cannot parse template body file: {exc}") from exc
    try:
        data = json.loads(json_data)
    except ValueError as exc:
        raise GotmplError(f"gotmpl: data must be in JSON format: {exc}") from exc
    try:
        out_file = open(out_path, "w", encoding="utf-8")
    except OSError as exc:
        raise GotmplError(f"gotmpl: cannot create output file: {exc}") from exc
    with out_file:
        out: list[str] = []
        try:
            _execute(nodes, data, data, out)
        except TemplateError as exc:
            raise GotmplError(f"gotmpl: execution failed: {exc}") from exc
        out_file.write("".join(out))


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="gotmpl", description="Generate files from a template and JSON data."
    )
    parser.add_argument("-b", "--body", default="", help="Template body filepath.")
    parser.add_argument("-d", "--data", default="", help="Data in JSON format.")
    parser.add_argument("-o", "--out", default="", help="Output filepath.")
    args = parser.parse_args(argv)
    try:
        gotmpl(args.body, args.data, args.out)
    except GotmplError as exc:
        print(exc)
        parser.print_help(sys.stdout)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())