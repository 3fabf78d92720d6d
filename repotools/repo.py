"""Helpers for locating a repository root, Go modules and files by pattern."""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable

_KNOWN_DIRECTIVES = frozenset(
    {
        "module",
        "go",
        "toolchain",
        "godebug",
        "require",
        "exclude",
        "replace",
        "retract",
        "tool",
        "ignore",
    }
)


class ModFileError(Exception):
    """Raised when a go.mod file cannot be parsed."""

    def __init__(self, path: str, errors: list[tuple[int, str]]):
        self.path = path
        self.errors = errors
        super().__init__(
            "\n".join(f"{path}:{line}: {message}" for line, message in errors)
        )


@dataclass
class ModFile:
    """A parsed go.mod file: the path it was read from and its module path."""

    name: str
    module: str = ""
    directives: list[tuple[str, list[str]]] = field(default_factory=list)


def _strip_comment(line: str) -> str:
    index = line.find("//")
    return line if index < 0 else line[:index]


def parse_mod_file(path: str, data: bytes | str) -> ModFile:
    """Parse the contents of a go.mod file read from path."""
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    mod = ModFile(name=path)
    errors: list[tuple[int, str]] = []
    block: str | None = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        tokens = _strip_comment(raw).split()
        if not tokens:
            continue
        if block is not None:
            if tokens == [")"]:
                block = None
            else:
                mod.directives.append((block, tokens))
            continue
        verb, args = tokens[0], tokens[1:]
        if verb not in _KNOWN_DIRECTIVES:
            errors.append((lineno, f"unknown directive: {verb}"))
            continue
        if args == ["("]:
            block = verb
            continue
        if verb == "module":
            if len(args) != 1:
                errors.append((lineno, "usage: module module/path"))
                continue
            mod.module = args[0].strip('"`')
        mod.directives.append((verb, args))
    if block is not None:
        errors.append((len(text.splitlines()), f"unterminated {block} block"))
    if errors:
        raise ModFileError(path, errors)
    return mod


def find_root(start: str | None = None) -> str:
    """Return the closest directory at or above start that holds a .git entry."""
    origin = start if start is not None else os.getcwd()
    directory = origin
    while True:
        if os.path.lexists(os.path.join(directory, ".git")):
            return directory
        directory = os.path.dirname(directory)
        if directory.endswith(os.sep):
            raise FileNotFoundError(
                f"unable to find git repository enclosing working dir {origin}"
            )


@functools.lru_cache(maxsize=None)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    sep = re.escape(os.sep)
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append(f"[^{sep}]*")
        elif ch == "?":
            out.append(f"[^{sep}]")
        elif ch == "\\" and os.sep != "\\":
            i += 1
            if i >= n:
                raise ValueError("syntax error in pattern")
            out.append(re.escape(pattern[i]))
        elif ch == "[":
            end = pattern.find("]", i + 2 if pattern[i + 1 : i + 2] == "^" else i + 1)
            if end < 0:
                raise ValueError("syntax error in pattern")
            body = pattern[i + 1 : end]
            negate = body.startswith("^")
            if negate:
                body = body[1:]
            if not body:
                raise ValueError("syntax error in pattern")
            body = body.replace("\\", "\\\\").replace("]", "\\]")
            out.append(f"[{'^' if negate else ''}{body}]")
            i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


def _match(pattern: str, name: str) -> bool:
    return _compile_glob(pattern).fullmatch(name) is not None


def _walk(
    root: str,
    ignore: Iterable[str] | None,
    on_dir: Callable[[str], None],
    on_file: Callable[[str], None],
) -> None:
    patterns = [os.path.normpath(os.path.join(root, p)) for p in ignore or ()]
    for pattern in patterns:
        _compile_glob(pattern)

    def ignored(path: str) -> bool:
        return any(_match(p, path) for p in patterns)

    def visit_dir(directory: str) -> None:
        on_dir(directory)
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            path = os.path.join(directory, entry.name)
            is_dir = entry.is_dir(follow_symlinks=False)
            if ignored(path):
                if is_dir:
                    continue
                return
            if is_dir:
                visit_dir(path)
            else:
                on_file(path)

    if ignored(root):
        return
    if os.path.isdir(root) and not os.path.islink(root):
        visit_dir(root)
    else:
        os.lstat(root)
        on_file(root)


def find_modules(root: str, ignore: Iterable[str] | None = None) -> list[ModFile]:
    """Return every Go module in the tree under root, ordered by directory."""
    results: list[ModFile] = []

    def on_dir(path: str) -> None:
        go_mod = os.path.join(path, "go.mod")
        try:
            with open(go_mod, "rb") as fh:
                data = fh.read()
        except FileNotFoundError:
            return
        results.append(parse_mod_file(go_mod, data))

    _walk(root, ignore, on_dir, lambda _path: None)
    results.sort(key=lambda m: os.path.dirname(m.name))
    return results


def find_file_pattern_dirs(
    root: str, pattern: str, ignore: Iterable[str] | None = None
) -> list[str]:
    """Return the sorted, unique paths of files whose base name matches pattern."""
    _compile_glob(pattern)
    results: list[str] = []

    def on_file(path: str) -> None:
        if _match(pattern, os.path.basename(path)):
            results.append(path)

    _walk(root, ignore, lambda _path: None, on_file)
    return sorted(set(results))