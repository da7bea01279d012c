"""Tree-sitter backed parser service for Go source files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from .errors import ParseError, SourceIOError

GO_LANGUAGE = Language(tree_sitter_go.language())

# Toolchain directives are not documentation (see go/ast CommentGroup.Text).
_DIRECTIVE = re.compile(r"^//(line |extern |export |[a-z0-9]+:[a-z0-9])")


@dataclass
class SourceFile:
    """A parsed Go file: the syntax tree plus the bytes it was built from."""

    path: Path
    source: bytes
    root: Node
    package: str
    doc: Optional[str] = None


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class GoParser:
    """Parses Go files with comments retained."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Path) -> SourceFile:
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise SourceIOError(path, exc.strerror or str(exc)) from exc
        return self.parse_bytes(source, path)

    def parse_bytes(self, source: bytes, path: Path = Path("<memory>")) -> SourceFile:
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(path, f"invalid UTF-8 at byte {exc.start}") from exc

        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            what = f"missing {bad.type}" if bad.is_missing else "syntax error"
            line, column = bad.start_point
            raise ParseError(path, what, line + 1, column + 1)

        clause = next((child for child in root.named_children if child.type == "package_clause"), None)
        if clause is None:
            raise ParseError(path, "expected 'package' clause", 1, 1)
        name_node = next(
            (child for child in clause.named_children if child.type == "package_identifier"),
            None,
        )
        if name_node is None:
            raise ParseError(path, "package clause has no name", clause.start_point[0] + 1)

        return SourceFile(
            path=path,
            source=source,
            root=root,
            package=node_text(name_node, source),
            doc=doc_comment(clause, source),
        )


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def doc_comment(node: Node, source: bytes) -> Optional[str]:
    """Return the cleaned comment group directly above ``node``, if any.

    The group must end on the line immediately before the node and consist of
    comments on adjacent lines. A comment that shares its first line with
    preceding code belongs to that code and ends the group.
    """
    group: List[Node] = []
    expected_row = node.start_point[0] - 1
    cursor = node.prev_named_sibling
    while cursor is not None and cursor.type == "comment":
        if cursor.end_point[0] != expected_row:
            break
        group.append(cursor)
        expected_row = cursor.start_point[0] - 1
        cursor = cursor.prev_named_sibling

    if not group:
        return None
    if cursor is not None and cursor.end_point[0] == group[-1].start_point[0]:
        # The oldest comment trails code on its line; drop it and everything above.
        group.pop()
    group.reverse()
    return comment_text(node_text(comment, source) for comment in group)


def comment_text(comments: Iterable[str]) -> Optional[str]:
    """Clean raw comment tokens into documentation text (go/ast rules)."""
    lines: List[str] = []
    for raw in comments:
        if raw.startswith("//"):
            if _DIRECTIVE.match(raw):
                continue
            body = raw[2:]
            if body.startswith(" "):
                body = body[1:]
            lines.append(body)
        elif raw.startswith("/*"):
            lines.extend(raw[2:-2].split("\n"))
        else:
            lines.append(raw)

    lines = [line.rstrip() for line in lines]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return None

    collapsed: List[str] = []
    for line in lines:
        if not line and collapsed and not collapsed[-1]:
            continue
        collapsed.append(line)
    return "\n".join(collapsed) + "\n"


__all__ = ["GO_LANGUAGE", "GoParser", "SourceFile", "comment_text", "doc_comment", "node_text"]
