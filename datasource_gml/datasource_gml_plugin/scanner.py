"""
Tokenizer and block scanner for GML-style markup.

The markup is a sequence of ``key value`` pairs where a value is either a
scalar (bare word or double-quoted string) or a bracketed list of further
pairs::

    graph [
      directed 0
      node [ id 1 label "Alice" graphics [ x 10 y 20 ] ]
      edge [ source 1 target 2 ]
    ]

Blocks are delimited by bracket matching, so nested lists and brackets inside
quoted strings never end a block early. Unterminated lists at end of input are
marked as not closed and the parser drops them.

A line whose first non-blank character is ``#`` is a comment; a ``#`` later
in a line is an ordinary word character (``fill #ff0000``). Strings end at
the end of their line. A quote with no partner on its line is read as part
of a bare word, so it cannot swallow the brackets that follow it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

BLOCK_KINDS = ("node", "edge")

TOKEN_RE = re.compile(
    r"""
     (?P<comment>(?:^|\n)[ \t]*\#[^\n]*)
    |(?P<open>\[)
    |(?P<close>\])
    |(?P<string>"[^"\n]*")
    |(?P<word>"?[^\s\[\]"]+|")
    |(?P<space>[^\S\n]+|\n)
    """,
    re.VERBOSE,
)


class Token(NamedTuple):
    kind: str  # "open", "close", "string" or "word"
    value: str
    position: int


def tokenize(text: str) -> List[Token]:
    tokens = []
    for match in TOKEN_RE.finditer(text or ""):
        kind = match.lastgroup
        if kind in ("space", "comment"):
            continue
        value = match.group()
        if kind == "string":
            value = value[1:-1]
        tokens.append(Token(kind, value, match.start()))
    return tokens


@dataclass
class ListValue:
    pairs: List[Tuple[str, "Value"]] = field(default_factory=list)
    closed: bool = False


Value = Union[Token, ListValue, None]


@dataclass
class Block:
    kind: str
    pairs: List[Tuple[str, Value]]

    def first(self, key: str) -> Value:
        # Duplicate keys: the first occurrence wins
        for k, v in self.pairs:
            if k == key:
                return v
        return None

    def scalars(self) -> dict:
        out = {}
        for k, v in self.pairs:
            if isinstance(v, Token) and k not in out:
                out[k] = v.value
        return out


def _read_list(tokens: List[Token], pos: int) -> Tuple[ListValue, int]:
    """Read ``key value`` pairs until the matching close bracket."""
    result = ListValue()
    while pos < len(tokens):
        tok = tokens[pos]

        if tok.kind == "close":
            result.closed = True
            return result, pos + 1

        if tok.kind == "open":
            # List without a key; consume it as a unit
            sub, pos = _read_list(tokens, pos + 1)
            if not sub.closed:
                return result, pos
            continue

        if tok.kind == "string":
            # A quoted string cannot be a key
            pos += 1
            continue

        key = tok.value
        pos += 1
        if pos >= len(tokens):
            result.pairs.append((key, None))
            break

        value = tokens[pos]
        if value.kind == "open":
            sub, pos = _read_list(tokens, pos + 1)
            result.pairs.append((key, sub))
            if not sub.closed:
                return result, pos
        elif value.kind == "close":
            result.pairs.append((key, None))
        elif value.kind == "word" and pos + 1 < len(tokens) and tokens[pos + 1].kind == "open":
            # "key node [ ... ]": the key has no value and the word opens a list
            result.pairs.append((key, None))
        else:
            result.pairs.append((key, value))
            pos += 1

    return result, pos


def parse_document(text: str) -> ListValue:
    tokens = tokenize(text)
    root = ListValue(closed=True)
    pos = 0
    # The top level has no closing bracket of its own; a stray "]" only ends
    # one stretch of pairs and reading resumes after it.
    while pos < len(tokens):
        stretch, pos = _read_list(tokens, pos)
        root.pairs.extend(stretch.pairs)
    return root


def _walk(value: ListValue) -> Iterator[Block]:
    for key, item in value.pairs:
        if not isinstance(item, ListValue):
            continue
        if key in BLOCK_KINDS:
            if item.closed:
                yield Block(kind=key, pairs=item.pairs)
            continue
        if key == "graph" and item.closed:
            yield Block(kind="graph", pairs=item.pairs)
        yield from _walk(item)


def scan_blocks(text: Optional[str]) -> List[Block]:
    """Return node, edge and graph blocks in order of appearance."""
    return list(_walk(parse_document(text or "")))
