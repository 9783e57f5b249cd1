"""Media condition syntax tree and parser.

Supports the subset of CSS media queries that matters for image sizing::

    condition   := 'not' in-parens
                 | in-parens ( ('and' in-parens)* | ('or' in-parens)* )
    in-parens   := '(' condition ')' | '(' feature ':' value ')' | '(' feature ')'
    value       := number | number '/' number | dimension | ident

plus the bare media queries ``all``, ``only all`` and ``not all``. Every
parenthesised expression becomes a ``Condition`` with ``operator=None`` unless
it combines several terms, so ``(min-width: 600px)`` parses to
``Condition(None, (Feature('min-width', Dimension(600, 'px')),))``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from domain.units import format_number
from parsing.errors import ParseError

MEDIA_TYPES = frozenset({"all", "screen", "print", "speech", "tv", "handheld", "projection"})


@dataclass(frozen=True, slots=True)
class Dimension:
    value: float
    unit: str

    def __str__(self) -> str:
        return f"{format_number(self.value)}{self.unit}"


@dataclass(frozen=True, slots=True)
class Ratio:
    left: float
    right: float

    def __str__(self) -> str:
        return f"{format_number(self.left)}/{format_number(self.right)}"


FeatureValue = Union[Dimension, Ratio, float, str, None]


@dataclass(frozen=True, slots=True)
class Feature:
    feature: str
    value: FeatureValue = None

    def __str__(self) -> str:
        if self.value is None:
            return f"({self.feature})"
        value = format_number(self.value) if isinstance(self.value, float) else str(self.value)
        return f"({self.feature}: {value})"


@dataclass(frozen=True, slots=True)
class Condition:
    operator: Optional[str]
    nodes: Tuple["MediaNode", ...]

    def __str__(self) -> str:
        parts = [str(n) if isinstance(n, Feature) else f"({n})" for n in self.nodes]
        if self.operator == "not":
            return f"not {parts[0]}"
        if self.operator in ("and", "or"):
            return f" {self.operator} ".join(parts)
        return parts[0]


@dataclass(frozen=True, slots=True)
class All:
    negated: bool = False

    def __str__(self) -> str:
        return "not all" if self.negated else "all"


MediaNode = Union[Feature, Condition, All]


# --- Tokenizer ------------------------------------------------------------------

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>[+-]?\d*\.?\d+)(?P<unit>[a-zA-Z%]+)?
  | (?P<ident>[a-zA-Z_-][a-zA-Z0-9_-]*)
  | (?P<compare>[<>]=?|=)
  | (?P<punct>[():/])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str  # number | dimension | ident | compare | punct
    text: str
    value: object = None
    pos: int = 0


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_PATTERN.match(text, pos)
        if not m:
            raise ParseError(
                f"Unexpected character {text[pos]!r} at {pos} in media condition: {text}",
                context={"query": text, "position": pos},
            )
        if m.group("number") is not None:
            number = float(m.group("number"))
            unit = m.group("unit")
            if unit:
                tokens.append(_Token("dimension", m.group(0), Dimension(number, unit.lower()), pos))
            else:
                tokens.append(_Token("number", m.group(0), number, pos))
        elif m.group("ident") is not None:
            tokens.append(_Token("ident", m.group(0), m.group(0).lower(), pos))
        elif m.group("compare") is not None:
            tokens.append(_Token("compare", m.group(0), None, pos))
        elif m.group("punct") is not None:
            tokens.append(_Token("punct", m.group(0), None, pos))
        pos = m.end()
    return tokens


# --- Parser ---------------------------------------------------------------------


class _ConditionParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.index = 0

    def _peek(self, offset: int = 0) -> Optional[_Token]:
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            self._fail("unexpected end of input")
        self.index += 1
        return tok  # type: ignore[return-value]

    def _fail(self, reason: str, tok: Optional[_Token] = None) -> None:
        where = f" at {tok.pos}" if tok is not None else ""
        raise ParseError(
            f"Couldn't parse media condition{where}: {self.text} ({reason})",
            context={"query": self.text, "reason": reason},
        )

    def _expect_punct(self, char: str) -> None:
        tok = self._next()
        if tok.kind != "punct" or tok.text != char:
            self._fail(f"expected {char!r}, got {tok.text!r}", tok)

    def _is_keyword(self, tok: Optional[_Token], word: str) -> bool:
        return tok is not None and tok.kind == "ident" and tok.value == word

    def parse(self) -> Condition:
        node = self._condition()
        extra = self._peek()
        if extra is not None:
            self._fail(f"unexpected {extra.text!r}", extra)
        return node

    def _condition(self) -> Condition:
        if self._is_keyword(self._peek(), "not"):
            self._next()
            return Condition("not", (self._in_parens(),))
        nodes = [self._in_parens()]
        operator: Optional[str] = None
        while True:
            tok = self._peek()
            if not (self._is_keyword(tok, "and") or self._is_keyword(tok, "or")):
                break
            if operator is not None and tok.value != operator:  # type: ignore[union-attr]
                self._fail("'and' and 'or' cannot be mixed without parentheses", tok)
            operator = tok.value  # type: ignore[union-attr,assignment]
            self._next()
            nodes.append(self._in_parens())
        return Condition(operator, tuple(nodes))

    def _in_parens(self) -> MediaNode:
        self._expect_punct("(")
        tok = self._peek()
        after = self._peek(1)
        if tok is not None and tok.kind == "ident" and not self._is_keyword(tok, "not"):
            if after is not None and after.kind == "punct" and after.text in (":", ")"):
                return self._feature()
            self._fail(f"unsupported expression starting with {tok.text!r}", tok)
        if tok is not None and tok.kind in ("number", "dimension", "compare"):
            self._fail("range syntax is not supported", tok)
        node = self._condition()
        self._expect_punct(")")
        return node

    def _feature(self) -> Feature:
        name = self._next().value
        tok = self._next()
        if tok.text == ")":
            return Feature(str(name))
        value = self._value()
        self._expect_punct(")")
        return Feature(str(name), value)

    def _value(self) -> FeatureValue:
        tok = self._next()
        if tok.kind == "dimension":
            return tok.value  # type: ignore[return-value]
        if tok.kind == "ident":
            return str(tok.value)
        if tok.kind == "number":
            slash = self._peek()
            if slash is not None and slash.kind == "punct" and slash.text == "/":
                self._next()
                right = self._next()
                if right.kind != "number":
                    self._fail(f"invalid ratio denominator {right.text!r}", right)
                return Ratio(float(tok.value), float(right.value))  # type: ignore[arg-type]
            return float(tok.value)  # type: ignore[arg-type]
        self._fail(f"invalid feature value {tok.text!r}", tok)
        return None  # pragma: no cover


def parse_media_condition(text: str) -> MediaNode:
    """Parse the condition part of a sizes clause into a syntax tree.

    Raises ``ParseError`` for anything outside the supported grammar, including
    media types other than ``all``.
    """
    query = text.strip()
    if not query:
        raise ParseError("Empty media condition", context={"query": text})
    words = query.lower().split()
    prefixed = words[0] in ("only", "not") and len(words) > 1
    media_type = words[1] if prefixed else words[0]
    if media_type in MEDIA_TYPES:
        if media_type != "all":
            raise ParseError(
                f"Unsupported media type {media_type!r}; only 'all' is allowed",
                context={"query": text},
            )
        if len(words) != (2 if prefixed else 1):
            raise ParseError(
                f"Media types cannot be combined with conditions in a sizes clause: {text}",
                context={"query": text},
            )
        return All(negated=words[0] == "not")
    return _ConditionParser(query).parse()


def stringify(node: Optional[MediaNode]) -> str:
    return "" if node is None else str(node)
