"""Whitespace-only formatter for generated SQL.

The formatter never changes the token stream of its input. It rewrites
whitespace and line breaks only:

- quoted literals, quoted identifiers, dollar-quoted bodies and comments
  pass through untouched;
- statements are split at top-level ``;`` and separated by blank lines;
- ``CREATE TABLE`` bodies get one element per indented line and the
  ``PARTITION BY`` clause goes on its own line;
- policy, index and foreign key statements longer than
  :data:`MAX_LINE_LENGTH` are wrapped before their clause keywords.

Formatting is idempotent: ``format_sql(format_sql(x)) == format_sql(x)``.

Example:
    >>> print(format_sql("CREATE TABLE t (id UUID PRIMARY KEY, name TEXT);"))
    CREATE TABLE t (
      id UUID PRIMARY KEY,
      name TEXT
    );
"""

from __future__ import annotations

import logging
import re

import sqlglot
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 100
INDENT = "  "

# Opaque segments are masked with these sentinels while whitespace is rewritten
_MASK = "\x00"
_LINE_COMMENT_MASK = "\x01"
_BLOCK_COMMENT_MASK = "\x02"

_COMMENT = re.compile(r"--[^\n]*\n?|/\*.*?(?:\*/|\Z)", re.DOTALL)
_MASKED = re.compile(r"[\x00-\x02](\d+)[\x00-\x02]")
_LEADING_COMMENTS = re.compile(r"^(?:\x01\d+\x01|\x02\d+\x02 ?)+")

# Tokens passed through verbatim: string literals of every flavour, quoted
# identifiers and dollar-quoted bodies
_OPAQUE_TOKENS = frozenset(
    {
        TokenType.STRING,
        TokenType.NATIONAL_STRING,
        TokenType.RAW_STRING,
        TokenType.BIT_STRING,
        TokenType.HEX_STRING,
        TokenType.BYTE_STRING,
        TokenType.HEREDOC_STRING,
        TokenType.IDENTIFIER,
    }
)

_WRAP_KEYWORDS: list[tuple[re.Pattern[str], tuple[str, ...]]] = [
    (re.compile(r"^CREATE POLICY\b"), ("AS", "FOR", "TO", "USING", "WITH CHECK")),
    (
        re.compile(r"^CREATE (UNIQUE )?INDEX\b"),
        ("USING", "INCLUDE", "WITH", "TABLESPACE", "WHERE"),
    ),
    (
        re.compile(r"^ALTER TABLE \S+ ADD CONSTRAINT \S+ FOREIGN KEY\b"),
        ("FOREIGN KEY", "REFERENCES", "ON DELETE", "ON UPDATE", "DEFERRABLE", "NOT VALID"),
    ),
]


# ---------------------------------------------------------------------------
# Masking
# ---------------------------------------------------------------------------


def _mask_comments(gap: str, out: list[str], segments: list[str]) -> None:
    """Mask the comments in text the tokenizer skipped between two tokens."""
    position = 0
    for comment in _COMMENT.finditer(gap):
        out.append(gap[position : comment.start()])
        line = comment.group(0).startswith("--")
        sentinel = _LINE_COMMENT_MASK if line else _BLOCK_COMMENT_MASK
        out.append(f"{sentinel}{len(segments)}{sentinel}")
        segments.append(comment.group(0))
        position = comment.end()
    out.append(gap[position:])


def _mask(text: str) -> tuple[str, list[str]]:
    """Replace every opaque segment with a numbered sentinel.

    Token offsets come from the sqlglot postgres tokenizer. It drops comments
    from the token stream, so comments are found in the gaps between tokens.

    Raises:
        TokenError: If the text cannot be tokenized, e.g. an unterminated string
    """
    out: list[str] = []
    segments: list[str] = []
    position = 0
    for token in sqlglot.tokenize(text, read="postgres"):
        _mask_comments(text[position : token.start], out, segments)
        raw = text[token.start : token.end + 1]
        if token.token_type in _OPAQUE_TOKENS:
            out.append(f"{_MASK}{len(segments)}{_MASK}")
            segments.append(raw)
        else:
            out.append(raw)
        position = token.end + 1
    _mask_comments(text[position:], out, segments)
    return "".join(out), segments


def _unmask(masked: str, segments: list[str]) -> str:
    return _MASKED.sub(lambda m: segments[int(m.group(1))], masked)


# ---------------------------------------------------------------------------
# Canonical single-line form
# ---------------------------------------------------------------------------


def _canonical(statement: str) -> str:
    s = re.sub(r"\s+", " ", statement).strip()
    s = re.sub(r"\(\s+", "(", s)
    s = re.sub(r"\s+\)", ")", s)
    s = re.sub(r"\s+([,;])", r"\1", s)
    # a line comment carries its own newline
    s = re.sub(r"(\x01\d+\x01)\s+", r"\1", s)
    return s


def _split_statements(masked: str) -> list[str]:
    statements = []
    current: list[str] = []
    for ch in masked:
        current.append(ch)
        if ch == ";":
            statements.append("".join(current))
            current = []
    statements.append("".join(current))
    return [s for s in (_canonical(s) for s in statements) if s]


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def _top_level_positions(masked: str, start: int, end: int, char: str) -> list[int]:
    depth = 0
    positions = []
    for i in range(start, end):
        c = masked[i]
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        elif c == char and depth == 0:
            positions.append(i)
    return positions


def _matching_paren(masked: str, open_at: int) -> int:
    depth = 0
    for i in range(open_at, len(masked)):
        if masked[i] == "(":
            depth += 1
        elif masked[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _layout_create_table(masked: str) -> str:
    open_at = masked.find("(")
    if open_at == -1:
        return masked
    close_at = _matching_paren(masked, open_at)
    if close_at == -1:
        return masked
    body = masked[open_at + 1 : close_at]
    cuts = [-1, *_top_level_positions(body, 0, len(body), ","), len(body)]
    elements = [body[a + 1 : b].strip() for a, b in zip(cuts, cuts[1:])]
    if not any(elements):
        return masked
    head = masked[:open_at].rstrip()
    tail = masked[close_at + 1 :].strip()
    lines = [f"{head} ("]
    lines.append(",\n".join(INDENT + e for e in elements))
    if tail.startswith(";") or not tail:
        lines.append(f"){tail}")
    else:
        lines.append(")")
        lines.append(tail)
    return "\n".join(lines)


def _layout_wrapped(masked: str, keywords: tuple[str, ...]) -> str:
    """Break before the first top-level occurrence of each clause keyword."""
    breaks: set[int] = set()
    used: set[str] = set()
    depth = 0
    for i, c in enumerate(masked):
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        elif c == " " and depth == 0:
            for keyword in keywords:
                if keyword not in used and masked.startswith(keyword, i + 1):
                    after = i + 1 + len(keyword)
                    if after == len(masked) or not (
                        masked[after].isalnum() or masked[after] == "_"
                    ):
                        breaks.add(i)
                        used.add(keyword)
                        break
    if not breaks:
        return masked
    return "".join(f"\n{INDENT}" if i in breaks else c for i, c in enumerate(masked))


def _layout(statement: str, segments: list[str]) -> str:
    leading = _LEADING_COMMENTS.match(statement)
    prefix = leading.group(0) if leading else ""
    return prefix + _layout_statement(statement[len(prefix) :], segments)


def _layout_statement(masked: str, segments: list[str]) -> str:
    if masked.startswith("CREATE TABLE "):
        return _layout_create_table(masked)
    if len(_unmask(masked, segments)) <= MAX_LINE_LENGTH:
        return masked
    for pattern, keywords in _WRAP_KEYWORDS:
        if pattern.match(masked):
            return _layout_wrapped(masked, keywords)
    return masked


def format_sql(sql: str) -> str:
    """Normalize whitespace and line breaks of SQL text.

    Text the tokenizer rejects is returned unchanged.

    Args:
        sql: SQL text, usually several statements

    Returns:
        str: Statements separated by blank lines, laid out for reading
    """
    try:
        masked, segments = _mask(sql)
    except TokenError as e:
        logger.warning("Leaving SQL unformatted: %s", e)
        return sql
    statements = [_layout(s, segments) for s in _split_statements(masked)]
    return _unmask("\n\n".join(statements), segments)
