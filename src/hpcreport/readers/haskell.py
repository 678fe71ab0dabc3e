"""
Scanner for the Haskell ``Show`` syntax used by tix and mix files.

HPC writes both files with ``show``: constructor names, string literals,
integers, lists, tuples, a UTC timestamp (mix only) and source spans in the
``line:col-line:col`` form. The scanner splits the text into those tokens and
offers the small set of ``expect``/``list`` helpers the two readers are built
from. Any unexpected character or token raises ``TraceParseError``.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from hpcreport import logger
from hpcreport.exceptions import FileAccessError, TraceParseError
from hpcreport.utils.paths import FileSystemProvider, read_file_bytes
from hpcreport.utils.show import ASCII_NAMES

T = TypeVar("T")

STRING = "string"
TIMESTAMP = "timestamp"
POSITION = "position"
INTEGER = "integer"
IDENT = "ident"
PUNCT = "punct"

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<timestamp>\d{4}-\d{2}-\d{2}\ \d{2}:\d{2}:\d{2}(?:\.\d+)?\ UTC)
  | (?P<position>\d+:\d+-\d+:\d+)
  | (?P<integer>-?\d+)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_']*)
  | (?P<punct>[\[\](),])
    """,
    re.VERBOSE | re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t",
    "v": "\v", "\\": "\\", '"': '"', "'": "'", "&": "",
}

# Longest names first so that SOH is not read as SO followed by H.
_ESCAPE_RE = re.compile(
    r"\\(?:(?P<dec>\d+)|x(?P<hex>[0-9a-fA-F]+)|o(?P<oct>[0-7]+)"
    r"|\^(?P<ctrl>[@A-Z\[\\\]^_])"
    r"|(?P<name>" + "|".join(sorted(ASCII_NAMES, key=len, reverse=True)) + r")"
    r"|(?P<gap>\s+\\)"
    r"|(?P<simple>.))",
    re.DOTALL,
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    offset: int


def decode_string(literal: str, source: str = "<input>", offset: int = 0) -> str:
    """Decode a Haskell string literal (including its quotes)."""
    body = literal[1:-1]

    def replace(match: "re.Match[str]") -> str:
        if match.group("dec") is not None:
            return chr(int(match.group("dec")))
        if match.group("hex") is not None:
            return chr(int(match.group("hex"), 16))
        if match.group("oct") is not None:
            return chr(int(match.group("oct"), 8))
        if match.group("ctrl") is not None:
            return chr(ord(match.group("ctrl")) - 64)
        if match.group("name") is not None:
            return chr(ASCII_NAMES[match.group("name")])
        if match.group("gap") is not None:
            return ""
        simple = match.group("simple")
        if simple in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[simple]
        raise TraceParseError(source, offset + match.start() + 1, f"unknown escape '\\{simple}'")

    try:
        return _ESCAPE_RE.sub(replace, body)
    except (ValueError, OverflowError) as e:
        raise TraceParseError(source, offset, f"invalid character escape: {e}") from e


def tokenize(text: str, source: str = "<input>") -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            snippet = text[pos:pos + 20]
            raise TraceParseError(source, pos, f"unexpected input {snippet!r}")
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class Scanner:
    """Cursor over the tokens of one file."""

    def __init__(self, data: Union[bytes, str], source: str = "<input>"):
        self.source = source
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                # Offset into the raw bytes; nothing was decoded.
                raise TraceParseError(source, e.start, "input is not valid UTF-8") from e
        self._tokens = tokenize(data, source)
        self._index = 0
        self._end = len(data)

    def error(self, detail: str, token: Optional[Token] = None) -> TraceParseError:
        token = token if token is not None else self.peek()
        offset = token.offset if token is not None else self._end
        return TraceParseError(self.source, offset, detail)

    def peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of input")
        self._index += 1
        return token

    def expect(self, kind: str, value: Optional[str] = None) -> Token:
        token = self.next()
        if token.kind != kind or (value is not None and token.value != value):
            wanted = value if value is not None else kind
            raise self.error(f"expected {wanted}, found {token.value!r}", token)
        return token

    def at(self, kind: str, value: Optional[str] = None) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind and (value is None or token.value == value)

    def expect_end(self) -> None:
        token = self.peek()
        if token is not None:
            raise self.error(f"unexpected trailing input {token.value!r}", token)

    # Typed helpers

    def string(self) -> str:
        token = self.expect(STRING)
        return decode_string(token.value, self.source, token.offset)

    def natural(self, what: str = "integer") -> int:
        token = self.expect(INTEGER)
        value = int(token.value)
        if value < 0:
            raise self.error(f"{what} must be non-negative, found {value}", token)
        return value

    def ident(self) -> str:
        return self.expect(IDENT).value

    def boolean(self) -> bool:
        token = self.expect(IDENT)
        if token.value == "True":
            return True
        if token.value == "False":
            return False
        raise self.error(f"expected True or False, found {token.value!r}", token)

    def list_of(self, item: Callable[[], T]) -> List[T]:
        """Parse ``[item, item, ...]``."""
        self.expect(PUNCT, "[")
        items: List[T] = []
        if self.at(PUNCT, "]"):
            self.next()
            return items
        while True:
            items.append(item())
            token = self.expect(PUNCT)
            if token.value == "]":
                return items
            if token.value != ",":
                raise self.error(f"expected ',' or ']', found {token.value!r}", token)


def read_input(path: Union[str, Path], fs_provider: Optional[FileSystemProvider] = None) -> bytes:
    """Read a whole tix or mix file; operating system failures become ``FileAccessError``."""
    try:
        return read_file_bytes(path, fs_provider)
    except OSError as e:
        error = FileAccessError(path, "read", e.strerror or str(e))
        logger.error(f"{type(error).__name__}: {error.describe()}")
        raise error from e
