r"""
Metacmd parameter stream: the raw, position-tracked token source of a metacommand.

What this module provides
- ParameterStream: a read-only cursor over the arguments typed after a metacommand
  name. It is built from either
  • a raw argument string (e.g. the text after "\g" on the input line), split on
    unquoted whitespace with quotes kept inside tokens, or
  • a pre-tokenized iterable of strings.

Reads
- get(decode)      → (ok, value): next token, decoded by `decode` when given.
- get_all(decode)  → every remaining token, decoded, in order.
- get_raw()        → the unconsumed remainder, verbatim and undecoded.

Notes
- The stream never decodes by itself; quote removal and variable interpolation belong
  to the injected `decode` callable. Its exceptions propagate untouched, and the token
  being decoded counts as consumed.
- The caller's iterable is copied on construction and never mutated.
"""
import re
from collections.abc import Iterable

# A token is a run of unquoted non-space characters and quoted segments.
# Unterminated quotes swallow the rest of the input so the decoder can report them.
_TOKEN = re.compile(r"""(?:'(?:[^'\\]|\\.|\\\Z)*(?:'|\Z)|"(?:[^"\\]|\\.|\\\Z)*(?:"|\Z)|`[^`]*(?:`|\Z)|[^\s'"`]+)+""", re.DOTALL)


class ParameterStream:
    """
    Position-tracked, read-only token source.

    Attributes
    - index: int
      1-based position of the next token to read (useful for position-first messages).

    Examples
        >>> stream = ParameterStream("(format=csv) 'my file.csv'")
        >>> stream.get()
        (True, '(format=csv)')
        >>> stream.get_raw()
        "'my file.csv'"
    """
    __slots__ = ("_tokens", "_spans", "_text", "_cursor")

    def __init__(self, source=(), /):
        if isinstance(source, str):
            matches = list(_TOKEN.finditer(source))
            self._text = source
            self._tokens = tuple(match.group() for match in matches)
            self._spans = tuple(match.start() for match in matches)
        elif isinstance(source, Iterable):
            tokens = tuple(source)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("ParameterStream() argument must be a string or an iterable of strings")
            self._text = None
            self._tokens = tokens
            self._spans = None
        else:
            raise TypeError("ParameterStream() argument must be a string or an iterable of strings")
        self._cursor = 0

    @property
    def index(self):
        return self._cursor + 1

    def __len__(self):
        """
        Number of tokens not consumed yet.
        """
        return len(self._tokens) - self._cursor

    def __bool__(self):
        return self._cursor < len(self._tokens)

    def __repr__(self):
        return f"ParameterStream({list(self._tokens[self._cursor:])!r})"

    def __rich_repr__(self):
        yield "remaining", list(self._tokens[self._cursor:])
        yield "index", self.index

    def get(self, decode=None, /):
        """
        Read the next token.

        Returns
        - (True, value) with value decoded by `decode` when one is given.
        - (False, "") when no token remains; running out is not an error.
        """
        if self._cursor >= len(self._tokens):
            return False, ""
        token = self._tokens[self._cursor]
        self._cursor += 1
        if decode is None:
            return True, token
        return True, decode(token)

    def get_all(self, decode=None, /):
        """
        Drain every remaining token, decoding each one in order.
        """
        values = []
        while True:
            ok, value = self.get(decode)
            if not ok:
                return values
            values.append(value)

    def get_raw(self):
        """
        Drain and return the remainder exactly as typed, with no decoding.

        For raw-string streams this is the original text from the next token on
        (surrounding whitespace trimmed); for token streams it is the remaining
        tokens joined by single spaces.
        """
        if self._cursor >= len(self._tokens):
            return ""
        if self._text is not None:
            raw = self._text[self._spans[self._cursor]:].strip()
        else:
            raw = " ".join(self._tokens[self._cursor:])
        self._cursor = len(self._tokens)
        return raw


__all__ = (
    "ParameterStream",
)
