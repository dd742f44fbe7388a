r"""
Metacmd parameter cursor: typed reads over a metacommand's arguments.

Params binds together what a metacommand runner needs while it consumes its
arguments: the handler, the metacommand name, the raw ParameterStream, and the
Option it is building.

Decoding
- Quote removal and variable interpolation are an external capability. Params is
  given an `unquote(user, exec, variables)` factory that returns a `decode(token)`
  callable; the factory receives the handler's current user, the exec flag of the
  read, and a live read-only view of the variables table (variables set while the
  metacommand runs are visible to later reads).
- Without an `unquote` factory, tokens are handed back exactly as they were typed.
- Decoder exceptions are never caught here.

Reads
- get(exec)          → next value ("" when exhausted).
- get_ok(exec)       → (ok, value), with ok False when exhausted.
- get_optional(exec) → (is_flag, value): a leading "-" marks a flag and is stripped.
- get_all(exec)      → every remaining value.
- get_raw()          → the remainder verbatim, never decoded.

Quick example:
    >>> params = Params(handler, "g", ParameterStream("(format=csv) -x"))
    >>> params.option.parse_params([params.get(True)], "file")
    {'format': 'csv'}
    >>> params.get_optional(True)
    (True, 'x')
"""
from types import MappingProxyType

from .options import Option
from .stream import ParameterStream
from .utils import *


class Params:
    """
    Parameter cursor of one metacommand invocation.

    Attributes
    - handler: the process handler (see metacmd.handler.Handler).
    - name: str, the metacommand name (without the backslash).
    - stream: ParameterStream, the raw arguments.
    - option: Option, the execution options under construction (fresh per invocation).
    """
    __slots__ = ("handler", "name", "stream", "option", "_unquote", "_variables")

    def __init__(self, handler, name, stream, /, unquote=Unset, variables=Unset):
        if not isinstance(name, str):
            raise TypeError("Params() name must be a string")
        if not isinstance(stream, ParameterStream):
            stream = ParameterStream(stream)
        if unquote is not Unset and not callable(unquote):
            raise TypeError("Params() unquote must be callable")
        self.handler = handler
        self.name = name
        self.stream = stream
        self.option = Option()
        self._unquote = unquote
        self._variables = MappingProxyType(coalesce(variables, {}))

    def __repr__(self):
        return f"params(name={self.name!r}, stream={self.stream!r}, option={self.option!r})"

    def _decoder(self, exec):
        if self._unquote is Unset:
            return None
        return self._unquote(self.handler.user(), exec, self._variables)

    def get(self, exec, /):
        """
        Return the next parameter decoded, or "" once the arguments are exhausted.
        """
        _, value = self.stream.get(self._decoder(exec))
        return value

    def get_ok(self, exec, /):
        """
        Return (ok, value) for the next parameter; ok is False once exhausted.
        """
        return self.stream.get(self._decoder(exec))

    def get_optional(self, exec, /):
        """
        Return the next parameter split into a flag marker and its value.

        - "-verbose" → (True, "verbose")
        - "verbose"  → (False, "verbose")
        """
        value = self.get(exec)
        if value.startswith("-"):
            return True, value[1:]
        return False, value

    def get_all(self, exec, /):
        return self.stream.get_all(self._decoder(exec))

    def get_raw(self):
        """
        Return the remaining parameters as typed.

        Note: no other processing is done to interpolate variables or to decode
        string values.
        """
        return self.stream.get_raw()


__all__ = (
    "Params",
)
