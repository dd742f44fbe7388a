"""
Metacmd dispatch contract.

The shell's session object exposes its capabilities to metacommand runners through
the protocols below. Each protocol covers one concern; Handler composes all of
them and is the single contract runners rely on.

- IOControl: terminal IO, output redirection, printing and highlighting.
- ConnectionControl: current user, URL and connection; open/close; passwords.
- TransactionControl: begin/commit/rollback.
- BufferControl: last executed statement and the pending statement buffer.
- VariableAccess: variable prompts and file inclusion.
- TimingControl: the timing display toggle.
- MetadataAccess: metadata introspection.

Runner / RunnerFunc
- A runner maps a handler to the Option describing what the loop must do next.
  Failures are exceptions: they abort the current metacommand only. Option.quit
  asks the loop to stop once the command finishes, whatever its outcome.
"""
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .options import Option


@runtime_checkable
class IOControl(Protocol):
    def io(self) -> Any: ...
    def get_output(self) -> Any: ...
    def set_output(self, writer: Any, /) -> None: ...
    def print(self, format: str, /, *args: Any) -> None: ...
    def highlight(self, writer: Any, text: str, /) -> None: ...


@runtime_checkable
class ConnectionControl(Protocol):
    def user(self) -> Any: ...
    def url(self) -> Any: ...
    def db(self) -> Any: ...
    def open(self, *params: str) -> None: ...
    def close(self) -> None: ...
    def change_password(self, user: str, /) -> str: ...


@runtime_checkable
class TransactionControl(Protocol):
    def begin(self, options: Any = None, /) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


@runtime_checkable
class BufferControl(Protocol):
    def last(self) -> str: ...
    def last_raw(self) -> str: ...
    def buf(self) -> Any: ...
    def reset(self, text: str, /) -> None: ...


@runtime_checkable
class VariableAccess(Protocol):
    def read_var(self, type: str, prompt: str, /) -> str: ...
    def include(self, path: str, relative: bool, /) -> None: ...


@runtime_checkable
class TimingControl(Protocol):
    def get_timing(self) -> bool: ...
    def set_timing(self, enabled: bool, /) -> None: ...


@runtime_checkable
class MetadataAccess(Protocol):
    def metadata_writer(self) -> Any: ...


@runtime_checkable
class Handler(
    IOControl,
    ConnectionControl,
    TransactionControl,
    BufferControl,
    VariableAccess,
    TimingControl,
    MetadataAccess,
    Protocol,
):
    """
    Full capability set a metacommand runner may use.
    """


@runtime_checkable
class Runner(Protocol):
    def run(self, handler: Handler, /) -> Option: ...


class RunnerFunc:
    """
    Adapt a plain `callback(handler) -> Option` function into a Runner.

    The wrapper is callable as well; run() checks that the callback produced an Option.

    Example
        >>> @RunnerFunc
        ... def quit(handler):
        ...     return Option(quit=True)
        >>> quit.run(handler).quit
        True
    """
    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[Handler], Option], /):
        if not callable(callback):
            raise TypeError("RunnerFunc() argument must be callable")
        self._callback = callback

    @property
    def callback(self):
        return self._callback

    def run(self, handler: Handler, /) -> Option:
        option = self._callback(handler)
        if not isinstance(option, Option):
            raise TypeError("runner %r must return an Option, not %s" % (
                getattr(self._callback, "__name__", self._callback), type(option).__name__
            ))
        return option

    def __call__(self, handler: Handler, /) -> Option:
        return self.run(handler)

    def __repr__(self):
        return "runner-func(%s)" % getattr(self._callback, "__qualname__", repr(self._callback))


__all__ = (
    "IOControl",
    "ConnectionControl",
    "TransactionControl",
    "BufferControl",
    "VariableAccess",
    "TimingControl",
    "MetadataAccess",
    "Handler",
    "Runner",
    "RunnerFunc",
)
