r"""
Metacmd execution options and the format-option scanner.

Overview
- ExecType: how the pending SQL buffer should run once a metacommand finishes.
- Option: the execution-option descriptor built fresh for every metacommand
  invocation (quit request, execution type, string parameters, crosstab columns,
  watch interval).
- Option.parse_params(tokens, default_key): classify the metacommand arguments as
  either one free-form value stored under `default_key`, or a parenthesized
  `(key=value ...)` format-option list merged into Option.params.

Scanner rules
- empty tokens are skipped.
- outside a list, a token starting with "(" opens one; any other token is joined
  with every remaining token (single spaces) into params[default_key], and scanning
  stops for good.
- inside a list, every token must carry "=" (split at the first one). A leading "("
  run is stripped from the key, a trailing ")" run from the value. A token ending
  with ")" closes the list.
- a malformed entry raises InvalidFormatOptionError; pairs stored before it stay.

Quick example:
    >>> option = Option()
    >>> option.parse_params(["(format=csv", "header=on)"], "file")
    {'format': 'csv', 'header': 'on'}
    >>> Option().parse_params(["|", "gzip", ">", "out.gz"], "pipe")
    {'pipe': '| gzip > out.gz'}
"""
from datetime import timedelta
from enum import IntEnum

from .faults import *
from .utils import *


class ExecType(IntEnum):
    r"""
    execution requested by a metacommand for the pending statement buffer.

    - NONE: no execution.
    - ONLY: plain execution (\g).
    - PIPE: execution with results piped to a destination named in params (\g |file).
    - SET: execution binding the resulting columns as variables (\gset).
    - EXEC: execution, then executing each result row's value as a statement (\gexec).
    - CROSSTAB: execution rendered as a pivot table using Option.crosstab (\crosstabview).
    - WATCH: repeated execution every Option.watch until cancelled (\watch).
    """
    NONE     = 0
    ONLY     = 1
    PIPE     = 2
    SET      = 3
    EXEC     = 4
    CROSSTAB = 5
    WATCH    = 6


class Option:
    """
    Parsed result options of a metacommand.

    Attributes
    - quit: bool
      instructs the shell loop to terminate once the current command finishes,
      regardless of whether the command failed.
    - exec: ExecType
      type of execution requested for the pending buffer.
    - params: dict[str, str]
      accompanying string parameters for execution (unique keys, last write wins).
    - crosstab: list[str]
      crosstab column parameters, in user order.
    - watch: timedelta
      watch interval; only meaningful when exec is ExecType.WATCH.
    """
    __slots__ = ("quit", "exec", "params", "crosstab", "watch")

    def __init__(self, *, quit=False, exec=ExecType.NONE, params=Unset, crosstab=Unset, watch=Unset):
        if not isinstance(quit, bool):
            raise TypeError("Option() quit must be a boolean")
        if not isinstance(watch := coalesce(watch, timedelta()), timedelta):
            raise TypeError("Option() watch must be a timedelta")
        if watch < timedelta():
            raise ValueError("Option() watch must not be negative")
        self.quit = quit
        self.exec = ExecType(exec)
        self.params = dict(coalesce(params, {}))
        self.crosstab = list(coalesce(crosstab, []))
        self.watch = watch

    @property
    def interval(self):
        """
        The watch interval when watching was requested, otherwise None.
        """
        return self.watch if self.exec is ExecType.WATCH else None

    def __eq__(self, other):
        if not isinstance(other, Option):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "quit", self.quit
        yield "exec", self.exec.name.lower()
        yield "params", self.params
        yield "crosstab", self.crosstab
        yield "watch", self.watch

    def parse_params(self, params, default_key, /):
        """
        Scan metacommand tokens into self.params.

        Parameters
        - params: Iterable[str]
          the tokens to classify (already decoded by the caller).
        - default_key: str
          key receiving the free-form value when the tokens are not a "(...)" list.

        Returns
        - the self.params mapping (mutated in place).

        Raises
        - InvalidFormatOptionError: a token inside a "(...)" list carries no "=".
          Pairs stored before the failure are kept.

        Warns
        - EmptyFormatKeyWarning: a list entry has an empty key (e.g. "(=x)"); the pair
          is stored as-is.
        """
        params = list(params)
        listing = False
        for index, param in enumerate(params):
            if not param:
                continue
            if not listing:
                if not param.startswith("("):
                    self.params[default_key] = " ".join(params[index:])
                    return self.params
                listing = True
            key, equals, value = param.partition("=")
            if not equals:
                raise InvalidFormatOptionError(
                    "format option %r at %s position is not a key=value pair" % (param, ordinal(index + 1)),
                    title="invalid format option",
                    code=FaultCode.INVALID_FORMAT_OPTION,
                    hint="write format options as (key=value key=value ...)",
                    token=param,
                    index=index + 1,
                )
            key = key.lstrip("(")
            if not key:
                trigger(EmptyFormatKeyWarning(
                    "format option %r at %s position has an empty key" % (param, ordinal(index + 1)),
                    title="empty format option key",
                    code=FaultCode.EMPTY_FORMAT_KEY,
                    hint="name the option before '=' (for example: (format=csv))",
                    token=param,
                    index=index + 1,
                ))
            self.params[key] = value.rstrip(")")
            if param.endswith(")"):
                listing = False
        return self.params


__all__ = (
    "ExecType",
    "Option",
)
