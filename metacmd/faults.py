"""
Metacmd faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parsing
  engine or the driver registry can raise.
- MetacommandException / MetacommandWarning: base types that carry message + options
  and know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: format-option faults name the ordinal position of the
  offending token (“at second position”, etc.).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The scanner and registry raise faults directly, so they reach the dispatcher untouched.
- The shell loop calls trigger(fault, shell=True) to render a fault against the offending
  metacommand and keep accepting input; outside shell mode errors are raised again and
  warnings go through the warnings module.
"""
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - format options (1111x)
      • INVALID_FORMAT_OPTION
    - driver registry (1121x)
      • DUPLICATE_DRIVER, UNKNOWN_DRIVER
    - warnings (12xxx)
      • EMPTY_FORMAT_KEY

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- format option errors (111xx) ---
    INVALID_FORMAT_OPTION       = 11111

    # --- driver registry errors (112xx) ---
    DUPLICATE_DRIVER            = 11211
    UNKNOWN_DRIVER              = 11212

    # --- warnings (12xxx) ---
    EMPTY_FORMAT_KEY            = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ <prog> — <code> | <Title> ]"
    - body: the message, then " → <hint>"
    - fancy mode wraps both in a rounded panel titled by the header.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options["colorful"] else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options["colorful"]:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", coalesce(options.get("name", Unset), "metacmd")), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(options["title"].title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint")))

    if options["fancy"]:
        width = console.width - 4
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class MetacommandException(Exception):
    """
    base class of every error raised by the engine itself.

    options
    - title, code, hint: rendering copy (see _render).
    - name: the metacommand the fault belongs to (shown as program name when set).
    - token, index: the offending token and its 1-based position, when relevant.
    - shell, fancy, colorful: runtime presentation flags (see trigger()).
    """
    __defaults__ = MappingProxyType({
        "title": "metacommand error",
        "hint": "",
        "shell": False,
        "fancy": False,
        "colorful": True,
    })

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(self.__defaults__ | options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidFormatOptionError(MetacommandException): ...
class DuplicateDriverError(MetacommandException): ...
class UnknownDriverError(MetacommandException, KeyError): ...


class MetacommandWarning(Warning):
    """
    base class of every warning issued by the engine.

    same option bag and rendering as MetacommandException, with a softer palette.
    """
    __defaults__ = MappingProxyType({
        "title": "metacommand warning",
        "hint": "",
        "shell": False,
        "fancy": False,
        "colorful": True,
    })

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(self.__defaults__ | options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            # __trigger__ → trigger → raiser → its caller
            return warnings.warn(self, stacklevel=4)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyFormatKeyWarning(MetacommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich stderr console and control returns to
      the caller; otherwise errors are raised and warnings are issued.

    typical options
    - shell, fancy, colorful, name, and any other context the reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "MetacommandException",
    "InvalidFormatOptionError",
    "DuplicateDriverError",
    "UnknownDriverError",
    "MetacommandWarning",
    "EmptyFormatKeyWarning",
    "FaultCode",
    "trigger",
)
