"""
modopts faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue raised
  while building option tables or scanning a command line.
- OptionException / OptionWarning: base types carrying a message plus
  read-only options; they render themselves with rich.
- trigger(): central entry point to surface a fault (print in shell mode,
  raise or warn otherwise).
- getdoc(): optional per-code documentation supplied by the host application.

Host customization (attributes looked up on __main__)
- __prog__: program name shown in headers and hints.
- __styles__: rich style overrides keyed by style name.
- __codes__: FaultCode -> label mapping used by FaultCode.normalize().
- __docs__: FaultCode -> documentation string used by getdoc().
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - table building (211xx): OUT_OF_MEMORY
    - scanning (221xx): UNKNOWN_OPTION, MISSING_ARGUMENT, AMBIGUOUS_OPTION,
      UNEXPECTED_ARGUMENT
    - deprecations (231xx): REMOVED_OPTION
    - warnings (241xx): REMOVED_OPTION_IGNORED, DEPRECATED_OPTION
    """
    # --- table building errors ---
    OUT_OF_MEMORY           = 21101

    # --- scanning errors ---
    UNKNOWN_OPTION          = 22101
    MISSING_ARGUMENT        = 22102
    AMBIGUOUS_OPTION        = 22103
    UNEXPECTED_ARGUMENT     = 22104

    # --- deprecation errors ---
    REMOVED_OPTION          = 23101

    # --- warnings ---
    REMOVED_OPTION_IGNORED  = 24101
    DEPRECATED_OPTION       = 24102

    def normalize(self):
        """
        return the host label for this code (see __codes__), or its number.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: [ prog - code | title ]
    - body: message, then "→ hint"
    - fancy: the body is wrapped in a Panel titled by the header.
    """
    main = sys.modules["__main__"]
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", options.get("prog", "modopts")), "prog-name"),
        " - ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(str(options.get("title", "")).title(), "title"),
        " ]"
    )
    message = text(fault.message or "", "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint", ""), "hint"))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class OptionException(Exception):
    """
    base class of command-line errors.

    message is the one-line cause; options carry the rendering context
    (title, code, hint, prog, shell, fancy, colorful) plus any payload the
    raiser attaches (option, token, item).
    """
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OutOfMemoryError(OptionException): ...
class UnknownOptionError(OptionException): ...
class MissingArgumentError(UnknownOptionError): ...
class AmbiguousOptionError(UnknownOptionError): ...
class UnexpectedArgumentError(UnknownOptionError): ...
class RemovedOptionError(OptionException): ...


class OptionWarning(Warning):
    """
    base class of command-line warnings (same options model as OptionException).
    """
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            warnings.warn(self, stacklevel=3)
            return
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RemovedOptionWarning(OptionWarning): ...
class DeprecatedOptionWarning(OptionWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - shell mode prints through the stderr console; otherwise errors are
      raised and warnings are emitted with warnings.warn().
    """
    if (
        not callable(getattr(fault, "__trigger__", None)) or
        not callable(getattr(fault, "__replace__", None))
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation for a fault code from the host's __docs__ mapping, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(sys.modules["__main__"], "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "OptionException",
    "OutOfMemoryError",
    "UnknownOptionError",
    "MissingArgumentError",
    "AmbiguousOptionError",
    "UnexpectedArgumentError",
    "RemovedOptionError",
    "OptionWarning",
    "RemovedOptionWarning",
    "DeprecatedOptionWarning",
    "trigger",
    "getdoc",
)
