"""
Argbind faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain (positionals, options, collaborators, warnings).
- CommandException / CommandWarning: base types that carry a message plus a
  read-only mapping of options and know how to render themselves with rich.
- trigger(): central entry point to surface any fault (raise, warn, or print
  and exit depending on the "shell" option).
- getdoc(): optional description lookup for a code from the host application.

Message layout
- str(fault) is the plain diagnostic: a short explanation line followed by a
  bulleted list of the offending items (see utils.bulletize). It is suitable
  for direct display to a command-line user.
- The rich rendering adds a header with program name, code and title, plus a
  single hint line.

Integration
- The binding engine raises faults directly; the invoking layer hands them to
  trigger(fault, shell=..., fancy=..., colorful=...).
- Host customization lives in __main__: __prog__, __styles__, __codes__, __docs__.
"""
import copy
import inspect
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the binder (stable identifiers).

    grouping
    - positionals (2110x)
      • MISSING_PARAMETER_VALUE, UNRECOGNIZED_PARAMETERS
    - options (2111x)
      • MISSING_REQUIRED_OPTIONS, UNRECOGNIZED_OPTIONS
    - collaborators (2113x)
      • ACTIVATION_FAILURE, UNCASTABLE_VALUE
    - warnings (22xxx)
      • DEPRECATED_ARGUMENT

    normalize() allows the host to remap codes to custom labels.
    """
    # --- positional errors (211xx) ---
    MISSING_PARAMETER_VALUE     = 21101
    UNRECOGNIZED_PARAMETERS     = 21102

    # --- option errors (211xx) ---
    MISSING_REQUIRED_OPTIONS    = 21111
    UNRECOGNIZED_OPTIONS        = 21112

    # --- collaborator errors (211xx) ---
    ACTIVATION_FAILURE          = 21131
    UNCASTABLE_VALUE            = 21132

    # --- warnings (22xxx) ---
    DEPRECATED_ARGUMENT         = 22112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host can provide a __codes__ mapping in __main__ to override numeric
        ids with friendlier labels; otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    """
    resolve the program name shown in fault headers.
    """
    main = __import__("__main__")
    if prog := getattr(main, "__prog__", None):
        return prog
    if name := getattr(options.get("schema"), "name", None):
        return name
    return os.path.basename(sys.argv[0]) or "argbind"


def _render(fault, palette, kind):
    """
    shared rich rendering for exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the plain message (explanation + bullets)
    - hint: " → hint" when a hint is available
    - fancy: wrap everything in a Panel titled with the header
    """
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(options), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(str(options.get("title", kind)).title(), kind + "-title"),
        " ]"
    )
    renderables = [text(fault.message, kind + "-message")]
    if hint := options.get("hint"):
        renderables.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if options.get("fancy", False):
        return Panel(Group(*renderables), title=header, title_align="left")
    return Group(header, *renderables)


class _Fault:
    """
    Payload shared by exceptions and warnings.

    - message: the plain, multi-line diagnostic (also what str() returns).
    - options: read-only mapping of rendering/context options
      (title, code, hint, items, schema, shell, fancy, colorful, ...).
    - items: the offending values/names listed in the message, in order.
    """
    __kind__ = "error"
    __palette__ = {}

    def __init__(self, message="", /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def items(self):
        return tuple(self.options.get("items", ()))

    def __rich__(self):
        return _render(self, self.__palette__, self.__kind__)

    def __replace__(self, /, **overrides):
        replaced = type(self)(self.message, **(self.options | overrides))
        replaced.__cause__ = self.__cause__
        return replaced


class CommandException(_Fault, Exception):
    """
    Base class of every binding fault.

    exit_code is the process status used when the fault ends a shell run.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "error-message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }
    exit_code = 1

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(self.exit_code)


class MissingParameterValueError(CommandException): ...
class UnrecognizedParametersError(CommandException): ...
class MissingRequiredOptionsError(CommandException): ...
class UnrecognizedOptionsError(CommandException): ...
class ActivationError(CommandException): ...
class UncastableValueError(CommandException): ...


class CommandWarning(_Fault, ABC, Warning):
    """
    Base class of non-fatal notices.
    """
    __kind__ = "warning"
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "warning-title": "bold #FFC2E0",
        "warning-message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
        else:
            warnings.warn(self, stacklevel=len(inspect.stack()))


class DeprecatedArgumentWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    Surface a fault with the given runtime options.

    - options are merged into a copy of the fault (copy.replace) before triggering.
    - exceptions are raised when shell is false; otherwise they are printed to
      stderr and end the process with SystemExit(exit_code).
    - warnings go through warnings.warn when shell is false and are printed otherwise.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must be a command exception or warning")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; when no entry exists, None is returned.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "MissingParameterValueError",
    "UnrecognizedParametersError",
    "MissingRequiredOptionsError",
    "UnrecognizedOptionsError",
    "ActivationError",
    "UncastableValueError",
    "CommandWarning",
    "DeprecatedArgumentWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
