"""
Quill faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while converting values, lexing scripts, expanding variables,
  dispatching commands or nesting interpreters.
- QuillException / QuillWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting
  shell/deferred/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Recoverability
- every error class states whether it is recoverable. recoverable faults
  (bad values, unknown commands/options, cycles, wrong counts, failing
  callbacks) concern a single invocation: the interpreter records them and
  moves on to the next command. structural faults (unterminated strings,
  malformed script lines, runaway nesting, clashing registrations) abort the
  enclosing run.

UX goals
- Location-first messages: faults raised inside the interpreter are completed
  with a "location" option ("file 'plot.qs', line 3" or "command-line option 2").
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
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
    canonical fault codes used across quill (stable identifiers).

    grouping (by domain)
    - types (2010x)
      • INVALID_VALUE, UNKNOWN_TYPE, DUPLICATE_TYPE
    - lexer and script parser (2020x)
      • UNTERMINATED_STRING, PARSER_SYNTAX, UNEXPECTED_CHARACTER
    - variables and functions (2030x)
      • RECURSIVE_EXPANSION, ARGUMENT_COUNT_MISMATCH, DUPLICATE_FUNCTION
    - commands and registry (2040x)
      • ARGUMENT_NUMBER_MISMATCH, UNKNOWN_OPTION, UNKNOWN_COMMAND,
        DUPLICATE_COMMAND, DUPLICATE_GROUP, INVALID_NAME, OPTION_REDEFINED,
        UNKNOWN_GROUP
    - interpreter (2050x)
      • RECURSION_DEPTH, DELEGATED_ERROR
    - warnings (2110x)
      • DEPRECATED_OPTION, IGNORED_OPTION

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- type errors (201xx) ---
    INVALID_VALUE               = 20101
    UNKNOWN_TYPE                = 20102
    DUPLICATE_TYPE              = 20103

    # --- lexer / parser errors (202xx) ---
    UNTERMINATED_STRING         = 20201
    PARSER_SYNTAX               = 20202
    UNEXPECTED_CHARACTER        = 20203

    # --- variable / function errors (203xx) ---
    RECURSIVE_EXPANSION         = 20301
    ARGUMENT_COUNT_MISMATCH     = 20302
    DUPLICATE_FUNCTION          = 20303

    # --- command / registry errors (204xx) ---
    ARGUMENT_NUMBER_MISMATCH    = 20401
    UNKNOWN_OPTION              = 20402
    UNKNOWN_COMMAND             = 20403
    DUPLICATE_COMMAND           = 20404
    DUPLICATE_GROUP             = 20405
    INVALID_NAME                = 20406
    OPTION_REDEFINED            = 20407
    UNKNOWN_GROUP               = 20408

    # --- interpreter errors (205xx) ---
    RECURSION_DEPTH             = 20501
    DELEGATED_ERROR             = 20502

    # --- warnings (211xx) ---
    DEPRECATED_OPTION           = 21101
    IGNORED_OPTION              = 21102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_ERROR_STYLES = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "title": "bold #FF4DA6",
    "location": "#8A8FA3",
    "message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}

_WARNING_STYLES = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #FFB400",
    "title": "bold #FFC2E0",
    "location": "#8A8FA3",
    "message": "#D6D6DE",
    "hint-arrow": "#B8EFAF dim",
    "hint": "italic #B8EFAF",
}


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: [ prog — code | Title ]
    - optional location line (file/line or option number)
    - message
    - → hint
    fancy mode wraps message and hint in a Panel titled with the header.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    code = options.get("code", type(fault).code)
    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", options.get("prog", "quill")), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]",
    )
    parts = []
    if location := options.get("location"):
        parts.append(text("at %s" % location, "location"))
    parts.append(text(fault.message or "", "message"))
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*parts), title=header, title_align="left", width=width)

    return Group(header, *parts)


class QuillException(Exception):
    """
    base class of every quill error.

    construction
    - QuillException(message, **options): options are frozen into a read-only
      mapping. common keys: title, code, hint, docs, location, plus the
      runtime flags shell, fancy, colorful and deferred.

    class keywords
    - code: default FaultCode for the subclass.
    - recoverable: whether the interpreter may continue with the next
      invocation after recording the fault.
    """
    code = Unset
    recoverable = False

    def __init_subclass__(cls, /, code=Unset, recoverable=Unset, **options):
        super().__init_subclass__(**options)
        if code is not Unset:
            cls.code = code
        if recoverable is not Unset:
            cls.recoverable = bool(recoverable)

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        if location := self.options.get("location"):
            return "%s (at %s)" % (self.message or "", location)
        return self.message or ""

    def __rich__(self):
        return _render(self, _ERROR_STYLES)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class InvalidValueError(QuillException, code=FaultCode.INVALID_VALUE, recoverable=True): ...
class UnknownTypeError(QuillException, code=FaultCode.UNKNOWN_TYPE): ...
class DuplicateTypeError(QuillException, code=FaultCode.DUPLICATE_TYPE): ...
class UnterminatedStringError(QuillException, code=FaultCode.UNTERMINATED_STRING): ...
class ParserSyntaxError(QuillException, code=FaultCode.PARSER_SYNTAX): ...
class UnexpectedCharacterError(ParserSyntaxError, code=FaultCode.UNEXPECTED_CHARACTER): ...
class RecursiveExpansionError(QuillException, code=FaultCode.RECURSIVE_EXPANSION, recoverable=True): ...
class ArgumentCountMismatchError(QuillException, code=FaultCode.ARGUMENT_COUNT_MISMATCH, recoverable=True): ...
class DuplicateFunctionError(QuillException, code=FaultCode.DUPLICATE_FUNCTION): ...
class ArgumentNumberMismatchError(QuillException, code=FaultCode.ARGUMENT_NUMBER_MISMATCH, recoverable=True): ...
class UnknownOptionError(QuillException, code=FaultCode.UNKNOWN_OPTION, recoverable=True): ...
class UnknownCommandError(QuillException, code=FaultCode.UNKNOWN_COMMAND, recoverable=True): ...
class DuplicateCommandError(QuillException, code=FaultCode.DUPLICATE_COMMAND): ...
class DuplicateGroupError(QuillException, code=FaultCode.DUPLICATE_GROUP): ...
class InvalidNameError(QuillException, code=FaultCode.INVALID_NAME): ...
class OptionRedefinedError(QuillException, code=FaultCode.OPTION_REDEFINED): ...
class UnknownGroupError(QuillException, code=FaultCode.UNKNOWN_GROUP): ...
class RecursionDepthError(QuillException, code=FaultCode.RECURSION_DEPTH): ...
class DelegatedCommandError(QuillException, code=FaultCode.DELEGATED_ERROR, recoverable=True): ...


class QuillWarning(Warning):
    """
    base class of every quill warning.

    warnings never interrupt processing: in shell mode they are printed on the
    stderr console, otherwise they go through the warnings module.
    """
    code = Unset

    def __init_subclass__(cls, /, code=Unset, **options):
        super().__init_subclass__(**options)
        if code is not Unset:
            cls.code = code

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    def __rich__(self):
        return _render(self, _WARNING_STYLES)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedOptionWarning(QuillWarning, code=FaultCode.DEPRECATED_OPTION): ...
class IgnoredOptionWarning(QuillWarning, code=FaultCode.IGNORED_OPTION): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors
      are raised and warnings go through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode. returns None when nothing is documented.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "QuillException",
    "InvalidValueError",
    "UnknownTypeError",
    "DuplicateTypeError",
    "UnterminatedStringError",
    "ParserSyntaxError",
    "UnexpectedCharacterError",
    "RecursiveExpansionError",
    "ArgumentCountMismatchError",
    "DuplicateFunctionError",
    "ArgumentNumberMismatchError",
    "UnknownOptionError",
    "UnknownCommandError",
    "DuplicateCommandError",
    "DuplicateGroupError",
    "InvalidNameError",
    "OptionRedefinedError",
    "UnknownGroupError",
    "RecursionDepthError",
    "DelegatedCommandError",
    "QuillWarning",
    "DeprecatedOptionWarning",
    "IgnoredOptionWarning",
    "trigger",
    "getdoc",
)
