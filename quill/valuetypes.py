r"""
Quill value types: named, reusable conversions between script text and values.

Overview
- Type
  • A named conversion rule built from a *spec*: either a kind tag
    ("integer", "float", "boolean", "string", "date", ...) or a mapping such as
    {"type": "array", "subtype": "float", "separator": r"\s*,\s*"}.
  • string_to_type(text) converts script text; type_to_string(value) is the
    best-effort inverse used for documentation and debugging.
- Converters
  • One class per kind, registered by tag through ``class X(Converter, kind="...")``.
  • Every converter honours the shared spec keys:
      passthrough  regex: matching texts are returned unchanged
      shortcuts    {text: value} exact substitutions ({"none": False})
      re_shortcuts {regex: value} substitutions, tried in order

Conversion order
    passthrough → shortcuts → re_shortcuts → kind-specific conversion

Failures raise InvalidValueError (recoverable: the interpreter records it
against the offending invocation). Unknown kinds raise UnknownTypeError.

Quick example:
    >>> from quill.valuetypes import Type
    >>> widths = Type("widths", {"type": "array", "subtype": "float"})
    >>> widths.string_to_type("1, 2.5,3")
    [1.0, 2.5, 3.0]
    >>> widths.type_to_string([1.0, 2.5])
    '1.0,2.5'
"""
import datetime
import re
from collections.abc import Mapping, Sequence

from .faults import InvalidValueError, UnknownTypeError, FaultCode, getdoc
from .internals import ModelType, sanitize_name, sanitize_text
from .utils import Unset

TRUE_RE = re.compile(r"^\s*(true|yes|on)\s*$", re.IGNORECASE)
FALSE_RE = re.compile(r"^\s*(false|no(ne)?|off)\s*$", re.IGNORECASE)

_kinds = {}


def _compile(pattern, /):
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


class Converter:
    """
    base converter: shortcut handling plus the kind-specific hooks.

    subclasses implement convert(text) and, when str() is not the right
    inverse, render(value). ``expected`` feeds the hint of InvalidValueError.
    """
    kind = Unset
    expected = "a value"
    boolean = False

    def __init_subclass__(cls, /, kind=Unset, **options):
        super().__init_subclass__(**options)
        if kind is not Unset:
            cls.kind = kind
            _kinds[kind] = cls

    def __init__(self, spec, /, resolve=None):
        self.spec = spec
        self.passthrough = _compile(spec.get("passthrough"))
        self.shortcuts = dict(spec.get("shortcuts", {}))
        self.re_shortcuts = [(_compile(pattern), value) for pattern, value in spec.get("re_shortcuts", {}).items()]

    def __call__(self, text, /):
        if self.passthrough is not None and self.passthrough.search(text):
            return text
        if text in self.shortcuts:
            return self.shortcuts[text]
        for pattern, value in self.re_shortcuts:
            if pattern.search(text):
                return value
        return self.convert(text)

    def convert(self, text, /):
        raise NotImplementedError

    def render(self, value, /):
        for shortcut, replacement in self.shortcuts.items():
            if replacement is value or (type(replacement) is type(value) and replacement == value):
                return shortcut
        return str(value)

    def fail(self, text, /, reason=Unset):
        """
        raise InvalidValueError for a text this converter rejects.
        """
        raise InvalidValueError(
            "invalid %s value %r%s" % (self.kind, text, ": " + reason if reason else ""),
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            hint="expected %s" % self.expected,
            value=text,
            kind=self.kind,
            docs=getdoc(FaultCode.INVALID_VALUE),
        )


class IntegerConverter(Converter, kind="integer"):
    expected = "an integer (for example: 42 or 0x2a)"

    def convert(self, text, /):
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return int(text.strip(), 0)
        except ValueError:
            self.fail(text)


class FloatConverter(Converter, kind="float"):
    expected = "a number (for example: 2.5 or 1e-3)"

    def convert(self, text, /):
        try:
            return float(text)
        except ValueError:
            self.fail(text)

    def render(self, value, /):
        if value is False or value is None:
            return super().render(value)
        return repr(float(value))


class BooleanConverter(Converter, kind="boolean"):
    expected = "one of true, yes, on, false, no, none or off"
    boolean = True

    def convert(self, text, /):
        if TRUE_RE.match(text):
            return True
        if FALSE_RE.match(text):
            return False
        self.fail(text)

    def render(self, value, /):
        return "true" if value else "false"


class StringConverter(Converter, kind="string"):
    expected = "any text"

    def convert(self, text, /):
        return text


class FileConverter(StringConverter, kind="file"):
    expected = "a file name"


class DateConverter(Converter, kind="date"):
    expected = "an ISO 8601 date or date-time (for example: 2024-03-01 or 2024-03-01T12:30)"

    def convert(self, text, /):
        try:
            return datetime.datetime.fromisoformat(text.strip())
        except ValueError:
            self.fail(text)

    def render(self, value, /):
        return value.isoformat()


class ListConverter(Converter, kind="list"):
    """
    one symbol among a fixed set.

    spec["list"] is either a mapping {symbol: description} or an iterable of
    symbols; the converted value is the symbol itself.
    """

    def __init__(self, spec, /, resolve=None):
        super().__init__(spec, resolve)
        try:
            self.choices = tuple(spec["list"])
        except KeyError:
            raise TypeError("list value types require a 'list' key") from None
        self.expected = "one of " + ", ".join(map(str, self.choices))

    def convert(self, text, /):
        if text in self.choices:
            return text
        self.fail(text)


class RegexpListConverter(Converter, kind="re_list"):
    """
    pattern dispatch: spec["list"] maps regular expressions to values.

    patterns are tried in declaration order; the first one that matches
    anywhere in the text wins.
    """

    def __init__(self, spec, /, resolve=None):
        super().__init__(spec, resolve)
        try:
            self.patterns = [(_compile(pattern), value) for pattern, value in spec["list"].items()]
        except KeyError:
            raise TypeError("re_list value types require a 'list' key") from None
        self.expected = "text matching one of " + ", ".join(repr(pattern.pattern) for pattern, _ in self.patterns)

    def convert(self, text, /):
        for pattern, value in self.patterns:
            if pattern.search(text):
                return value
        self.fail(text)


class ArrayConverter(Converter, kind="array"):
    r"""
    homogeneous list of values of type ``subtype`` (string by default).

    spec keys
    - separator: regex splitting the text (default r"\s*,\s*")
    - separator_out: joiner used by render (default ",")
    - alternative_separator: regex used instead when it occurs in the text
    """
    default_separator = r"\s*,\s*"
    default_separator_out = ","

    def __init__(self, spec, /, resolve=None):
        super().__init__(spec, resolve)
        self.subtype = build(spec.get("subtype", "string"), resolve)
        self.separator = _compile(spec.get("separator", self.default_separator))
        self.separator_out = spec.get("separator_out", self.default_separator_out)
        self.alternative = _compile(spec.get("alternative_separator"))
        self.expected = "a list of %s separated by %r" % (self.subtype.kind, self.separator_out)

    def split(self, text, /):
        if not text.strip():
            return []
        if self.alternative is not None and self.alternative.search(text):
            return self.alternative.split(text.strip())
        return self.separator.split(text.strip())

    def convert(self, text, /):
        return [self.subtype(item) for item in self.split(text)]

    def render(self, value, /):
        if not isinstance(value, Sequence) or isinstance(value, str):
            return super().render(value)
        return self.separator_out.join(map(self.subtype.render, value))


class SetConverter(ArrayConverter, kind="set"):
    r"""
    array used for cyclic style sets ("red|blue|green").

    extras over array
    - a trailing "*N" repeats every element N times in place
      ("a|b*2" → [a, a, b, b]).
    - "gradient:START--END,N" interpolates N values between two converted
      endpoints (numbers, or sequences of numbers element by element).
    """
    default_separator = r"\s*\|\s*"
    default_separator_out = "|"

    def convert(self, text, /):
        multiply = None
        if match := re.fullmatch(r"(.*)\*\s*(\d+)\s*", text, re.DOTALL):
            text, multiply = match[1], int(match[2])

        if match := re.fullmatch(r"\s*gradient:(.+)--(.+),(\d+)\s*", text):
            values = self.gradient(self.subtype(match[1]), self.subtype(match[2]), int(match[3]))
        else:
            values = super().convert(text)

        if multiply:
            values = [value for value in values for _ in range(multiply)]
        return values

    def gradient(self, start, end, count, /):
        if count < 1:
            self.fail("gradient:...,%d" % count, reason="a gradient needs at least one step")
        factor = 1.0 / (count - 1) if count > 1 else 1.0

        def mix(a, b, f):
            if isinstance(a, Sequence) and isinstance(b, Sequence):
                return [mix(x, y, f) for x, y in zip(a, b)]
            try:
                return a * (1 - f) + b * f
            except TypeError:
                self.fail("gradient:%s--%s" % (a, b), reason="endpoints must be numeric")

        return [mix(start, end, index * factor) for index in range(count)]


class RegexpConverter(Converter, kind="regexp"):
    """
    plain text, or a compiled regular expression when written as /.../.
    """
    expected = "a text or a /regular expression/"

    def convert(self, text, /):
        if match := re.fullmatch(r"/(.*)/", text, re.DOTALL):
            try:
                return re.compile(match[1])
            except re.error as error:
                self.fail(text, reason=str(error))
        return text

    def render(self, value, /):
        if isinstance(value, re.Pattern):
            return "/%s/" % value.pattern
        return str(value)


class FloatRangeConverter(Converter, kind="float_range"):
    expected = "a range START:END of numbers (for example: 0:10)"
    pattern = re.compile(r"([^:]+):([^:]+)")

    def convert(self, text, /):
        if not (match := self.pattern.fullmatch(text.strip())):
            self.fail(text)
        try:
            return tuple(float(bound) if bound is not None else None for bound in match.groups())
        except ValueError:
            self.fail(text)

    def render(self, value, /):
        return ":".join("" if bound is None else repr(float(bound)) for bound in value)


class PartialFloatRangeConverter(FloatRangeConverter, kind="partial_float_range"):
    expected = "a range [START]:[END] of numbers (for example: 0: or :10)"
    pattern = re.compile(r"([^:]+)?:([^:]+)?")


class FunctionConverter(Converter, kind="function"):
    """
    arbitrary conversion: spec["function"] is called with the text.

    ValueError/TypeError raised by the function become InvalidValueError.
    """

    def __init__(self, spec, /, resolve=None):
        super().__init__(spec, resolve)
        try:
            self.function = spec["function"]
        except KeyError:
            raise TypeError("function value types require a 'function' key") from None
        if not callable(self.function):
            raise TypeError("function value types require a callable 'function'")
        self.expected = spec.get("expected", "a value accepted by %s" % getattr(self.function, "__name__", "the converter"))
        self.formatter = spec.get("render", str)

    def convert(self, text, /):
        try:
            return self.function(text)
        except (ValueError, TypeError) as error:
            self.fail(text, reason=str(error))

    def render(self, value, /):
        return self.formatter(value)


def build(spec, /, resolve=None):
    """
    build a converter from a kind tag, a spec mapping, or an existing Type.

    parameters
    - spec: str | Mapping | Type
    - resolve: optional callable(name) -> Type used to resolve registered type
      names (e.g. an array whose subtype is the registered "float-or-false").

    raises
    - UnknownTypeError: when the kind is neither a built-in kind nor a
      resolvable type name.
    """
    if isinstance(spec, Type):
        return spec.converter
    if isinstance(spec, str):
        if spec in _kinds:
            return _kinds[spec]({}, resolve)
        if resolve is not None:
            return resolve(spec).converter
        spec = {"type": spec}
    if not isinstance(spec, Mapping):
        raise TypeError("value type spec must be a kind name, a mapping or a type")
    kind = spec.get("type", "string")
    try:
        return _kinds[kind](spec, resolve)
    except KeyError:
        raise UnknownTypeError(
            "unknown value type kind %r" % kind,
            title="unknown type",
            code=FaultCode.UNKNOWN_TYPE,
            hint="use one of " + ", ".join(sorted(_kinds)),
            kind=kind,
            docs=getdoc(FaultCode.UNKNOWN_TYPE),
        ) from None


class Type(metaclass=ModelType, sealed=True):
    """
    a named value type.

    Properties
    - name: unique identifier within a registry (lowercase, digits, hyphens).
    - spec: the kind tag or mapping it was built from.
    - descr: optional documentation text.
    - converter: the Converter doing the work.
    - kind: the converter's kind tag.
    - boolean: True for boolean types (the command line treats them as flags).
    """
    __introspectable__ = (
        "name",
        "spec",
        "descr",
    )

    def __init__(self, name, spec="string", descr=Unset, /, resolve=None):
        self._name = sanitize_name(type(self), name)
        self._spec = spec
        self._descr = sanitize_text(type(self), descr)
        self._converter = build(spec, resolve)

    @property
    def converter(self):
        return self._converter

    @property
    def kind(self):
        return self._converter.kind

    @property
    def boolean(self):
        return self._converter.boolean

    @property
    def expected(self):
        return self._converter.expected

    def string_to_type(self, text, /):
        """
        convert script text into a value; non-strings are returned unchanged.
        """
        if not isinstance(text, str):
            return text
        return self._converter(text)

    def type_to_string(self, value, /):
        return self._converter.render(value)


def kinds():
    """
    sorted names of the built-in kinds.
    """
    return tuple(sorted(_kinds))


__all__ = (
    "Type",
    "Converter",
    "build",
    "kinds",
    "TRUE_RE",
    "FALSE_RE",
)
