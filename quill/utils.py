"""
Quill utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the type system, the registry and the
  interpreter so that naming, sentinels and read-only views behave the same
  everywhere.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided" without conflating with None.
- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.
- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.
- mirror("attr")
  • Read-only property exposing self._attr through a fresh container copy.
- pluralize(text) / ordinal(number)
  • Wording helpers for fault messages ("2 arguments", "third position").
- normalize(name)
  • Canonical spelling of option names ("My_Opt" → "my-opt").

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> normalize("line_width")
    'line-width'
    >>> ordinal(3), ordinal(12)
    ('third', '12th')
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are returned as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator

    Raises
    - TypeError: on a non-callable target, a non-string name, a callable whose
      metadata cannot be updated, or a wrong number of arguments.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers cannot mutate internal state.

    Behavior
    - strings and named tuples (segments, rows) are returned untouched.
    - tuples stay tuples, other sequences become lists.
    - mappings become dicts (keys preserved, values processed).
    - sets become sets.
    """
    if isinstance(object, str | bytes) or hasattr(object, "_fields"):
        return object
    elif isinstance(object, tuple):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Sequence):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Container values are copied on every access (see _immortalize).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


_IRREGULARS = {
    "child": "children",
    "person": "people",
    "index": "indices",
    "matrix": "matrices",
}

_UNCOUNTABLES = frozenset(("information", "data", "series", "metadata"))


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for fault messages and help labels.

    Only the last word of a phrase is pluralized; simple casing is preserved.

    Examples
    - pluralize("argument")        -> "arguments"
    - pluralize("command option")  -> "command options"
    - pluralize("entry")           -> "entries"
    - pluralize("data")            -> "data"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    match = re.search(r"([^\W\d_]+)(\W*)$", text)
    if not match:
        return text

    head, word, tail = text[:match.start()], match[1], match[2]
    lower = word.lower()

    if lower in _UNCOUNTABLES:
        plural = lower
    elif lower in _IRREGULARS:
        plural = _IRREGULARS[lower]
    elif re.search(r"(s|sh|ch|x|z)$", lower):
        plural = lower + "es"
    elif re.search(r"[^aeiou]y$", lower):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper() and len(word) > 1:
        plural = plural.upper()
    elif word[:1].isupper():
        plural = plural.capitalize()

    return head + plural + tail


def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals ("11th", "22nd", "103rd").
    """
    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1] if number > 0 else str(number)
    except IndexError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def normalize(name, /):
    """
    Canonical spelling of a command or option name.

    Underscores and hyphens are equivalent and the comparison ignores case:
    "Line_Width", "line-width" and "LINE-WIDTH" all become "line-width".
    """
    if not isinstance(name, str):
        raise TypeError("normalize() argument must be a string")
    return name.strip().replace("_", "-").lower()


__all__ = (
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "ordinal",
    "normalize",
)
