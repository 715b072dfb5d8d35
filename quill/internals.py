"""
internal plumbing shared by quill's declarative objects.

scope
- ModelType: the metaclass behind Type, Argument, Command, Group, Function and
  Instruction. it gives every model the same introspection surface so faults,
  help tables and the rich pretty-printer can display them uniformly.
- sanitize_name / sanitize_text: the validation rules every model applies to
  its identifying name and its descriptions.

conventions
- __typename__ is derived from the class name (camel case split with hyphens)
  and used in messages ("command-group 'name' must be a string").
- __introspectable__ lists the fields exposed as read-only properties; each
  one is backed by a private "_{name}" attribute (see utils.mirror).
- __displayable__ (optional) narrows what __repr__/__rich_repr__ show.
"""
import functools
import operator
import re

from rich.text import Text

from .utils import Unset, coalesce, mirror, rename

NAME_PATTERN = re.compile(r"[a-z0-9-]+")


class ModelType(type):
    """
    metaclass that turns plain classes into introspectable, read-only models.

    responsibilities
    - publish a read-only property for every name in __introspectable__.
    - provide stable __repr__/__rich_repr__ implementations.
    - seal classes declared with sealed=True against subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            concise representation with the displayable fields.

            example
            - command(name='print', short=None, long='print', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def sanitize_name(cls, name, /, field="name", pattern=NAME_PATTERN):
    """
    validate an identifying name and return it trimmed.

    raises
    - TypeError: when the name is not a string.
    - ValueError: when it is empty or does not match the pattern
      (lowercase letters, digits and hyphens by default).
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    elif pattern is not None and not pattern.fullmatch(name):
        raise ValueError(f"{cls.__typename__} {field!r} must match {pattern.pattern!r}, got {name!r}")
    return name


def sanitize_text(cls, text, /, field="descr"):
    """
    validate an optional description; Unset becomes None.
    """
    if not isinstance(text, str | Text | Unset | None):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif isinstance(text, str) and not (text := text.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return coalesce(text)


__all__ = (
    "ModelType",
    "sanitize_name",
    "sanitize_text",
)
