"""
Quill command arguments.

Overview
- Argument
  • A typed slot of a command: a compulsory positional argument or a named
    option. The type is a quill.valuetypes.Type, or the name of a registered
    type resolved when the command is registered.
  • display name (defaults to the type name) and description for help.
  • deprecated: False, True, or an explanation shown in the warning.
  • target: for option aliases, the name of the real option the value is
    stored under.

Metadata (sanitized on construction)
- type: Type | str (non-empty).
- name: Unset | str, used in help and messages.
- descr: Unset | str (short help), non-empty when provided.
- deprecated: bool | str.
- target: Unset | str.

Quick example:
    >>> from quill.arguments import Argument
    >>> Argument("float", "width", "line width in points")
    argument(type='float', name='width', descr='line width in points', deprecated=False, target=None)
"""
import builtins

from .internals import ModelType, sanitize_name, sanitize_text
from .utils import Unset, coalesce, normalize
from .valuetypes import Type


class Argument(metaclass=ModelType, sealed=True):
    """
    a typed command argument or option value.
    """
    __introspectable__ = (
        "type",
        "name",
        "descr",
        "deprecated",
        "target",
    )
    __displayable__ = (
        "typename",
        "name",
        "descr",
        "deprecated",
        "target",
    )

    def __init__(self, type, /, name=Unset, descr=Unset, *, deprecated=False, target=Unset):
        cls = builtins.type(self)
        if isinstance(type, str):
            type = sanitize_name(cls, type, "type", pattern=None)
        elif not isinstance(type, Type):
            raise TypeError(f"{cls.__typename__} 'type' must be a value type or a type name")
        self._type = type

        if name is not Unset:
            name = sanitize_name(cls, name, pattern=None)
        self._name = coalesce(name, self.typename)

        self._descr = sanitize_text(cls, descr)

        if not isinstance(deprecated, bool | str):
            raise TypeError(f"{cls.__typename__} 'deprecated' must be a boolean or an explanation")
        self._deprecated = (deprecated.strip() or True) if isinstance(deprecated, str) else deprecated

        if target is not Unset:
            target = normalize(sanitize_name(cls, target, "target", pattern=None))
        self._target = coalesce(target)

    @property
    def typename(self):
        return self._type if isinstance(self._type, str) else self._type.name

    @property
    def resolved(self):
        """
        True once the type is a Type object rather than a name.
        """
        return isinstance(self._type, Type)

    def resolve(self, lookup, /):
        """
        return a copy whose type name was resolved through lookup(name) -> Type.
        """
        if self.resolved:
            return self
        return self.replace(type=lookup(self._type))

    def replace(self, **overrides):
        """
        copy with some fields replaced.
        """
        fields = {
            "name": self._name,
            "descr": Unset if self._descr is None else self._descr,
            "deprecated": self._deprecated,
            "target": Unset if self._target is None else self._target,
        } | overrides
        return Argument(fields.pop("type", self._type), **fields)

    def convert(self, value, /):
        """
        convert script text with the argument's type; non-strings pass through.
        """
        if not isinstance(value, str):
            return value
        if not self.resolved:
            raise RuntimeError(f"argument type {self._type!r} was never resolved")
        return self._type.string_to_type(value)

    @property
    def boolean(self):
        return self.resolved and self._type.boolean


__all__ = (
    "Argument",
)
