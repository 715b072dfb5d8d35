r"""
Quill commands: named, typed operations dispatched by the interpreter.

Overview
- Command
  • name: registry key (lowercase letters, digits and hyphens).
  • short / long: optional command-line spellings ("-x" / "--xy"); leading
    dashes are stripped and a short spelling requires a long one.
  • arguments: ordered compulsory Arguments.
  • options: {name: Argument} optional named values; names are normalized
    so "line_width", "Line-Width" and "line-width" are the same option.
  • callback(target, *arguments[, options]): the work itself. The options
    mapping is passed only when the command declares options (empty when
    none were given).
  • short/long descriptions and the owning group (see describe()).

Conversion
- convert_arguments(raw): exact count (ArgumentNumberMismatchError), texts
  converted through each argument type, other values passed through. A
  command without arguments also accepts the command-line sentinel [True].
- convert_options(raw): unknown names raise UnknownOptionError (with close
  matches as hint), deprecated names warn (DeprecatedOptionWarning) and alias
  options are stored under their target name.

Quick example:
    >>> from quill.commands import Command
    >>> from quill.arguments import Argument
    >>> def width(session, value, options): ...
    >>> Command("line-width", "w", "line-width", [Argument("float")],
    ...         {"unit": Argument("string")}, callback=width)
"""
import difflib
from collections.abc import Mapping, Sequence

from .arguments import Argument
from .faults import (
    ArgumentNumberMismatchError,
    InvalidValueError,
    UnknownOptionError,
    DeprecatedOptionWarning,
    FaultCode,
    getdoc,
    trigger as _trigger,
)
from .groups import Group
from .internals import ModelType, sanitize_name, sanitize_text
from .utils import Unset, normalize, ordinal, pluralize


def _sanitize_flag(cls, flag, field, dashes, /):
    """
    strip the leading dashes of a command-line spelling; Unset/None stay None.
    """
    if flag is Unset or flag is None:
        return None
    if not isinstance(flag, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    flag = flag.strip()
    if flag.startswith(dashes):
        flag = flag[len(dashes):]
    elif dashes == "--" and flag.startswith("-"):
        flag = flag[1:]
    if not flag or flag.startswith("-") or any(character.isspace() for character in flag):
        raise ValueError(f"{cls.__typename__} {field!r} is not a valid command-line spelling")
    if dashes == "-" and len(flag) != 1:
        raise ValueError(f"{cls.__typename__} {field!r} must be a single character")
    return flag


def _sanitize_arguments(cls, arguments, /):
    if isinstance(arguments, Argument | str) or not isinstance(arguments, Sequence):
        raise TypeError(f"{cls.__typename__} 'arguments' must be a sequence of arguments")
    sanitized = []
    for argument in arguments:
        if isinstance(argument, str):
            argument = Argument(argument)
        elif not isinstance(argument, Argument):
            raise TypeError(f"{cls.__typename__} 'arguments' must only contain arguments or type names")
        sanitized.append(argument)
    return sanitized


def _sanitize_options(cls, options, /):
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise TypeError(f"{cls.__typename__} 'options' must be a mapping of names to arguments")
    sanitized = {}
    for name, argument in options.items():
        key = normalize(sanitize_name(cls, name, "option name", pattern=None))
        if isinstance(argument, str):
            argument = Argument(argument, name)
        elif not isinstance(argument, Argument):
            raise TypeError(f"{cls.__typename__} option {name!r} must be an argument or a type name")
        if key in sanitized:
            raise ValueError(f"{cls.__typename__} option {name!r} is declared twice")
        sanitized[key] = argument
    return sanitized


class Command(metaclass=ModelType, sealed=True):
    """
    a command callable from scripts and from the command line.

    Properties
    - the names listed in __introspectable__ are read-only views of the
      sanitized metadata; arguments/options are returned as copies.
    """
    __introspectable__ = (
        "name",
        "short",
        "long",
        "arguments",
        "options",
        "short_descr",
        "long_descr",
        "group",
    )
    __displayable__ = (
        "name",
        "short",
        "long",
        "arguments",
        "options",
    )

    def __init__(
            self,
            name,
            /,
            short=Unset,
            long=Unset,
            arguments=(),
            options=None,
            short_descr=Unset,
            long_descr=Unset,
            group=Unset,
            *,
            callback=Unset,
    ):
        cls = type(self)
        self._name = sanitize_name(cls, name)
        self._short = _sanitize_flag(cls, short, "short", "-")
        self._long = _sanitize_flag(cls, long, "long", "--")
        if self._short and not self._long:
            raise ValueError(f"{cls.__typename__} {self._name!r} has a short spelling but no long one")
        self._arguments = _sanitize_arguments(cls, arguments)
        self._options = _sanitize_options(cls, options)
        self._callback = None
        self._short_descr = self._long_descr = self._group = None
        self.describe(short_descr, long_descr, group)
        if callback is not Unset:
            self.bind(callback)

    @property
    def callback(self):
        return self._callback

    @property
    def argument_number(self):
        return len(self._arguments)

    @property
    def boolean(self):
        """
        True for commands taking exactly one boolean argument (--x / --no-x).
        """
        return len(self._arguments) == 1 and self._arguments[0].boolean

    @property
    def has_options(self):
        return bool(self._options)

    def has_option(self, name, /):
        return normalize(name) in self._options

    def is_boolean_option(self, name, /):
        argument = self._options.get(normalize(name))
        return argument is not None and argument.boolean

    def bind(self, callback, /):
        """
        set the callback; returns the callback so it can be used as a decorator.
        """
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} callback must be callable")
        self._callback = callback
        return callback

    def describe(self, short=Unset, long=Unset, group=Unset, /):
        """
        set the short description, the long description and the group.

        the long description defaults to the short one; group is a Group or
        a group id resolved when the command is registered.
        """
        cls = type(self)
        if short is not Unset:
            self._short_descr = sanitize_text(cls, short, "short_descr")
        if long is not Unset:
            self._long_descr = sanitize_text(cls, long, "long_descr")
        elif short is not Unset and self._long_descr is None:
            self._long_descr = self._short_descr
        if group is not Unset and group is not None:
            if isinstance(group, str):
                group = sanitize_name(cls, group, "group")
            elif not isinstance(group, Group):
                raise TypeError(f"{cls.__typename__} 'group' must be a group or a group id")
            if isinstance(self._group, Group):
                self._group.detach(self)
            self._group = group
            if isinstance(group, Group):
                group.attach(self)
        return self

    def copy(self, groups=None, /):
        """
        independent copy: options added or descriptions changed on one side
        do not show on the other. arguments and the callback are shared.

        groups(id) -> Group, when given, attaches the copy to that group
        instead of the original one.
        """
        group = self._group
        if groups is not None and isinstance(group, Group):
            group = groups(group.id)
        return type(self)(
            self._name,
            self._short,
            self._long,
            list(self._arguments),
            dict(self._options),
            self._short_descr,
            self._long_descr,
            Unset if group is None else group,
            callback=Unset if self._callback is None else self._callback,
        )

    def resolve(self, types, groups, /):
        """
        resolve type names and the group id through the registry lookups
        types(name) -> Type and groups(id) -> Group.
        """
        self._arguments = [argument.resolve(types) for argument in self._arguments]
        self._options = {name: argument.resolve(types) for name, argument in self._options.items()}
        if isinstance(self._group, str):
            group, self._group = self._group, None
            self.describe(Unset, Unset, groups(group))

    def add_option(self, name, argument, /):
        key = normalize(sanitize_name(type(self), name, "option name", pattern=None))
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} option {name!r} must be an argument")
        if key in self._options:
            raise ValueError(f"{type(self).__typename__} option {name!r} is declared twice")
        self._options[key] = argument

    def convert_arguments(self, raw, /):
        """
        convert compulsory argument values.

        raises
        - ArgumentNumberMismatchError: count differs from the declaration
          (except the [True] sentinel for commands without arguments).
        - InvalidValueError: a text the argument type rejects.
        """
        raw = list(raw)
        if len(raw) != len(self._arguments):
            if not self._arguments and len(raw) == 1 and raw[0] is True:
                return []
            expected = len(self._arguments)
            raise ArgumentNumberMismatchError(
                "command %r takes %d %s but %d %s given" % (
                    self._name,
                    expected,
                    "argument" if expected == 1 else pluralize("argument"),
                    len(raw),
                    "was" if len(raw) == 1 else "were",
                ),
                title="wrong number of arguments",
                code=FaultCode.ARGUMENT_NUMBER_MISMATCH,
                hint="usage: %s" % self.usage(),
                command=self._name,
                expected=expected,
                given=len(raw),
                docs=getdoc(FaultCode.ARGUMENT_NUMBER_MISMATCH),
            )
        converted = []
        for position, (argument, value) in enumerate(zip(self._arguments, raw), 1):
            try:
                converted.append(argument.convert(value))
            except InvalidValueError as fault:
                raise InvalidValueError(
                    "%s argument of %r: %s" % (ordinal(position), self._name, fault.message),
                    **{**fault.options, "command": self._name, "position": position},
                ) from fault
        return converted

    def convert_options(self, raw, /, trigger=_trigger):
        """
        convert option values; returns {target option name: value}.

        parameters
        - raw: mapping or iterable of (name, value) pairs.
        - trigger: how deprecation warnings are surfaced (the interpreter
          passes its own to respect shell mode).

        raises
        - UnknownOptionError: a name that is not declared (in any spelling).
        - InvalidValueError: a text the option type rejects.
        """
        converted = {}
        for name, value in (raw.items() if isinstance(raw, Mapping) else raw):
            key = normalize(name)
            try:
                argument = self._options[key]
            except KeyError:
                suggestions = difflib.get_close_matches(key, self._options.keys(), 3)
                if suggestions:
                    hint = "did you mean %r?" % suggestions[0]
                elif self._options:
                    hint = "valid options are " + ", ".join(sorted(self._options))
                else:
                    hint = "command %r takes no options" % self._name
                raise UnknownOptionError(
                    "unknown option %r for command %r" % (name, self._name),
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    hint=hint,
                    command=self._name,
                    option=name,
                    suggestions=suggestions,
                    docs=getdoc(FaultCode.UNKNOWN_OPTION),
                ) from None

            if argument.deprecated:
                if argument.target:
                    explanation = "please use %r instead" % argument.target
                elif isinstance(argument.deprecated, str):
                    explanation = argument.deprecated
                else:
                    explanation = "it will be removed in a future version"
                trigger(DeprecatedOptionWarning(
                    "option %r of command %r is deprecated" % (name, self._name),
                    title="deprecated option",
                    code=FaultCode.DEPRECATED_OPTION,
                    hint=explanation,
                    command=self._name,
                    option=name,
                    docs=getdoc(FaultCode.DEPRECATED_OPTION),
                ))

            converted[argument.target or key] = argument.convert(value)
        return converted

    def run(self, target, arguments=(), options=None, /):
        """
        call the callback with already converted values.
        """
        if self._callback is None:
            raise RuntimeError(f"command {self._name!r} has no callback")
        if self._options:
            return self._callback(target, *arguments, dict(options or {}))
        return self._callback(target, *arguments)

    def option_strings(self):
        """
        command-line spellings for help ("-w, --line-width", "--[no-]grid").
        """
        strings = []
        if self._short:
            strings.append("-" + self._short)
        if self._long:
            strings.append(("--[no-]%s" if self.boolean else "--%s") % self._long)
        return ", ".join(strings)

    def usage(self):
        """
        one-line script usage ("line-width FLOAT /unit=STRING").
        """
        words = [self._name]
        words.extend(argument.name.upper() for argument in self._arguments)
        words.extend("/%s=%s" % (name, argument.name.upper()) for name, argument in self._options.items())
        return " ".join(words)


def make_alias_for_option(command, option, alias, /, deprecated=False):
    """
    declare alias as another spelling of command's option.

    values given through the alias are stored under the original option
    name; a deprecated alias warns and points to the original.
    """
    key = normalize(option)
    try:
        argument = command._options[key]
    except KeyError:
        raise UnknownOptionError(
            "unknown option %r for command %r" % (option, command.name),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="declare the option before aliasing it",
            command=command.name,
            option=option,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ) from None
    command.add_option(alias, argument.replace(target=key, deprecated=deprecated))
    return command


__all__ = (
    "Command",
    "make_alias_for_option",
)
