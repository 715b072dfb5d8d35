"""
Quill registry: the explicit table of types, groups, commands and functions.

Scope
- A Registry is built once (see quill.builtins.register_builtins for the
  standard content), then handed to interpreters, which take a snapshot.
  Registering after that point does not affect running interpreters.
- Lookups are dictionary based; unknown names raise the matching fault
  (UnknownTypeError, UnknownGroupError, UnknownCommandError) with close
  matches as hint.
- Names are validated against ^[a-z0-9-]+$ (InvalidNameError) and may be
  registered only once (Duplicate*Error, the first registration stays).

Quick example:
    >>> registry = Registry()
    >>> registry.register_type("width", "float", "a line width")
    >>> @registry.command("line-width", arguments=["width"])
    ... def line_width(session, width):
    ...     session.width = width
"""
import difflib

from .commands import Command
from .faults import (
    DuplicateCommandError,
    DuplicateFunctionError,
    DuplicateGroupError,
    DuplicateTypeError,
    InvalidNameError,
    UnknownCommandError,
    UnknownGroupError,
    UnknownTypeError,
    FaultCode,
    getdoc,
)
from .functions import Function
from .groups import Group
from .internals import NAME_PATTERN
from .utils import Unset, rename
from .valuetypes import Type


def _suggest(name, candidates, /):
    suggestions = difflib.get_close_matches(name, candidates, 3)
    return suggestions, ("did you mean %r?" % suggestions[0]) if suggestions else None


class Registry:
    """
    holder of every registered type, group, command and function.
    """

    def __init__(self):
        self._types = {}
        self._groups = {}
        self._commands = {}
        self._functions = {}

    def _validate(self, kind, name, /):
        if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name):
            raise InvalidNameError(
                "invalid %s name %r" % (kind, name),
                title="invalid name",
                code=FaultCode.INVALID_NAME,
                hint="use lowercase letters, digits and hyphens only (for example: line-width)",
                name=name,
                docs=getdoc(FaultCode.INVALID_NAME),
            )

    # --- types ---

    def register_type(self, name, spec="string", descr=Unset, /):
        """
        create and register a Type; returns it.

        spec may name another registered type (e.g. an array of "float-or-false").
        """
        self._validate("type", name)
        return self.add_type(Type(name, spec, descr, resolve=self.get_type))

    def add_type(self, type, /):
        if not isinstance(type, Type):
            raise TypeError("add_type() argument must be a value type")
        self._validate("type", type.name)
        if (existing := self._types.get(type.name)) is not None:
            if existing is type:
                return type
            raise DuplicateTypeError(
                "type %r is already registered" % type.name,
                title="duplicate type",
                code=FaultCode.DUPLICATE_TYPE,
                hint="pick another name or reuse the registered type",
                name=type.name,
                docs=getdoc(FaultCode.DUPLICATE_TYPE),
            )
        self._types[type.name] = type
        return type

    def get_type(self, name, /):
        try:
            return self._types[name]
        except KeyError:
            suggestions, hint = _suggest(name, self._types)
            raise UnknownTypeError(
                "unknown type %r" % name,
                title="unknown type",
                code=FaultCode.UNKNOWN_TYPE,
                hint=hint or "register the type before the commands using it",
                name=name,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_TYPE),
            ) from None

    @property
    def types(self):
        return dict(self._types)

    # --- groups ---

    def register_group(self, id, /, name=Unset, descr=Unset, priority=0, blacklisted=False):
        """
        create and register a Group; returns it.
        """
        self._validate("group", id)
        return self.add_group(Group(id, name, descr, priority, blacklisted))

    def add_group(self, group, /):
        if not isinstance(group, Group):
            raise TypeError("add_group() argument must be a group")
        if group.id in self._groups:
            raise DuplicateGroupError(
                "group %r is already registered" % group.id,
                title="duplicate group",
                code=FaultCode.DUPLICATE_GROUP,
                hint="pick another id",
                name=group.id,
                docs=getdoc(FaultCode.DUPLICATE_GROUP),
            )
        self._groups[group.id] = group
        return group

    def get_group(self, id, /):
        try:
            return self._groups[id]
        except KeyError:
            suggestions, hint = _suggest(id, self._groups)
            raise UnknownGroupError(
                "unknown group %r" % id,
                title="unknown group",
                code=FaultCode.UNKNOWN_GROUP,
                hint=hint or "register the group before the commands using it",
                name=id,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_GROUP),
            ) from None

    @property
    def groups(self):
        return dict(self._groups)

    # --- commands ---

    def register_command(self, command, /):
        """
        register a Command; its type names and group id are resolved now.

        raises
        - InvalidNameError, DuplicateCommandError, UnknownTypeError, UnknownGroupError
        """
        if not isinstance(command, Command):
            raise TypeError("register_command() argument must be a command")
        self._validate("command", command.name)
        if command.name in self._commands:
            raise DuplicateCommandError(
                "command %r is already registered" % command.name,
                title="duplicate command",
                code=FaultCode.DUPLICATE_COMMAND,
                hint="pick another name; the first definition stays active",
                name=command.name,
                docs=getdoc(FaultCode.DUPLICATE_COMMAND),
            )
        command.resolve(self.get_type, self.get_group)
        self._commands[command.name] = command
        return command

    def command(self, name, /, short=Unset, long=Unset, arguments=(), options=None, descr=Unset, group=Unset):
        """
        decorator form of register_command; the docstring of the decorated
        function becomes the long description.
        """

        @rename("command")
        def decorator(callback):
            doc = (callback.__doc__ or "").strip()
            self.register_command(Command(
                name,
                short,
                long,
                arguments,
                options,
                descr,
                doc or Unset,
                group,
                callback=callback,
            ))
            return callback

        return decorator

    def get_command(self, name, /):
        try:
            return self._commands[name]
        except KeyError:
            suggestions, hint = _suggest(name, self._commands)
            raise UnknownCommandError(
                "unknown command %r" % name,
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                hint=hint or "run with --help to list the available commands",
                command=name,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_COMMAND),
            ) from None

    def has_command(self, name, /):
        return name in self._commands

    def delete_command(self, name, /):
        """
        unregister a command and detach it from its group; returns it.

        raises
        - UnknownCommandError
        """
        command = self.get_command(name)
        del self._commands[name]
        if isinstance(command.group, Group):
            command.group.detach(command)
        return command

    @property
    def commands(self):
        return dict(self._commands)

    # --- functions ---

    def register_function(self, name, callback, /, descr=Unset):
        self._validate("function", name)
        if name in self._functions:
            raise DuplicateFunctionError(
                "function %r is already registered" % name,
                title="duplicate function",
                code=FaultCode.DUPLICATE_FUNCTION,
                hint="pick another name",
                name=name,
                docs=getdoc(FaultCode.DUPLICATE_FUNCTION),
            )
        function = self._functions[name] = Function(name, callback, descr)
        return function

    def function(self, name, /, descr=Unset):
        """
        decorator form of register_function.
        """

        @rename("function")
        def decorator(callback):
            self.register_function(name, callback, _docstring(callback, descr))
            return callback

        return decorator

    def get_function(self, name, /):
        return self._functions.get(name)

    @property
    def functions(self):
        return dict(self._functions)

    # --- lifecycle ---

    def snapshot(self):
        """
        independent copy: later registrations on either side are not shared,
        and neither are changes to the commands (options, descriptions) or
        to the groups they belong to.
        """
        registry = Registry()
        registry._types = dict(self._types)
        registry._groups = {id: group.copy(commands=False) for id, group in self._groups.items()}
        registry._commands = {
            name: command.copy(registry.get_group) for name, command in self._commands.items()
        }
        registry._functions = dict(self._functions)
        return registry

    def __repr__(self):
        return "Registry(types=%d, groups=%d, commands=%d, functions=%d)" % (
            len(self._types), len(self._groups), len(self._commands), len(self._functions)
        )


def _docstring(callback, descr, /):
    """
    explicit description, or the first docstring of the callback.
    """
    if descr is not Unset:
        return descr
    return (callback.__doc__ or "").strip() or Unset


__all__ = (
    "Registry",
)
