"""
command groups: documentation buckets for commands.

a group only matters for presentation: help listings show groups by
increasing priority (ties broken by name) and skip blacklisted groups.
"""
from .internals import ModelType, sanitize_name, sanitize_text
from .utils import Unset, coalesce


class Group(metaclass=ModelType, sealed=True):
    """
    a named set of commands.

    properties
    - id: registry key (lowercase, digits, hyphens)
    - name: human-readable title (defaults to the id)
    - descr: optional description
    - priority: sort key in help output (lower first)
    - blacklisted: hidden from help output
    - commands: the commands attached so far, in registration order
    """
    __introspectable__ = (
        "id",
        "name",
        "descr",
        "priority",
        "blacklisted",
        "commands",
    )
    __displayable__ = (
        "id",
        "name",
        "priority",
        "blacklisted",
    )

    def __init__(self, id, /, name=Unset, descr=Unset, priority=0, blacklisted=False):
        self._id = sanitize_name(type(self), id, "id")
        if name is not Unset:
            name = sanitize_name(type(self), name, pattern=None)
        self._name = coalesce(name, self._id)
        self._descr = sanitize_text(type(self), descr)
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise TypeError(f"{type(self).__typename__} 'priority' must be an integer")
        self._priority = priority
        self._blacklisted = bool(blacklisted)
        self._commands = []

    def attach(self, command, /):
        if command not in self._commands:
            self._commands.append(command)

    def detach(self, command, /):
        if command in self._commands:
            self._commands.remove(command)

    def copy(self, /, commands=True):
        """
        independent copy; the command list is copied too unless commands is
        false.
        """
        group = Group(
            self._id,
            self._name,
            Unset if self._descr is None else self._descr,
            self._priority,
            self._blacklisted,
        )
        group._commands = list(self._commands) if commands else []
        return group

    def sortkey(self):
        return self._priority, self._name.lower()


__all__ = (
    "Group",
)
