"""
instructions: a command bound to already converted arguments and options.

the interpreter returns one from every successful run_command; hosts keep
them to replay a sequence later (for instance after each data load)
without re-parsing or re-converting anything.
"""
from .commands import Command
from .internals import ModelType


class Instruction(metaclass=ModelType, sealed=True):
    __introspectable__ = (
        "command",
        "arguments",
        "options",
    )

    def __init__(self, command, arguments=(), options=None, /):
        if not isinstance(command, Command):
            raise TypeError(f"{type(self).__typename__} 'command' must be a command")
        self._command = command
        self._arguments = tuple(arguments)
        self._options = dict(options or {})

    def run(self, target, /):
        """
        run the command again on target.
        """
        return self._command.run(target, self._arguments, self._options)

    def __str__(self):
        words = [self._command.name]
        words.extend(map(repr, self._arguments))
        words.extend("/%s=%r" % item for item in self._options.items())
        return " ".join(words)


__all__ = (
    "Instruction",
)
