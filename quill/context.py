"""
parsing context: where the interpreter currently is.

every fault caught at an invocation boundary is completed with str(context),
so diagnostics always name the construct and its location:

- "command 'print' in file 'plot.qs', line 3"
- "command 'print' in command-line option '--print' (#2)"
- "command 'print' in script, line 2" (scripts run from text)
- "command 'print'" (direct calls)
"""
import copy
from contextlib import contextmanager


class ParsingContext:
    """
    mutable location record owned by an interpreter.

    fields
    - command: name of the command being processed (or None)
    - file: path of the script being read (or None)
    - line: 1-based line number in that file (or None)
    - option: command-line spelling being processed (or None)
    - number: 1-based position of that option on the command line (or None)
    """

    def __init__(self):
        self.command = None
        self.file = None
        self.line = None
        self.option = None
        self.number = None

    def parsing_file(self, command, file, line=None, /):
        self.command = command
        self.file = file
        self.line = line
        self.option = self.number = None

    def parsing_option(self, option, number, /, command=None):
        self.command = command
        self.option = option
        self.number = number
        self.file = self.line = None

    def parsing_command(self, command, /):
        self.command = command

    @contextmanager
    def scope(self):
        """
        restore every field on exit (nested script runs).
        """
        saved = copy.copy(self.__dict__)
        try:
            yield self
        finally:
            self.__dict__.update(saved)

    def __str__(self):
        where = None
        if self.option is not None:
            where = "command-line option %r (#%d)" % (self.option, self.number)
        elif self.file is not None or self.line is not None:
            where = "file %r" % str(self.file) if self.file is not None else "script"
            if self.line is not None:
                where += ", line %d" % self.line
        if self.command and where:
            return "command %r in %s" % (self.command, where)
        if self.command:
            return "command %r" % self.command
        return where or "top level"

    def __repr__(self):
        return "ParsingContext(%s)" % ", ".join("%s=%r" % item for item in self.__dict__.items())


__all__ = (
    "ParsingContext",
)
