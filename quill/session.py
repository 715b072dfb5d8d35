"""
the default execution target.

commands and functions receive the target as first argument; a Session is
the small one used by `python -m quill` and by the built-in commands. hosts
with richer state (data stacks, figures) pass their own object instead.
"""
import shlex


class Session:
    """
    state shared by the built-in commands.

    attributes
    - interpreter: the Interpreter driving this session (set by it).
    - figure_name: output name, defaults to the stem of the first script run.
    - command_line: the argv the program was started with.
    - output: texts produced by print, in order.
    """

    def __init__(self, command_line=(), /):
        self.interpreter = None
        self.figure_name = None
        self.command_line = list(command_line)
        self.output = []

    @property
    def quoted_command_line(self):
        """
        the command line quoted so it can be pasted back into a shell.
        """
        return shlex.join(self.command_line)

    def __repr__(self):
        return "Session(figure_name=%r, output=%d)" % (self.figure_name, len(self.output))


__all__ = (
    "Session",
)
