"""
python -m quill [options] [script ...]

runs the built-in commands from the command line in shell mode: faults are
rendered on stderr, recoverable ones do not stop the run. words that are not
options are script files, run in order through the include command.
"""
import sys

from .builtins import default_registry
from .interpreter import Interpreter
from .session import Session


def main(argv=None, /):
    argv = sys.argv[1:] if argv is None else list(argv)
    session = Session(argv)
    interpreter = Interpreter(default_registry(), session, shell=True)
    interpreter.run_command_line(argv, default="include")
    return 1 if interpreter.faults else 0


if __name__ == "__main__":
    sys.exit(main())
