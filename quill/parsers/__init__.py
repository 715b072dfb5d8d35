from .commandline import *
from .file import *

__all__ = ()

# Load the exposed API of the script parser
__all__ += file.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command-line parser
__all__ += commandline.__all__  # type: ignore[attr-defined]
