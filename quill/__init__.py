__title__ = 'quill'
__license__ = 'MIT'
__version__ = "0.1.0"

from .arguments import *
from .builtins import *
from .commands import *
from .faults import *
from .functions import *
from .groups import *
from .instruction import *
from .interpreter import *
from .registry import *
from .session import *
from .strings import *
from .valuetypes import *
from .variables import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the built-ins
__all__ += builtins.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the functions
__all__ += functions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the groups
__all__ += groups.__all__  # type: ignore[attr-defined]
# Load the exposed API of the instructions
__all__ += instruction.__all__  # type: ignore[attr-defined]
# Load the exposed API of the interpreter
__all__ += interpreter.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the session
__all__ += session.__all__  # type: ignore[attr-defined]
# Load the exposed API of the interpreter strings
__all__ += strings.__all__  # type: ignore[attr-defined]
# Load the exposed API of the value types
__all__ += valuetypes.__all__  # type: ignore[attr-defined]
# Load the exposed API of the variables
__all__ += variables.__all__  # type: ignore[attr-defined]
