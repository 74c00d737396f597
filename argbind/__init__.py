__title__ = 'argbind'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .activators import *
from .arguments import *
from .binding import *
from .commands import *
from .faults import *
from .invocation import *
from .schemas import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of every submodule
__all__ += activators.__all__  # type: ignore[attr-defined]
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += binding.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += invocation.__all__  # type: ignore[attr-defined]
__all__ += schemas.__all__  # type: ignore[attr-defined]
