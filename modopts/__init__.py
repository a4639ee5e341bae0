__title__ = 'modopts'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .cmdline import *
from .faults import *
from .items import *
from .store import *
from .tables import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the command-line loader
__all__ += cmdline.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the items and registry
__all__ += items.__all__  # type: ignore[attr-defined]
# Load the exposed API of the store
__all__ += store.__all__  # type: ignore[attr-defined]
# Load the exposed API of the table builder
__all__ += tables.__all__  # type: ignore[attr-defined]
