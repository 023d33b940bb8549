"""bindbuild - build-time configuration selection for generated native-library bindings."""

from .errors import BindBuildError
from .version import InvalidVersion, Version

__version__ = "0.1.0"

__all__ = [
    "BindBuildError",
    "InvalidVersion",
    "Version",
    "__version__",
]
