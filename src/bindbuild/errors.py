"""Base exception for bindbuild.

Every error raised by the resolution and merge steps derives from
BindBuildError so callers can catch the whole family in one place.
"""


class BindBuildError(Exception):
    """Base class for all bindbuild errors."""

    pass
