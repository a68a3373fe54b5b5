# src/shtola/errors.py


class ShtolaError(Exception):
    """Base class for errors raised by shtola itself."""


class SourceError(ShtolaError):
    """The build was started without a usable source or destination."""


class FrontMatterError(ShtolaError, ValueError):
    """A front-matter block could not be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: invalid front matter ({reason})")
        self.path = path
        self.reason = reason
