"""Exception types raised inside the engine and converted at the tool boundary."""


class ImplmunchError(Exception):
    """Base class for engine errors."""


class ValidationError(ImplmunchError):
    """An identifier or path failed validation."""


class SearchError(ImplmunchError):
    """The content search could not be run."""


class SearchTimeout(SearchError):
    """The content search exceeded its time budget."""
