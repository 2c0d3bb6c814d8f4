"""Exceptions raised while loading parameters into the environment."""


class ParameterLoadError(Exception):
    """Base class for parameter loading failures."""
    pass


class ConnectionConfigError(ParameterLoadError):
    """AWS session or SSM client could not be created."""
    pass


class FetchPageError(ParameterLoadError):
    """A GetParametersByPath page request failed."""

    def __init__(self, path: str, page_number: int, cause: Exception):
        super().__init__(f"Failed to fetch page {page_number} of parameters under {path}: {cause}")
        self.path = path
        self.page_number = page_number


class EnvironmentWriteError(ParameterLoadError):
    """Setting an environment variable failed."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(f"Failed to set environment variable {name}: {cause}")
        self.name = name


class LoadCancelled(ParameterLoadError):
    """Loading was cancelled before the next page was requested."""
    pass
