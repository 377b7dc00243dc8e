"""
Exception hierarchy for the pkgpublish pipeline step.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from typing import Optional


class PublishError(Exception):
    """
    Base class for every fatal condition of a publish run
    """


class HostContextError(PublishError):
    """
    Raised when not running inside a Reeve CI pipeline
    """


class ConfigError(PublishError):
    """
    Raised when required configuration is missing or malformed
    """


class PatternError(PublishError):
    """
    Raised when a file pattern cannot be parsed or expanded
    """

    def __init__(self, message: str, pattern: Optional[str] = None):
        super().__init__(message)
        self.pattern = pattern


class RegistryError(PublishError):
    """
    Raised when the package registry cannot be queried
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UploadError(RegistryError):
    """
    Raised when a single file upload fails
    """


class LinkError(RegistryError):
    """
    Raised when linking the package to a repository fails
    """


# The end.
