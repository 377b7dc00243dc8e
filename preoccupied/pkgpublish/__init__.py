"""
Reeve CI pipeline step publishing files as a generic package to a
Forgejo or Gitea package registry.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from preoccupied.pkgpublish.config import PublishConfig, load_config
from preoccupied.pkgpublish.exceptions import (
    ConfigError, HostContextError, LinkError, PatternError,
    PublishError, RegistryError, UploadError)
from preoccupied.pkgpublish.files import resolve_files, sanitize_name
from preoccupied.pkgpublish.publish import PublishSummary, publish
from preoccupied.pkgpublish.registry import RegistryClient


__all__ = [
    'ConfigError', 'HostContextError', 'LinkError', 'PatternError',
    'PublishConfig', 'PublishError', 'PublishSummary', 'RegistryClient',
    'RegistryError', 'UploadError', 'load_config', 'publish',
    'resolve_files', 'sanitize_name']


# The end.
