"""
Upload orchestration for the pkgpublish pipeline step.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from .config import PublishConfig
from .exceptions import UploadError
from .files import parse_patterns, resolve_files, sanitize_name
from .registry import RegistryClient


logger = logging.getLogger(__name__)


class PublishSummary(BaseModel):
    """
    Record of what a publish run did, as (path, target name) pairs
    """

    uploaded: List[Tuple[str, str]] = Field(default_factory=list)
    skipped: List[Tuple[str, str]] = Field(default_factory=list)
    linked: bool = False


async def upload_files(
        config: PublishConfig,
        client: RegistryClient,
        files: List[str],
        existing: Optional[Set[str]] = None) -> PublishSummary:
    """
    Upload each file in order, skipping those whose target name is
    already in the existing set. The first failure aborts the run and
    leaves earlier uploads in place.
    """

    summary = PublishSummary()
    existing = existing or set()

    for filename in files:
        target_name = sanitize_name(filename)

        if target_name in existing:
            logger.info(f'Skipping "{filename}" because {target_name} already exists in the package')
            summary.skipped.append((filename, target_name))
            continue

        logger.info(f'Uploading "{filename}" as {target_name}...')

        try:
            content = open(filename, 'rb')
        except OSError as e:
            raise UploadError(f'Error uploading file "{filename}" - {e}') from e

        with content:
            await client.upload_file(
                owner=config.package_owner,
                name=config.package_name,
                version=config.package_version,
                target_name=target_name,
                content=content)

        summary.uploaded.append((filename, target_name))

    return summary


async def publish(config: PublishConfig, client: RegistryClient) -> PublishSummary:
    """
    Resolve the configured files, upload them to the registry, and link
    the package to its repository when one is configured.
    """

    files = resolve_files(parse_patterns(config.files))
    logger.debug(f'Resolved {len(files)} files to publish')

    existing = None
    if config.skip_existing:
        existing = await client.list_package_files(
            owner=config.package_owner,
            name=config.package_name,
            version=config.package_version)

    summary = await upload_files(config, client, files, existing)

    if config.package_repository:
        logger.info(f'Linking package "{config.package_name}" to repository'
                    f' "{config.package_repository}"...')
        await client.link_repository(
            owner=config.package_owner,
            name=config.package_name,
            repository=config.package_repository)
        summary.linked = True

    logger.info('Done')
    return summary


# The end.
