"""
Client for the generic package endpoints of a Forgejo or Gitea registry.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
from typing import AsyncIterator, BinaryIO, Optional, Set
from urllib.parse import quote

import httpx

from .exceptions import LinkError, RegistryError, UploadError


logger = logging.getLogger(__name__)


CHUNK_SIZE = 64 * 1024


def escape(segment: str) -> str:
    """
    Percent-encode a value for use as a single URL path segment.
    """

    return quote(segment, safe='')


async def _read_chunks(content: BinaryIO) -> AsyncIterator[bytes]:
    """
    Yield the contents of an open binary file in CHUNK_SIZE pieces.
    """

    # reads block the event loop; uploads are strictly sequential
    while True:
        chunk = content.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


class RegistryClient:
    """
    Basic-auth client for listing, uploading, and linking generic
    package files.
    """

    def __init__(
            self,
            api_url: str,
            api_user: str,
            api_password: str,
            transport: Optional[httpx.AsyncBaseTransport] = None):

        self.api_url = api_url.rstrip('/')
        self._client = httpx.AsyncClient(auth=(api_user, api_password), transport=transport)


    async def __aenter__(self) -> 'RegistryClient':
        """
        Enter the client context.
        """

        return self


    async def __aexit__(self, *exc_info) -> None:
        """
        Close the underlying HTTP client.
        """

        await self.aclose()


    async def aclose(self) -> None:
        """
        Close the underlying HTTP client.
        """

        await self._client.aclose()


    def package_url(self, owner: str, name: str, version: str) -> str:
        """
        URL of a package version under the generic upload API.
        """

        return (f'{self.api_url}/api/packages/{escape(owner)}/generic/'
                f'{escape(name)}/{escape(version)}')


    async def list_package_files(
            self,
            owner: str,
            name: str,
            version: str) -> Optional[Set[str]]:
        """
        Fetch the names of the files already present in a package
        version. Returns None when the package or version does not
        exist yet.
        """

        url = (f'{self.api_url}/api/v1/packages/{escape(owner)}/generic/'
               f'{escape(name)}/{escape(version)}/files')

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise RegistryError(f'Error fetching package file list - {e}') from e

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug(f'Package {owner}/{name} {version} does not exist yet')
            return None

        if response.status_code != httpx.codes.OK:
            raise RegistryError(
                f'Fetching package file list returned status {response.status_code}',
                status_code=response.status_code)

        try:
            return {entry['name'] for entry in response.json()}
        except (ValueError, KeyError, TypeError) as e:
            raise RegistryError(f'Error fetching package file list - {e}') from e


    async def upload_file(
            self,
            owner: str,
            name: str,
            version: str,
            target_name: str,
            content: BinaryIO) -> None:
        """
        Stream the contents of an open binary file into the package
        version under target_name.
        """

        url = f'{self.package_url(owner, name, version)}/{escape(target_name)}'

        try:
            response = await self._client.put(url, content=_read_chunks(content))
        except httpx.HTTPError as e:
            raise UploadError(f'Error uploading file {target_name} - {e}') from e

        if response.status_code != httpx.codes.CREATED:
            raise UploadError(
                f'Uploading file returned status {response.status_code}',
                status_code=response.status_code)


    async def link_repository(self, owner: str, name: str, repository: str) -> None:
        """
        Link the package to a source repository.

        Some Forgejo releases reject this when the link already exists,
        so it is only attempted when a repository is configured.
        """

        url = (f'{self.api_url}/api/v1/packages/{escape(owner)}/generic/'
               f'{escape(name)}/-/link/{escape(repository)}')

        try:
            response = await self._client.post(url)
        except httpx.HTTPError as e:
            raise LinkError(f'Error linking repository - {e}') from e

        if response.status_code != httpx.codes.CREATED:
            raise LinkError(
                f'Linking repository returned status {response.status_code}',
                status_code=response.status_code)


# The end.
