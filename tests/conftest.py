"""
Shared pytest fixtures for pkgpublish tests.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import json
import os
import tempfile
from typing import Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio

from preoccupied.pkgpublish.config import PublishConfig
from preoccupied.pkgpublish.registry import RegistryClient


class FakeRegistry:
    """
    Stand-in for the registry generic package API, recording every
    request it receives.
    """

    def __init__(self):
        self.requests: List[Tuple[str, str, bytes]] = []
        self.auth_headers: List[str] = []
        self.list_status = 200
        self.list_body = json.dumps([]).encode()
        self.upload_status: Dict[str, int] = {}
        self.link_status = 201


    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode()
        self.requests.append((request.method, path, request.content))
        self.auth_headers.append(request.headers.get('Authorization', ''))

        if request.method == 'GET':
            return httpx.Response(self.list_status, content=self.list_body)

        if request.method == 'PUT':
            target_name = path.rsplit('/', 1)[-1]
            return httpx.Response(self.upload_status.get(target_name, 201))

        if request.method == 'POST':
            return httpx.Response(self.link_status)

        return httpx.Response(405)


    @property
    def uploads(self) -> List[str]:
        return [path for method, path, _body in self.requests if method == 'PUT']


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for tests.
    """

    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def fake_registry():
    """
    Create an empty fake registry.
    """

    return FakeRegistry()


@pytest_asyncio.fixture
async def registry_client(fake_registry):
    """
    Create a RegistryClient wired to the fake registry.
    """

    client = RegistryClient(
        'http://registry.example.com',
        'ci-bot',
        's3cret',
        transport=httpx.MockTransport(fake_registry.handler))
    yield client
    await client.aclose()


@pytest.fixture
def publish_config(temp_dir):
    """
    Create a PublishConfig matching every file in temp_dir.
    """

    return PublishConfig(
        api_url='http://registry.example.com',
        api_user='ci-bot',
        api_password='s3cret',
        package_owner='acme',
        package_name='widget',
        package_version='1.0',
        files=os.path.join(temp_dir, '**', '*'),
    )


@pytest.fixture
def make_file(temp_dir):
    """
    Return a function writing a file below temp_dir, creating parents,
    and returning its path.
    """

    def write_file(name: str, content: bytes = b'data') -> str:
        path = os.path.join(temp_dir, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'wb') as f:
            f.write(content)
        return path

    return write_file


@pytest.fixture
def mock_env_vars(monkeypatch):
    """
    Clear the environment variables read by pkgpublish.
    """

    env_vars_to_clear = [
        'REEVE_API',
        'CONFIG_PATH',
        'LOG_LEVEL',
        'FILES',
        'API_URL',
        'API_USER',
        'API_PASSWORD',
        'PACKAGE_OWNER',
        'PACKAGE_NAME',
        'PACKAGE_VERSION',
        'PACKAGE_REPOSITORY',
        'SKIP_EXISTING'
    ]

    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)

    return monkeypatch


# The end.
