import dataclasses
import json
import os
from typing import Any, List, Optional

import pytest

import kubecrud
from kubecrud._cogs.auth import serviceaccount
from kubecrud._cogs.clients.transport import Response


@dataclasses.dataclass(frozen=True)
class Call:
    method: str
    uri: str
    body: Optional[Any]  # decoded from JSON for convenience


class FakeTransport:
    """
    An in-memory transport: replies with the pre-queued responses and records the calls.

    An exception in the queue is raised instead of replying.
    A request without a queued reply fails the test.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Call] = []
        self.replies: List[Any] = []
        self.base_url = ''
        self.headers = {}
        self.timeout = None
        self.verify_ssl = True
        self.ca_certificate = None
        self.client_certificate = None
        self.client_key = None
        self.closed = False

    def reply(self, status=200, body=None, headers=None) -> None:
        text = body if isinstance(body, str) else json.dumps(body) if body is not None else ''
        self.replies.append(Response(status=status, body=text, headers=headers or {}))

    def fail(self, exc: BaseException) -> None:
        self.replies.append(exc)

    @property
    def methods(self) -> List[str]:
        return [call.method for call in self.calls]

    async def _request(self, method, uri, body=None, headers=None) -> Response:
        self.calls.append(Call(method=method, uri=uri, body=json.loads(body) if body else None))
        if not self.replies:
            raise AssertionError(f"Unexpected request: {method.upper()} {uri}")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def get(self, uri, body=None, headers=None):
        return await self._request('get', uri, body, headers)

    async def post(self, uri, body=None, headers=None):
        return await self._request('post', uri, body, headers)

    async def put(self, uri, body=None, headers=None):
        return await self._request('put', uri, body, headers)

    async def patch(self, uri, body=None, headers=None):
        return await self._request('patch', uri, body, headers)

    async def delete(self, uri, body=None, headers=None):
        return await self._request('delete', uri, body, headers)

    def set_base_url(self, url):
        self.base_url = url

    def set_default_headers(self, headers):
        self.headers = dict(headers)

    def add_default_header(self, name, value):
        self.headers[name] = value

    def set_timeout(self, seconds):
        self.timeout = seconds

    def set_verify_ssl(self, verify):
        self.verify_ssl = verify

    def set_ca_certificate(self, data):
        self.ca_certificate = data

    def set_client_certificate(self, certificate, key):
        self.client_certificate = certificate
        self.client_key = key

    async def close(self):
        self.closed = True


@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all client tests. """
    return 'fake-host'


@pytest.fixture()
def fake_transport():
    return FakeTransport()


@pytest.fixture()
def token_provider(hostname):
    return kubecrud.TokenAuthentication(f'https://{hostname}:6443', 'fake-token')


@pytest.fixture()
def client(token_provider, fake_transport):
    return kubecrud.Client(token_provider, transport=fake_transport)


@pytest.fixture()
def default_client(client):
    kubecrud.set_default_client(client)
    return client


@pytest.fixture(autouse=True)
def clean_default_client():
    kubecrud.reset_default_client()
    yield
    kubecrud.reset_default_client()


@pytest.fixture(autouse=True)
def no_service_account(mocker, tmp_path):
    """
    Never detect the real service account of the environment, e.g. in CI pods.

    The files are absent unless created by the tests via `service_account_dir`.
    """
    path = tmp_path / 'serviceaccount'
    mocker.patch.object(serviceaccount, 'TOKEN_PATH', str(path / 'token'))
    mocker.patch.object(serviceaccount, 'CA_PATH', str(path / 'ca.crt'))
    mocker.patch.object(serviceaccount, 'NAMESPACE_PATH', str(path / 'namespace'))
    return path


@pytest.fixture()
def service_account_dir(no_service_account):
    no_service_account.mkdir()
    return no_service_account


@pytest.fixture()
def clean_env(mocker, tmp_path):
    """ An environment with no K8s-related variables and an empty home directory. """
    home = tmp_path / 'home'
    home.mkdir()
    mocker.patch.dict(os.environ, {'HOME': str(home)}, clear=True)
    return home
