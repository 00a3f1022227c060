"""
The HTTP transport: the only place where the actual I/O happens.

The client only needs a few HTTP verbs and a few connection settings.
Everything above this module speaks in terms of :class:`Response`,
so the transport can be replaced (e.g. in tests) without touching the rest.
"""
import asyncio
import contextlib
import dataclasses
import json
import logging
import ssl
import tempfile
from typing import Any, List, Mapping, Optional

import aiohttp
from typing_extensions import Protocol

from kubecrud._cogs.clients import errors
from kubecrud._cogs.configs import configuration
from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import credentials

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Response:
    status: int
    body: str
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


class Transport(Protocol):
    """
    The capabilities of a transport as needed by the client.

    All URIs are relative to the base URL unless they contain a scheme.
    The bodies are already serialised: the transport does not care about JSON.
    """

    async def get(self, uri: str, body: Optional[str] = None,
                  headers: Optional[typedefs.Headers] = None) -> Response: ...

    async def post(self, uri: str, body: Optional[str] = None,
                   headers: Optional[typedefs.Headers] = None) -> Response: ...

    async def put(self, uri: str, body: Optional[str] = None,
                  headers: Optional[typedefs.Headers] = None) -> Response: ...

    async def patch(self, uri: str, body: Optional[str] = None,
                    headers: Optional[typedefs.Headers] = None) -> Response: ...

    async def delete(self, uri: str, body: Optional[str] = None,
                     headers: Optional[typedefs.Headers] = None) -> Response: ...

    def set_base_url(self, url: str) -> None: ...

    def set_default_headers(self, headers: typedefs.Headers) -> None: ...

    def add_default_header(self, name: str, value: str) -> None: ...

    def set_timeout(self, seconds: Optional[float]) -> None: ...

    def set_verify_ssl(self, verify: bool) -> None: ...

    def set_ca_certificate(self, data: Optional[bytes]) -> None: ...

    def set_client_certificate(self, certificate: Optional[bytes], key: Optional[bytes]) -> None: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """
    A transport with one ``aiohttp`` session, created on the first request.

    Any change of the connection settings makes the existing session stale:
    it is closed and replaced on the next request. The headers, the timeouts,
    and the SSL context are the session's own, so they cannot be changed
    in an existing session.
    """

    def __init__(
            self,
            *,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> None:
        super().__init__()
        settings = settings if settings is not None else configuration.ClientSettings()
        self._base_url = ''
        self._headers: typedefs.Headers = {}
        self._timeout: Optional[float] = settings.networking.request_timeout
        self._connect_timeout: Optional[float] = settings.networking.connect_timeout
        self._verify_ssl = True
        self._ca_certificate: Optional[bytes] = None
        self._client_certificate: Optional[bytes] = None
        self._client_key: Optional[bytes] = None
        self._session: Optional[aiohttp.ClientSession] = None
        self._stale: List[aiohttp.ClientSession] = []

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def default_headers(self) -> typedefs.Headers:
        return dict(self._headers)

    def _invalidate(self) -> None:
        if self._session is not None:
            self._stale.append(self._session)
            self._session = None

    def set_base_url(self, url: str) -> None:
        self._base_url = url.rstrip('/')

    def set_default_headers(self, headers: typedefs.Headers) -> None:
        self._headers = dict(headers)
        self._invalidate()

    def add_default_header(self, name: str, value: str) -> None:
        self._headers[name] = value
        self._invalidate()

    def set_timeout(self, seconds: Optional[float]) -> None:
        self._timeout = seconds
        self._invalidate()

    def set_verify_ssl(self, verify: bool) -> None:
        self._verify_ssl = verify
        self._invalidate()

    def set_ca_certificate(self, data: Optional[bytes]) -> None:
        self._ca_certificate = data
        self._invalidate()

    def set_client_certificate(self, certificate: Optional[bytes], key: Optional[bytes]) -> None:
        self._client_certificate = certificate
        self._client_key = key
        self._invalidate()

    def make_ssl_context(self) -> ssl.SSLContext:
        """
        Build the SSL context for both the server verification and the client certificates.
        """
        try:
            context = ssl.create_default_context(
                purpose=ssl.Purpose.SERVER_AUTH,
                cadata=self._ca_certificate.decode('ascii') if self._ca_certificate else None,
            )

            # The key pair is not accepted as data, only as files. Keep them for as short as possible.
            if self._client_certificate and self._client_key:
                with contextlib.ExitStack() as stack:
                    cert_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                    cert_file.write(self._client_certificate)
                    pkey_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                    pkey_file.write(self._client_key)
                    context.load_cert_chain(certfile=cert_file.name, keyfile=pkey_file.name)
        except (ssl.SSLError, UnicodeDecodeError, ValueError) as e:
            raise credentials.AuthenticationError(f"Invalid SSL certificates: {e}") from e

        if not self._verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        return context

    async def _get_session(self) -> aiohttp.ClientSession:
        while self._stale:
            await self._stale.pop().close()

        if self._session is None:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=0, ssl=self.make_ssl_context()),
                headers=self._headers,
                timeout=aiohttp.ClientTimeout(
                    total=self._timeout,
                    sock_connect=self._connect_timeout,
                ),
            )
        return self._session

    async def request(
            self,
            method: str,
            uri: str,
            body: Optional[str] = None,
            headers: Optional[typedefs.Headers] = None,
    ) -> Response:
        url = uri if '://' in uri else self._base_url + '/' + uri.lstrip('/')
        session = await self._get_session()
        try:
            async with session.request(method, url, data=body, headers=headers) as response:
                text = await response.text()
                return Response(status=response.status, body=text, headers=dict(response.headers))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Request failed: {method.upper()} {url} -> {e!r}")
            raise errors.APIConnectionError(
                None, status=0, text=f"Request failed: {method.upper()} {url}: {e!r}") from e

    async def get(self, uri: str, body: Optional[str] = None,
                  headers: Optional[typedefs.Headers] = None) -> Response:
        return await self.request('get', uri, body=body, headers=headers)

    async def post(self, uri: str, body: Optional[str] = None,
                   headers: Optional[typedefs.Headers] = None) -> Response:
        return await self.request('post', uri, body=body, headers=headers)

    async def put(self, uri: str, body: Optional[str] = None,
                  headers: Optional[typedefs.Headers] = None) -> Response:
        return await self.request('put', uri, body=body, headers=headers)

    async def patch(self, uri: str, body: Optional[str] = None,
                    headers: Optional[typedefs.Headers] = None) -> Response:
        return await self.request('patch', uri, body=body, headers=headers)

    async def delete(self, uri: str, body: Optional[str] = None,
                     headers: Optional[typedefs.Headers] = None) -> Response:
        return await self.request('delete', uri, body=body, headers=headers)

    async def close(self) -> None:
        self._invalidate()
        while self._stale:
            await self._stale.pop().close()
