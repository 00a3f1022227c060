"""
The API client: the CRUD operations on individual objects and on collections.

The client knows nothing about specific resource kinds. It only needs
the objects to know their own addresses (:meth:`APIObject.ref`) and
to serialise/deserialise themselves from/to the raw dicts of K8s API.
"""
import asyncio
import json
import logging
from typing import Any, List, Optional, Type, TypeVar

from typing_extensions import Protocol

from kubecrud._cogs.auth import detection
from kubecrud._cogs.clients import errors, transport as transport_
from kubecrud._cogs.configs import configuration
from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import bodies, credentials, references

logger = logging.getLogger(__name__)


class APIObject(Protocol):

    def ref(self) -> references.ResourceRef: ...

    def get_name(self) -> Optional[str]: ...

    def get_namespace(self) -> Optional[str]: ...

    def to_dict(self) -> bodies.RawBody: ...

    @classmethod
    def from_dict(cls: Type["_O"], data: bodies.RawBody) -> "_O": ...


_O = TypeVar('_O', bound=APIObject)


class Client:
    """
    An authenticated API client for one cluster.

    Usage::

        async with kubecrud.Client() as client:
            pod = await client.read(kubecrud.Pod(...))

    All operations are coroutines. Every operation makes exactly one request.
    No retries are performed: the errors are raised to the caller as they are.
    """

    def __init__(
            self,
            provider: Optional[credentials.CredentialProvider] = None,
            transport: Optional[transport_.Transport] = None,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> None:
        super().__init__()
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.provider = provider if provider is not None else detection.authenticate()
        self.transport = (transport if transport is not None else
                          transport_.AiohttpTransport(settings=self.settings))
        self.context = self.provider.get_context()
        self._configure(self.context)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.context.server_url}>'

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    @classmethod
    def kubeconfig(
            cls,
            kubeconfig_path: Optional[str] = None,
            context: Optional[str] = None,
            *,
            transport: Optional[transport_.Transport] = None,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> "Client":
        provider = detection.kubeconfig(kubeconfig_path, context)
        return cls(provider, transport=transport, settings=settings)

    @classmethod
    def in_cluster(
            cls,
            api_server_host: Optional[str] = None,
            api_server_port: Optional[int] = None,
            *,
            transport: Optional[transport_.Transport] = None,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> "Client":
        provider = detection.in_cluster(api_server_host, api_server_port)
        return cls(provider, transport=transport, settings=settings)

    @classmethod
    def token(
            cls,
            server_url: str,
            token: str,
            ca_certificate: Optional[str | bytes] = None,
            verify_ssl: bool = True,
            *,
            transport: Optional[transport_.Transport] = None,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> "Client":
        provider = detection.token(server_url, token, ca_certificate, verify_ssl)
        return cls(provider, transport=transport, settings=settings)

    def _configure(self, context: credentials.CredentialContext) -> None:
        headers: typedefs.Headers = {
            'User-Agent': self.settings.transport.user_agent,
            'Content-Type': self.settings.transport.content_type,
            'Accept': self.settings.transport.content_type,
        }
        headers.update(context.headers)
        self.transport.set_base_url(context.server_url)
        self.transport.set_default_headers(headers)
        self.transport.set_timeout(self.settings.networking.request_timeout)
        self.transport.set_verify_ssl(context.verify_ssl)
        self.transport.set_ca_certificate(context.ca_certificate)
        self.transport.set_client_certificate(context.client_certificate, context.client_key)

    async def reauthenticate(self) -> bool:
        """
        Refresh the credentials (e.g. re-run the exec plugin) and re-configure the transport.

        The providers are synchronous and can run subprocesses or read files,
        so they are executed outside of the event loop.
        """
        loop = asyncio.get_running_loop()
        refreshed = await loop.run_in_executor(None, self.provider.refresh)
        self.context = await loop.run_in_executor(None, self.provider.get_context)
        self._configure(self.context)
        logger.debug(f"Re-authenticated with {self.context.server_url}: refreshed={refreshed}")
        return bool(refreshed)

    async def close(self) -> None:
        await self.transport.close()

    async def request(
            self,
            method: str,
            path: str,
            *,
            payload: Optional[object] = None,
    ) -> transport_.Response:
        """
        Make one request and raise the specialised API errors for non-2xx responses.
        """
        logger.debug(f"{method.upper()} {path}")
        call = getattr(self.transport, method.lower())
        body = json.dumps(payload) if payload is not None else None
        response: transport_.Response = await call(path, body=body)
        errors.check_response(response.status, response.body)
        return response

    @staticmethod
    def decode(response: transport_.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:  # incl. json.JSONDecodeError
            raise errors.APIError(None, status=response.status, body=response.body,
                                  text=f"Cannot decode the API response: {e}") from e

    async def create(self, resource: _O) -> _O:
        path = resource.ref().get_path(references.Operation.CREATE,
                                       namespace=resource.get_namespace())
        response = await self.request('post', path, payload=resource.to_dict())
        return type(resource).from_dict(self.decode(response))

    async def read(self, resource: _O) -> _O:
        path = resource.ref().get_path(references.Operation.GET,
                                       namespace=resource.get_namespace(),
                                       name=resource.get_name())
        try:
            response = await self.request('get', path)
        except errors.APINotFoundError as e:
            raise self._not_found(resource, e) from e
        return type(resource).from_dict(self.decode(response))

    async def update(self, resource: _O) -> _O:
        path = resource.ref().get_path(references.Operation.UPDATE,
                                       namespace=resource.get_namespace(),
                                       name=resource.get_name())
        response = await self.request('put', path, payload=resource.to_dict())
        return type(resource).from_dict(self.decode(response))

    async def delete(self, resource: APIObject) -> bool:
        path = resource.ref().get_path(references.Operation.DELETE,
                                       namespace=resource.get_namespace(),
                                       name=resource.get_name())
        try:
            await self.request('delete', path)
        except errors.APINotFoundError as e:
            raise self._not_found(resource, e) from e
        return True

    async def list(
            self,
            template: _O,
            options: Optional[typedefs.QueryParams] = None,
    ) -> List[_O]:
        """
        List the objects of the template's kind (and namespace, if namespaced).

        The options go to the query string as they are: e.g. ``labelSelector``,
        ``fieldSelector``, ``limit``.
        """
        path = template.ref().get_path(references.Operation.LIST,
                                       namespace=template.get_namespace(),
                                       params=options)
        response = await self.request('get', path)
        raw = self.decode(response) or {}
        return [type(template).from_dict(item) for item in raw.get('items') or []]

    @staticmethod
    def _not_found(resource: APIObject, e: errors.APIError) -> errors.ResourceNotFound:
        ref = resource.ref()
        return errors.ResourceNotFound(
            e.payload,
            kind=ref.kind,
            name=resource.get_name() or '',
            namespace=resource.get_namespace() if ref.namespaced else None,
            status=e.status,
            body=e.body,
        )


_default_client: Optional[Client] = None


def get_default_client() -> Client:
    if _default_client is None:
        raise errors.InvalidArgument(
            "No Kubernetes client available. "
            "Set a default client with kubecrud.set_default_client(client), "
            "or pass the client explicitly.")
    return _default_client


def set_default_client(client: Client) -> None:
    global _default_client
    _default_client = client


def reset_default_client() -> None:
    global _default_client
    _default_client = None


def resolve_client(client: Optional[Client] = None) -> Client:
    return client if client is not None else get_default_client()
