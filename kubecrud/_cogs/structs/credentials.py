"""
Authentication-related structures.

The library supports few rudimentary authentication methods directly
(see :mod:`kubecrud._cogs.auth`), all of them implementing one and the same
contract of a credential provider, and all of them normalised into a minimally
sufficient data structure: the credential context.

The "rudimentary" is defined as the information passed to the HTTP protocol
and TCP/SSL connection only, i.e. everything usable in a generic HTTP client,
and nothing more than that:

* The API server's URL (scheme, host, port, and an optional path prefix).
* SSL verification/ignorance flag.
* SSL certificate authority.
* SSL client certificate and its private key.
* HTTP headers, usually ``Authorization: Bearer token`` or ``Basic ...``.
* The default namespace for the cases when this is implied.

.. seealso::
    :func:`kubecrud._cogs.auth.detection.authenticate`.
"""
import abc
import dataclasses
from typing import Mapping, Optional

from kubecrud._cogs.clients import errors
from kubecrud._cogs.helpers import typedefs


class AuthenticationError(errors.KubernetesError):
    """ Raised when the credentials cannot be resolved, parsed, or obtained. """


@dataclasses.dataclass(frozen=True)
class CredentialContext:
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    server_url: str  # e.g. "https://localhost:6443", never with a trailing slash.
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    ca_certificate: Optional[bytes] = None
    client_certificate: Optional[bytes] = None
    client_key: Optional[bytes] = None
    verify_ssl: bool = True
    default_namespace: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.server_url or not self.server_url.rstrip('/'):
            raise AuthenticationError("The server URL cannot be empty.")
        if self.client_certificate and not self.client_key:
            raise AuthenticationError("A client certificate is set without its private key.")

        # Since the class is frozen & read-only, post-creation field adjustment is done via a hack.
        object.__setattr__(self, 'server_url', self.server_url.rstrip('/'))
        object.__setattr__(self, 'headers', dict(self.headers))

    def __repr__(self) -> str:
        # Never expose the secrets in the logs or tracebacks, only the fact of their presence.
        clsname = self.__class__.__name__
        return (f"{clsname}(server_url={self.server_url!r}, "
                f"headers={sorted(self.headers)!r}, "
                f"ca_certificate={self.ca_certificate is not None}, "
                f"client_certificate={self.client_certificate is not None}, "
                f"verify_ssl={self.verify_ssl!r}, "
                f"default_namespace={self.default_namespace!r})")


class CredentialProvider(metaclass=abc.ABCMeta):
    """
    A source of credentials: a token, a certificate, a kubeconfig, etc.

    All strategies expose the same getters. The client only uses
    the normalised result of them, as returned by :meth:`get_context`.
    """

    @abc.abstractmethod
    def get_headers(self) -> typedefs.Headers:
        raise NotImplementedError

    @abc.abstractmethod
    def get_server_url(self) -> str:
        raise NotImplementedError

    def get_ca_certificate(self) -> Optional[bytes]:
        return None

    def should_verify_ssl(self) -> bool:
        return True

    def get_client_certificate(self) -> Optional[bytes]:
        return None

    def get_client_key(self) -> Optional[bytes]:
        return None

    def get_namespace(self) -> Optional[str]:
        return None

    @abc.abstractmethod
    def is_valid(self) -> bool:
        raise NotImplementedError

    def refresh(self) -> bool:
        return True

    def get_context(self) -> CredentialContext:
        return CredentialContext(
            server_url=self.get_server_url(),
            headers=self.get_headers(),
            ca_certificate=self.get_ca_certificate(),
            client_certificate=self.get_client_certificate(),
            client_key=self.get_client_key(),
            verify_ssl=self.should_verify_ssl(),
            default_namespace=self.get_namespace(),
        )


def to_bytes(data: Optional[str | bytes]) -> Optional[bytes]:
    """ Certificates can be given as text or as bytes; we keep them as bytes. """
    if data is None:
        return None
    return data.encode('utf-8') if isinstance(data, str) else data
