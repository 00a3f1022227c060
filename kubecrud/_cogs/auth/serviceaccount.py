"""
In-cluster authentication with the pod's service account.

As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
"""
import logging
import os
from typing import Optional

from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import credentials

logger = logging.getLogger(__name__)

# Keep as constants to make them patchable.
TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'
NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'

HOST_ENV = 'KUBERNETES_SERVICE_HOST'
PORT_ENV = 'KUBERNETES_SERVICE_PORT'


def _read_file(path: str, *, required: bool) -> Optional[str]:
    try:
        with open(path, encoding='utf-8') as f:
            return f.read().strip()
    except OSError as e:
        if required:
            raise credentials.AuthenticationError(f"Cannot read the service account file: {path}") from e
        return None


class InClusterAuthentication(credentials.CredentialProvider):
    """
    The service account's token, CA, and namespace, as mounted into every pod.

    The token is mandatory, the CA and the namespace are optional.
    """

    def __init__(
            self,
            api_server_host: Optional[str] = None,
            api_server_port: Optional[int] = None,
    ) -> None:
        super().__init__()
        host = api_server_host or os.environ.get(HOST_ENV)
        port = api_server_port or os.environ.get(PORT_ENV)
        if not host or not port:
            raise credentials.AuthenticationError(
                f"In-cluster authentication requires {HOST_ENV} and {PORT_ENV} environment variables.")
        try:
            self._port = int(port)
        except ValueError as e:
            raise credentials.AuthenticationError(f"Invalid {PORT_ENV}: {port!r}") from e
        self._host = host
        self._token: Optional[str] = None
        self._ca_certificate: Optional[bytes] = None
        self._namespace: Optional[str] = None
        self._load()

    def _load(self) -> None:
        self._token = _read_file(TOKEN_PATH, required=True) or None
        self._ca_certificate = credentials.to_bytes(_read_file(CA_PATH, required=False) or None)
        self._namespace = _read_file(NAMESPACE_PATH, required=False) or None

    @staticmethod
    def is_in_cluster() -> bool:
        return (os.path.exists(TOKEN_PATH) and
                os.environ.get(HOST_ENV) is not None and
                os.environ.get(PORT_ENV) is not None)

    @classmethod
    def try_create(cls) -> Optional["InClusterAuthentication"]:
        """ Same as the constructor, but with ``None`` for "not in a cluster". """
        if not cls.is_in_cluster():
            return None
        try:
            return cls()
        except credentials.AuthenticationError as e:
            logger.debug(f"In-cluster authentication is not possible: {e}")
            return None

    def get_headers(self) -> typedefs.Headers:
        if not self._token:
            raise credentials.AuthenticationError("Service account token is not available.")
        return {'Authorization': f'Bearer {self._token}'}

    def get_server_url(self) -> str:
        # IPv6 literals must be bracketed in URLs, e.g. https://[fd00::1]:443
        host = self._host
        if ':' in host and not host.startswith('['):
            host = f'[{host}]'
        return f'https://{host}:{self._port}'

    def get_ca_certificate(self) -> Optional[bytes]:
        return self._ca_certificate

    def get_namespace(self) -> Optional[str]:
        return self._namespace

    def get_token(self) -> Optional[str]:
        return self._token

    def is_valid(self) -> bool:
        return bool(self._token and self._host and self._port > 0)

    def refresh(self) -> bool:
        # Projected tokens are rotated by kubelet in place, so re-reading is enough.
        self._load()
        return self.is_valid()
