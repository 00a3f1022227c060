"""
Authentication with a kubeconfig file, as used by ``kubectl``.

Only one file is used: the first existing one of those listed in ``$KUBECONFIG``,
or ``~/.kube/config``. The files are not merged.

As per https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/
"""
import base64
import binascii
import collections.abc
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

import yaml

from kubecrud._cogs.auth import plugins
from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import credentials

logger = logging.getLogger(__name__)

DEFAULT_PATH = '~/.kube/config'

# The user's fields that produce the Authorization header, in the order of their precedence.
HEADER_FIELDS = ['token', 'tokenFile', 'exec', 'username']


def find_kubeconfig(path: Optional[str] = None) -> str:
    """
    Locate the kubeconfig file: explicitly, then via ``$KUBECONFIG``, then the default one.
    """
    if path:
        return os.path.expanduser(path)

    kubeconfig = os.environ.get('KUBECONFIG')
    paths = [path.strip() for path in kubeconfig.split(os.pathsep)] if kubeconfig else []
    paths = [os.path.expanduser(path) for path in paths if path]
    for path in paths:
        if os.path.exists(path):
            return path

    return os.path.expanduser(DEFAULT_PATH)


def load_kubeconfig(path: str) -> Dict[str, Any]:
    """
    Read and parse the kubeconfig file, but do not interpret it yet.
    """
    try:
        with open(path, encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError as e:
        raise credentials.AuthenticationError(f"Kubeconfig file not found: {path}") from e
    except OSError as e:
        raise credentials.AuthenticationError(f"Unable to read kubeconfig file: {path}") from e

    try:
        config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise credentials.AuthenticationError(f"Invalid YAML in kubeconfig: {e}") from e

    if not isinstance(config, collections.abc.Mapping):
        raise credentials.AuthenticationError(f"Kubeconfig must contain a YAML object: {path}")
    return dict(config)


def _find_named(config: Mapping[str, Any], section: str, field: str, name: str) -> Optional[Dict[str, Any]]:
    for item in config.get(section) or []:
        if isinstance(item, collections.abc.Mapping) and item.get('name') == name:
            return dict(item.get(field) or {})
    return None


class KubeconfigAuthentication(credentials.CredentialProvider):
    """
    The credentials of one context (a cluster & a user) of a kubeconfig file.

    The context can be switched later without re-reading the file.
    """

    def __init__(
            self,
            kubeconfig_path: Optional[str] = None,
            context: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.path = find_kubeconfig(kubeconfig_path)
        self._config = load_kubeconfig(self.path)
        self._current_context: Optional[str] = None
        self._context: Dict[str, Any] = {}
        self._cluster: Dict[str, Any] = {}
        self._user: Dict[str, Any] = {}
        self._exec_token: Optional[str] = None
        self._set_context(context)

    def _set_context(self, name: Optional[str]) -> None:
        name = name or self._config.get('current-context')
        if not name:
            raise credentials.AuthenticationError("No context specified and no current-context set.")

        context = _find_named(self._config, 'contexts', 'context', name)
        if context is None:
            raise credentials.AuthenticationError(f"Context {name!r} not found in kubeconfig.")

        cluster = self._load_cluster(context.get('cluster'))
        user = self._load_user(context.get('user'))

        # Replace all at once, so that a failed switch leaves the previous context intact.
        self._current_context = name
        self._context = context
        self._cluster = cluster
        self._user = user
        self._exec_token = None
        logger.debug(f"Using the kubeconfig context {name!r} from {self.path!r}.")

    def _load_cluster(self, name: Optional[str]) -> Dict[str, Any]:
        if not name:
            raise credentials.AuthenticationError("No cluster specified in context.")
        cluster = _find_named(self._config, 'clusters', 'cluster', name)
        if cluster is None:
            raise credentials.AuthenticationError(f"Cluster {name!r} not found in kubeconfig.")
        return cluster

    def _load_user(self, name: Optional[str]) -> Dict[str, Any]:
        if not name:
            raise credentials.AuthenticationError("No user specified in context.")
        user = _find_named(self._config, 'users', 'user', name)
        if user is None:
            raise credentials.AuthenticationError(f"User {name!r} not found in kubeconfig.")
        return user

    def resolve_path(self, path: str) -> str:
        """ Relative paths in a kubeconfig are relative to the kubeconfig's directory. """
        path = os.path.expanduser(path)
        if os.path.isabs(path):
            return path
        return os.path.join(os.path.dirname(os.path.abspath(self.path)), path)

    def _read_token_file(self, path: str) -> str:
        resolved = self.resolve_path(path)
        try:
            with open(resolved, encoding='utf-8') as f:
                return f.read().strip()
        except OSError as e:
            raise credentials.AuthenticationError(f"Unable to read token file: {resolved}") from e

    def _read_material(self, section: Mapping[str, Any], field: str) -> Optional[bytes]:
        data = section.get(f'{field}-data')
        if data:
            try:
                return base64.b64decode(data)
            except (binascii.Error, ValueError) as e:
                raise credentials.AuthenticationError(f"Invalid base64 data in {field}-data.") from e

        path = section.get(field)
        if path:
            resolved = self.resolve_path(path)
            if os.path.exists(resolved):
                try:
                    with open(resolved, 'rb') as f:
                        return f.read() or None
                except OSError as e:
                    raise credentials.AuthenticationError(f"Unable to read {field} file: {resolved}") from e
        return None

    def get_headers(self) -> typedefs.Headers:
        populated = [field for field in HEADER_FIELDS if self._user.get(field)]
        if 'username' in populated and not self._user.get('password'):
            populated.remove('username')
        if len(populated) > 1:
            logger.warning(f"Several authentication methods are set for the kubeconfig user; "
                           f"the last one is used: {', '.join(populated)}.")

        headers: Dict[str, str] = {}
        if self._user.get('token'):
            headers['Authorization'] = f"Bearer {self._user['token']}"
        if self._user.get('tokenFile'):
            headers['Authorization'] = f"Bearer {self._read_token_file(self._user['tokenFile'])}"
        if self._user.get('exec'):
            if self._exec_token is None:
                self._exec_token = plugins.execute(self._user['exec'])
            headers['Authorization'] = f"Bearer {self._exec_token}"
        if self._user.get('username') and self._user.get('password'):
            userpass = f"{self._user['username']}:{self._user['password']}"
            encoded = base64.b64encode(userpass.encode('utf-8')).decode('ascii')
            headers['Authorization'] = f"Basic {encoded}"
        return headers

    def get_server_url(self) -> str:
        server = self._cluster.get('server')
        if not server:
            raise credentials.AuthenticationError("No server URL found in cluster configuration.")
        return str(server)

    def get_ca_certificate(self) -> Optional[bytes]:
        return self._read_material(self._cluster, 'certificate-authority')

    def should_verify_ssl(self) -> bool:
        return not self._cluster.get('insecure-skip-tls-verify', False)

    def get_client_certificate(self) -> Optional[bytes]:
        return self._read_material(self._user, 'client-certificate')

    def get_client_key(self) -> Optional[bytes]:
        return self._read_material(self._user, 'client-key')

    def get_namespace(self) -> Optional[str]:
        return self._context.get('namespace') or None

    def is_valid(self) -> bool:
        if not self._cluster or not self._user or not self._cluster.get('server'):
            return False
        return bool(
            self._user.get('token') or
            self._user.get('tokenFile') or
            self._user.get('exec') or
            (self._user.get('username') and self._user.get('password')) or
            self._user.get('client-certificate-data') or
            self._user.get('client-certificate')
        )

    def refresh(self) -> bool:
        if self._user.get('exec'):
            try:
                self._exec_token = plugins.execute(self._user['exec'])
            except credentials.AuthenticationError as e:
                raise credentials.AuthenticationError(f"Failed to refresh exec plugin: {e}") from e
            return True

        if self._user.get('tokenFile'):
            try:
                self._read_token_file(self._user['tokenFile'])
            except credentials.AuthenticationError as e:
                raise credentials.AuthenticationError(f"Failed to refresh token file: {e}") from e
            return True

        return True

    def get_current_context(self) -> Optional[str]:
        return self._current_context

    def get_available_contexts(self) -> List[str]:
        return [item['name'] for item in self._config.get('contexts') or []
                if isinstance(item, collections.abc.Mapping) and item.get('name')]

    def switch_context(self, name: str) -> "KubeconfigAuthentication":
        self._set_context(name)
        return self
