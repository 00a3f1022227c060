"""
Automatic detection of the credentials, and the named shortcuts for them.

The detection order is fixed: in-cluster first (if the pod's service account
is mounted), then the kubeconfig file. Nothing else is tried.
"""
import logging
from typing import List, Optional

from kubecrud._cogs.auth import kubeconfig as kubeconfig_
from kubecrud._cogs.auth import providers, serviceaccount
from kubecrud._cogs.structs import credentials

logger = logging.getLogger(__name__)


def authenticate(context: Optional[str] = None) -> credentials.CredentialProvider:
    """
    Detect the credentials from the environment.

    The context is only used for the kubeconfig, never for in-cluster auth.
    """
    service_account = serviceaccount.InClusterAuthentication.try_create()
    if service_account is not None:
        logger.debug("Authenticated in-cluster with the service account.")
        return service_account

    try:
        config = kubeconfig_.KubeconfigAuthentication(context=context)
    except credentials.AuthenticationError as e:
        raise credentials.AuthenticationError(
            f"No authentication method available. Tried in-cluster and kubeconfig: {e}") from e

    logger.debug(f"Authenticated with the kubeconfig: {config.path}")
    return config


def kubeconfig(
        kubeconfig_path: Optional[str] = None,
        context: Optional[str] = None,
) -> kubeconfig_.KubeconfigAuthentication:
    return kubeconfig_.KubeconfigAuthentication(kubeconfig_path, context)


def in_cluster(
        api_server_host: Optional[str] = None,
        api_server_port: Optional[int] = None,
) -> serviceaccount.InClusterAuthentication:
    return serviceaccount.InClusterAuthentication(api_server_host, api_server_port)


def token(
        server_url: str,
        token: str,
        ca_certificate: Optional[str | bytes] = None,
        verify_ssl: bool = True,
) -> providers.TokenAuthentication:
    return providers.TokenAuthentication(server_url, token, ca_certificate, verify_ssl)


def certificate(
        server_url: str,
        client_certificate: str | bytes,
        client_key: str | bytes,
        ca_certificate: Optional[str | bytes] = None,
        verify_ssl: bool = True,
) -> providers.CertificateAuthentication:
    return providers.CertificateAuthentication(
        server_url, client_certificate, client_key, ca_certificate, verify_ssl)


def is_in_cluster() -> bool:
    return serviceaccount.InClusterAuthentication.is_in_cluster()


def get_available_contexts(kubeconfig_path: Optional[str] = None) -> List[str]:
    """
    List the contexts of a kubeconfig, even if it has no current context.
    """
    path = kubeconfig_.find_kubeconfig(kubeconfig_path)
    config = kubeconfig_.load_kubeconfig(path)
    return [item['name'] for item in config.get('contexts') or []
            if isinstance(item, dict) and item.get('name')]
