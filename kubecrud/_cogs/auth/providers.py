"""
Explicit credentials: given directly by the caller, with no discovery at all.
"""
from typing import Optional

from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import credentials


def _require_server_url(server_url: str) -> str:
    if not server_url or not server_url.rstrip('/'):
        raise credentials.AuthenticationError("Server URL cannot be empty.")
    return server_url.rstrip('/')


class TokenAuthentication(credentials.CredentialProvider):
    """
    A static bearer token, e.g. of a service account copied from elsewhere.
    """

    def __init__(
            self,
            server_url: str,
            token: str,
            ca_certificate: Optional[str | bytes] = None,
            verify_ssl: bool = True,
    ) -> None:
        super().__init__()
        self._server_url = _require_server_url(server_url)
        self._token = ''
        self._ca_certificate = credentials.to_bytes(ca_certificate)
        self._verify_ssl = verify_ssl
        self.set_token(token)

    def get_headers(self) -> typedefs.Headers:
        return {'Authorization': f'Bearer {self._token}'}

    def get_server_url(self) -> str:
        return self._server_url

    def get_ca_certificate(self) -> Optional[bytes]:
        return self._ca_certificate

    def should_verify_ssl(self) -> bool:
        return self._verify_ssl

    def is_valid(self) -> bool:
        return bool(self._server_url and self._token)

    def get_token(self) -> str:
        return self._token

    def set_token(self, token: str) -> "TokenAuthentication":
        if not token:
            raise credentials.AuthenticationError("Token cannot be empty.")
        self._token = token
        return self

    def set_ca_certificate(self, ca_certificate: Optional[str | bytes]) -> "TokenAuthentication":
        self._ca_certificate = credentials.to_bytes(ca_certificate)
        return self

    def set_verify_ssl(self, verify_ssl: bool) -> "TokenAuthentication":
        self._verify_ssl = verify_ssl
        return self


class CertificateAuthentication(credentials.CredentialProvider):
    """
    A client certificate with its private key (mutual TLS), no HTTP headers.
    """

    def __init__(
            self,
            server_url: str,
            client_certificate: str | bytes,
            client_key: str | bytes,
            ca_certificate: Optional[str | bytes] = None,
            verify_ssl: bool = True,
    ) -> None:
        super().__init__()
        self._server_url = _require_server_url(server_url)
        self._client_certificate = b''
        self._client_key = b''
        self._ca_certificate = credentials.to_bytes(ca_certificate)
        self._verify_ssl = verify_ssl
        self.set_certificate_and_key(client_certificate, client_key)

    def get_headers(self) -> typedefs.Headers:
        return {}

    def get_server_url(self) -> str:
        return self._server_url

    def get_ca_certificate(self) -> Optional[bytes]:
        return self._ca_certificate

    def should_verify_ssl(self) -> bool:
        return self._verify_ssl

    def get_client_certificate(self) -> Optional[bytes]:
        return self._client_certificate

    def get_client_key(self) -> Optional[bytes]:
        return self._client_key

    def is_valid(self) -> bool:
        return bool(self._server_url and self._client_certificate and self._client_key)

    def set_certificate_and_key(
            self,
            client_certificate: str | bytes,
            client_key: str | bytes,
    ) -> "CertificateAuthentication":
        if not client_certificate:
            raise credentials.AuthenticationError("Client certificate cannot be empty.")
        if not client_key:
            raise credentials.AuthenticationError("Client key cannot be empty.")
        self._client_certificate = credentials.to_bytes(client_certificate) or b''
        self._client_key = credentials.to_bytes(client_key) or b''
        return self

    def load_from_files(self, cert_path: str, key_path: str) -> "CertificateAuthentication":
        """
        Rotate the certificate & key pair from the PEM files on disk.
        """
        try:
            with open(cert_path, 'rb') as f:
                certificate = f.read()
        except OSError as e:
            raise credentials.AuthenticationError(f"Cannot read certificate file: {cert_path}") from e
        try:
            with open(key_path, 'rb') as f:
                key = f.read()
        except OSError as e:
            raise credentials.AuthenticationError(f"Cannot read key file: {key_path}") from e
        return self.set_certificate_and_key(certificate, key)

    def set_ca_certificate(self, ca_certificate: Optional[str | bytes]) -> "CertificateAuthentication":
        self._ca_certificate = credentials.to_bytes(ca_certificate)
        return self

    def set_verify_ssl(self, verify_ssl: bool) -> "CertificateAuthentication":
        self._verify_ssl = verify_ssl
        return self
