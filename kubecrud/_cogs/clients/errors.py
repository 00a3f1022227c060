"""
K8s API errors.

The underlying HTTP library (now, ``aiohttp``) can be replaced by any other
transport. We cannot rely on its exceptions all over the code in the library.
Hence, we have our own hierarchy of exceptions for K8s API errors.

Unlike the original errors of the transport, these errors contain more
information about the reasons -- as provided by K8s API in its response bodies,
not guessed only by HTTP statuses alone. The original errors of the transport
are chained as the causes of our own errors -- for better explainability
of errors in the stack traces.

Some selected reasons of K8s API errors are made into their own classes,
so that they could be intercepted and handled by the callers without
parsing the messages: e.g. 404 for existence checks, 409 for conflicts.
All other reasons are raised as the base error class and are indistinguishable
from each other (except via the exception's fields).
"""
import collections.abc
import json
from typing import Any, Collection, Optional, Type

from typing_extensions import Literal, TypedDict


class KubernetesError(Exception):
    """ The root of all errors raised by this library. """


class InvalidArgument(KubernetesError, ValueError):
    """ Raised when a precondition of an operation is violated before any I/O. """


class RawStatusCause(TypedDict):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict):
    apiVersion: str
    kind: Literal["Status"]
    code: int
    status: Literal["Success", "Failure"]
    reason: str
    message: str
    details: RawStatusDetails


class APIError(KubernetesError):
    """
    A non-2xx response from K8s API, or a failure to reach or understand it.

    The HTTP ``status`` is ``0`` if no response was received at all.
    The raw ``body`` is kept for diagnostics, the parsed ``payload`` --
    only if it was a genuine K8s ``Status`` object.
    """

    def __init__(
            self,
            payload: Optional[RawStatus],
            *,
            status: int,
            body: Optional[str] = None,
            text: Optional[str] = None,
    ) -> None:
        message = text or (payload.get('message') if payload else None)
        message = message or (f"API request failed with status {status}: {body}" if body else None)
        super().__init__(message or f"API request failed with status {status}")
        self._status = status
        self._payload = payload
        self._body = body

    @property
    def status(self) -> int:
        return self._status

    @property
    def body(self) -> Optional[str]:
        return self._body

    @property
    def payload(self) -> Optional[RawStatus]:
        return self._payload

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message') if self._payload else None

    @property
    def details(self) -> Optional[RawStatusDetails]:
        return self._payload.get('details') if self._payload else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    pass


class APIConnectionError(APIError):
    """ No response was received: DNS, TCP, TLS, or timeout failures. """


class ResourceNotFound(APINotFoundError):
    """
    A specific resource is absent in the cluster (HTTP 404 on read/delete).
    """

    def __init__(
            self,
            payload: Optional[RawStatus] = None,
            *,
            kind: str,
            name: str,
            namespace: Optional[str] = None,
            status: int = 404,
            body: Optional[str] = None,
    ) -> None:
        text = (f"Resource {kind} '{name}' not found in namespace '{namespace}'" if namespace else
                f"Resource {kind} '{name}' not found")
        super().__init__(payload, status=status, body=body, text=text)
        self.kind = kind
        self.name = name
        self.namespace = namespace


def classify(status: int) -> Type[APIError]:
    return (
        APIUnauthorizedError if status == 401 else
        APIForbiddenError if status == 403 else
        APINotFoundError if status == 404 else
        APIConflictError if status == 409 else
        APIError
    )


def parse_status(body: Optional[str]) -> Optional[RawStatus]:
    """
    Extract the K8s ``Status`` object from the error response, if it is there.
    """
    payload: Any
    try:
        payload = json.loads(body) if body else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    # Better be safe: who knows which sensitive information can be dumped unless kind==Status.
    if not isinstance(payload, collections.abc.Mapping) or payload.get('kind') != 'Status':
        return None
    return payload  # type: ignore


def check_response(
        status: int,
        body: Optional[str],
) -> None:
    """
    Check for specialised K8s errors, and raise with extended information.
    """
    if not 200 <= status < 300:
        payload = parse_status(body)
        cls = classify(status)
        raise cls(payload, status=status, body=body)


def is_conflict(exc: BaseException) -> bool:
    """
    Check if the error means that the object already exists.

    The status code is the only signal when the response was received.
    The message is checked only for the errors without a known status
    (e.g. from custom transports), never the raw response body.
    """
    if isinstance(exc, APIConflictError):
        return True
    if isinstance(exc, APIError) and exc.status:
        return exc.status == 409
    text = str(exc)
    return any(marker in text for marker in ['already exists', '409', 'Conflict'])
