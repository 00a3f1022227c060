"""
All configuration flags, options, settings to fine-tune the API client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

In this library, they are called *"settings"* (plural).
Combined, they form a *"configuration"* (singular).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).

Usage::

    settings = kubecrud.ClientSettings()
    settings.networking.request_timeout = 10
    client = kubecrud.Client(settings=settings)
"""
import dataclasses
from typing import Optional

from kubecrud._cogs.helpers import versions


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 30
    """
    A timeout for the whole API request, including reading the response.
    It is the transport's own timeout: the library adds no deadlines of its own.

    Measured in seconds. Set to `None` to disable (on your own risk).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing the TCP connection to the API server.
    If not set, only the total request timeout applies.
    """


@dataclasses.dataclass
class TransportSettings:

    user_agent: str = f'kubecrud/{versions.version or "unknown"}'
    """
    How the client identifies itself to the API server.
    """

    content_type: str = 'application/json'
    """
    The content type of the request bodies and the accepted responses.
    K8s API speaks JSON; other types are not supported by the client.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    transport: TransportSettings = dataclasses.field(default_factory=TransportSettings)
