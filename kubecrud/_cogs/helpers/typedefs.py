"""
Common type aliases used across the codebase.

``logging.LoggerAdapter`` is generic only in the type stubs, not at runtime,
hence the conditional definition.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# HTTP headers as passed around between the credential providers and the transports.
Headers = Dict[str, str]

# Query parameters of the API calls: ``labelSelector``, ``fieldSelector``, ``limit``, etc.
QueryParams = Mapping[str, Union[str, int, bool]]
