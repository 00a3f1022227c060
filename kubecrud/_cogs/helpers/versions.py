"""
The library's own version, as installed; used in the default User-Agent.
"""
import importlib.metadata
from typing import Optional

version: Optional[str]

try:
    version = importlib.metadata.version(__name__.split('.')[0])
except importlib.metadata.PackageNotFoundError:
    version = None  # e.g. running from a source tree
