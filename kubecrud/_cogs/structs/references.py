"""
Addressing of the resources in K8s API: from the kinds to the URL paths.

K8s API only needs an API group, an API version, a plural name of the resource,
and optionally a namespace and a name of the object. The objects, however,
carry only their ``apiVersion`` and ``kind``. The plural name is derived
from the kind with the K8s' conventions and a table of known exceptions.

All functions here are pure: no I/O, no caches of the paths, no discovery.
"""
import dataclasses
import enum
import urllib.parse
from typing import Dict, List, Optional

from kubecrud._cogs.clients import errors
from kubecrud._cogs.helpers import typedefs

# The core v1 API is served from its own legacy base path; all the others are grouped.
CORE_API_VERSION = 'v1'
CORE_API_BASE = '/api/v1'

# Irregular plurals that the suffix rules would get wrong. The table is append-only:
# new kinds are added via `register_plural()` rather than by changing the rules.
PLURALS: Dict[str, str] = {
    'Endpoints': 'endpoints',
    'NetworkPolicy': 'networkpolicies',
    'IngressClass': 'ingressclasses',
    'StorageClass': 'storageclasses',
    'PriorityClass': 'priorityclasses',
    'RuntimeClass': 'runtimeclasses',
    'VolumeSnapshot': 'volumesnapshots',
    'CSIDriver': 'csidrivers',
    'CSINode': 'csinodes',
    'CSIStorageCapacity': 'csistoragecapacities',
}


class Operation(str, enum.Enum):
    """ The API operations, as far as the URL paths are concerned. """
    GET = 'get'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    LIST = 'list'
    WATCH = 'watch'

    @property
    def is_specific(self) -> bool:
        """ Whether the operation addresses one object by its name (vs. a collection). """
        return self in (Operation.GET, Operation.UPDATE, Operation.DELETE)


def register_plural(kind: str, plural: str) -> None:
    """
    Teach the path resolver an irregular plural name of a kind.

    Usually needed for custom resources, whose plural names are arbitrary.
    """
    if not kind or not plural:
        raise errors.InvalidArgument("Both the kind and its plural name must be non-empty.")
    PLURALS[kind] = plural


def pluralize(kind: str) -> str:
    """
    Convert the resource kind to the plural name as used in the URLs.

    The rules are checked in this exact order, the first match wins:

    * the known exceptions (e.g. ``Endpoints`` -> ``endpoints``);
    * ``...y`` -> ``...ies`` (e.g. ``NetworkPolicy`` -> ``networkpolicies``);
    * ``...s``, ``...sh``, ``...ch``, ``...x``, ``...z`` -> ``...es``
      (e.g. ``Ingress`` -> ``ingresses``);
    * everything else -> ``...s`` (e.g. ``Pod`` -> ``pods``).
    """
    if not kind:
        raise errors.InvalidArgument("The resource kind cannot be empty.")
    if kind in PLURALS:
        return PLURALS[kind]

    lowered = kind.lower()
    if lowered.endswith('y'):
        return lowered[:-1] + 'ies'
    if lowered.endswith(('s', 'sh', 'ch', 'x', 'z')):
        return lowered + 'es'
    return lowered + 's'


def api_base(api_version: str) -> str:
    """
    The base path of an API group & version: ``/api/v1`` or ``/apis/{group}/{version}``.
    """
    if not api_version:
        raise errors.InvalidArgument("The API version cannot be empty.")
    if api_version == CORE_API_VERSION:
        return CORE_API_BASE
    return f'/apis/{api_version}'


def build_path(
        api_version: str,
        kind: str,
        operation: Operation,
        *,
        namespaced: bool,
        namespace: Optional[str] = None,
        name: Optional[str] = None,
        params: Optional[typedefs.QueryParams] = None,
) -> str:
    """
    Build a URL path to be used with K8s API (relative to the server's root).

    The namespace is only used for the namespaced resources, and only if set;
    cluster-scoped resources never have the namespace segment, even if given.

    The name is used only for the operations on the individual objects
    (get, update, delete), and is required for them. The operations on
    the collections (create, list, watch) ignore it.

    Params go to the query parameters (``?param1=value1&param2=value2...``).
    """
    operation = Operation(operation)
    if operation.is_specific and not name:
        raise errors.InvalidArgument(f"The resource name is required for {operation.value!r}.")

    parts: List[Optional[str]] = [
        api_base(api_version),
        'namespaces' if namespaced and namespace else None,
        namespace if namespaced and namespace else None,
        pluralize(kind),
        name if operation.is_specific else None,
    ]

    # K8s API expects lowercase booleans: e.g. ``?watch=true``, not ``?watch=True``.
    params = {key: (str(val).lower() if isinstance(val, bool) else val)
              for key, val in (params or {}).items()}
    query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
    path = '/'.join([part for part in parts if part])
    return path + ('?' if query else '') + query


@dataclasses.dataclass(frozen=True)
class ResourceRef:
    """
    A reference to a very specific resource kind, as used in the URLs.

    It is derived from every object anew (the API version can differ
    from object to object of the same class) and is never cached.
    """

    api_version: str
    """
    The resource's API group & version; e.g. ``"v1"``, ``"apps/v1"``.
    """

    kind: str
    """
    The resource's kind (as in YAML files); e.g. ``"Pod"``, ``"Deployment"``.
    """

    namespaced: bool = False
    """
    Whether the resource is namespaced (``True``) or cluster-scoped (``False``).
    """

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'.strip('.')

    @property
    def group(self) -> str:
        """ The API group, or an empty string for the core v1 API. """
        return self.api_version.rsplit('/', 1)[0] if '/' in self.api_version else ''

    @property
    def version(self) -> str:
        return self.api_version.rsplit('/', 1)[-1]

    @property
    def plural(self) -> str:
        return pluralize(self.kind)

    def get_path(
            self,
            operation: Operation,
            *,
            namespace: Optional[str] = None,
            name: Optional[str] = None,
            params: Optional[typedefs.QueryParams] = None,
    ) -> str:
        return build_path(
            self.api_version,
            self.kind,
            operation,
            namespaced=self.namespaced,
            namespace=namespace,
            name=name,
            params=params,
        )
