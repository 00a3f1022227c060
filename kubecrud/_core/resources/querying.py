"""
Queries by the resource kind: by names, by labels, or just everything.

All of them are built on top of two API calls: reading one object by its name,
and listing a collection with the query options (e.g. ``labelSelector``).
"""
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Type, TypeVar

from kubecrud._cogs.clients import api, errors
from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import bodies

if TYPE_CHECKING:
    from kubecrud._core.resources import objects

    _R = TypeVar('_R', bound=objects.Resource)
else:
    _R = TypeVar('_R')

logger = logging.getLogger(__name__)


def make_template(cls: Type[_R], *, name: Optional[str] = None, namespace: Optional[str] = None) -> _R:
    """
    An empty object of the kind, which only serves as the address for the API calls.

    The namespace is ignored for the cluster-scoped kinds.
    """
    template = cls()
    if name is not None:
        template.set_name(name)
    if namespace is not None and cls.namespaced:
        template.get_metadata()['namespace'] = namespace
    return template


async def list_objs(
        template: _R,
        options: Optional[typedefs.QueryParams] = None,
        *,
        client: Optional[api.Client] = None,
) -> List[_R]:
    """
    List the objects of the template's kind and namespace, as the template's class.
    """
    client = api.resolve_client(client)
    return await client.list(template, options)


async def all_objs(
        cls: Type[_R],
        *,
        namespace: Optional[str] = None,
        options: Optional[typedefs.QueryParams] = None,
        client: Optional[api.Client] = None,
) -> List[_R]:
    template = make_template(cls, namespace=namespace)
    return await list_objs(template, options, client=client)


async def get(
        cls: Type[_R],
        name: str,
        *,
        namespace: Optional[str] = None,
        client: Optional[api.Client] = None,
) -> _R:
    if not name:
        raise errors.InvalidArgument("Resource name cannot be empty.")
    client = api.resolve_client(client)
    template = make_template(cls, name=name, namespace=namespace)
    return await client.read(template)


async def get_many(
        cls: Type[_R],
        names: List[str],
        *,
        namespace: Optional[str] = None,
        client: Optional[api.Client] = None,
) -> Dict[str, _R]:
    """
    Read the objects one by one. The missing objects are skipped silently.

    Other errors are escalated as usual, and the already read objects are lost.
    """
    if not names:
        raise errors.InvalidArgument("Names list cannot be empty.")
    client = api.resolve_client(client)
    result: Dict[str, _R] = {}
    for name in names:
        try:
            result[name] = await get(cls, name, namespace=namespace, client=client)
        except errors.ResourceNotFound:
            logger.debug(f"Skipping the absent {cls.kind} {name!r}.")
    return result


async def find_by_labels(
        cls: Type[_R],
        labels: bodies.Labels,
        *,
        namespace: Optional[str] = None,
        client: Optional[api.Client] = None,
) -> List[_R]:
    if not labels:
        raise errors.InvalidArgument("Labels cannot be empty.")
    options = {'labelSelector': bodies.format_label_selector(labels)}
    return await all_objs(cls, namespace=namespace, options=options, client=client)


async def find_one_by_labels(
        cls: Type[_R],
        labels: bodies.Labels,
        *,
        namespace: Optional[str] = None,
        client: Optional[api.Client] = None,
) -> Optional[_R]:
    found = await find_by_labels(cls, labels, namespace=namespace, client=client)
    return found[0] if found else None
