"""
The lifecycle of individual objects: creation, updates, refreshes, deletion.

An object is either new (never stored, no ``resourceVersion``) or stored.
Saving a new object creates it, saving a stored object updates it.

After every successful write, the object's metadata & status are replaced
with those from the API's response (not merged!), so that the server-side
changes (uid, resourceVersion, defaults, the initial status) become visible.
The spec is never touched by the writes: it is the caller's intention,
and only a refresh brings the server's version of it.
"""
from typing import TYPE_CHECKING, Optional, TypeVar

from kubecrud._cogs.clients import api, errors
from kubecrud._core.actions import loggers

if TYPE_CHECKING:
    from kubecrud._core.resources import objects

    _R = TypeVar('_R', bound=objects.Resource)
else:
    _R = TypeVar('_R')


def _require_name(resource: "objects.Resource", action: str) -> None:
    if not resource.get_name():
        raise errors.InvalidArgument(
            f"Resource name must be set before {action}. "
            f"Use set_name() to set the resource name.")


def _hydrate(resource: _R, response: "objects.Resource", *, spec: bool = False) -> _R:
    resource.set_metadata(response.get_metadata())
    resource.set_status(response.get_status())
    if spec:
        resource.set_spec(response.get_spec())
        resource.set_fields(response.get_fields())
    return resource


async def save(resource: _R, *, client: Optional[api.Client] = None) -> _R:
    """
    Store the object in the cluster: create it if it is new, update it otherwise.
    """
    client = api.resolve_client(client)
    _require_name(resource, 'saving')
    if resource.is_new():
        return await create(resource, client=client)
    else:
        return await update(resource, client=client)


async def create(resource: _R, *, client: Optional[api.Client] = None) -> _R:
    """
    Create the object, or update it if it already exists.

    The "already exists" situation is not an error here: it usually means
    that the object was created by someone else, or by us in a previous run,
    and we did not remember its ``resourceVersion``.
    """
    client = api.resolve_client(client)
    logger = loggers.ObjectLogger(body=resource.to_dict())
    try:
        response = await client.create(resource)
    except errors.APIError as e:
        if not errors.is_conflict(e):
            raise
        logger.debug(f"The object already exists, updating instead: {e}")
        return await update(resource, client=client)

    logger.debug(f"Created the object with resourceVersion={response.get_resource_version()!r}.")
    return _hydrate(resource, response)


async def update(resource: _R, *, client: Optional[api.Client] = None) -> _R:
    client = api.resolve_client(client)
    logger = loggers.ObjectLogger(body=resource.to_dict())
    response = await client.update(resource)
    logger.debug(f"Updated the object to resourceVersion={response.get_resource_version()!r}.")
    return _hydrate(resource, response)


async def refresh(resource: _R, *, client: Optional[api.Client] = None) -> _R:
    """
    Re-read the object from the cluster, including its spec.

    Local changes, if any, are lost.
    """
    client = api.resolve_client(client)
    _require_name(resource, 'refreshing')
    response = await client.read(resource)
    return _hydrate(resource, response, spec=True)


async def delete(resource: "objects.Resource", *, client: Optional[api.Client] = None) -> bool:
    """
    Delete the object; a missing object is an error (:class:`ResourceNotFound`).
    """
    client = api.resolve_client(client)
    _require_name(resource, 'deleting')
    logger = loggers.ObjectLogger(body=resource.to_dict())
    result = await client.delete(resource)
    logger.debug("Deleted the object.")
    return result


async def exists(resource: "objects.Resource", *, client: Optional[api.Client] = None) -> bool:
    client = api.resolve_client(client)
    try:
        await client.read(resource)
    except errors.ResourceNotFound:
        return False
    return True
