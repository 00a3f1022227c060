"""
The raw bodies of K8s objects, as they go to/from the API.

Only the fields used by the library itself are declared. The objects
carry arbitrary other fields at runtime (e.g. ``data`` of config maps),
which the type checkers do not see.
"""
from typing import Any, List, Mapping, Optional, cast

from typing_extensions import TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    generation: int


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class ObjectReference(TypedDict, total=False):
    apiVersion: str
    kind: str
    namespace: Optional[str]
    name: str
    uid: str


def build_object_reference(body: RawBody) -> ObjectReference:
    """
    A short identity of the object for the logs; absent fields are omitted.

    E.g. new objects have no ``uid`` yet, cluster objects have no ``namespace``.
    """
    meta = body.get('metadata') or {}
    ref = {
        'apiVersion': body.get('apiVersion'),
        'kind': body.get('kind'),
        'name': meta.get('name'),
        'uid': meta.get('uid'),
        'namespace': meta.get('namespace'),
    }
    return cast(ObjectReference, {key: val for key, val in ref.items() if val})


def format_label_selector(labels: Labels) -> str:
    """ Equality-based selectors only: ``key1=value1,key2=value2``. """
    return ','.join(f'{key}={val}' for key, val in labels.items())
