"""
The in-memory representation of K8s objects.

Every resource kind is a class with three class-level attributes:
``api_version``, ``kind``, and ``namespaced``. They are declared statically
and are never guessed from the class hierarchy or from the objects' contents.

The objects themselves are thin: they keep the ``metadata``, ``spec``,
``status``, and other top-level fields (e.g. ``data`` of config maps) as plain
dicts, exactly as they go to/from the API.
"""
import collections.abc
import copy
import json
import os.path
from typing import Any, ClassVar, Dict, List, Mapping, MutableMapping, Optional, Type, TypeVar

import yaml

from kubecrud._cogs.clients import api, errors
from kubecrud._cogs.helpers import typedefs
from kubecrud._cogs.structs import bodies, references
from kubecrud._core.resources import lifecycle, querying

_R = TypeVar('_R', bound='Resource')

# The top-level fields with a dedicated treatment; all others are kept as "fields".
RESERVED_FIELDS = frozenset({'apiVersion', 'kind', 'metadata', 'spec', 'status'})

YAML_EXTENSIONS = ('.yaml', '.yml')


class Resource:
    """
    A K8s object of any kind, cluster-scoped by default.

    The subclasses only declare their API version & kind, and optionally
    add the convenience accessors for the kind-specific fields.
    Custom resources are declared the same way as the built-in ones::

        class KubecrudExample(kubecrud.NamespacedResource):
            api_version = 'kubecrud.dev/v1'
            kind = 'KubecrudExample'
    """

    api_version: ClassVar[str] = ''
    kind: ClassVar[str] = ''
    namespaced: ClassVar[bool] = False

    def __init__(
            self,
            metadata: Optional[Mapping[str, Any]] = None,
            spec: Optional[Mapping[str, Any]] = None,
            status: Optional[Mapping[str, Any]] = None,
            **fields: Any,
    ) -> None:
        super().__init__()
        self._metadata: Dict[str, Any] = dict(metadata or {})
        self._spec: Dict[str, Any] = dict(spec or {})
        self._status: Dict[str, Any] = dict(status or {})
        self._fields: Dict[str, Any] = dict(fields)

    def __repr__(self) -> str:
        namespace = self.get_namespace()
        name = self.get_name()
        ident = f'{namespace}/{name}' if namespace else f'{name}'
        return f'<{self.__class__.__name__} {ident}>'

    def ref(self) -> references.ResourceRef:
        return references.ResourceRef(
            api_version=self.api_version,
            kind=self.kind,
            namespaced=self.namespaced,
        )

    def get_metadata(self) -> Dict[str, Any]:
        return self._metadata

    def set_metadata(self: _R, metadata: Mapping[str, Any]) -> _R:
        self._metadata = dict(metadata)
        return self

    def get_spec(self) -> Dict[str, Any]:
        return self._spec

    def set_spec(self: _R, spec: Mapping[str, Any]) -> _R:
        self._spec = dict(spec)
        return self

    def get_status(self) -> Dict[str, Any]:
        return self._status

    def set_status(self: _R, status: Mapping[str, Any]) -> _R:
        self._status = dict(status)
        return self

    def get_fields(self) -> Dict[str, Any]:
        """ The top-level fields other than metadata, spec, status (e.g. ``data``). """
        return self._fields

    def set_fields(self: _R, fields: Mapping[str, Any]) -> _R:
        self._fields = {key: val for key, val in fields.items() if key not in RESERVED_FIELDS}
        return self

    def get_name(self) -> Optional[str]:
        return self._metadata.get('name')

    def set_name(self: _R, name: str) -> _R:
        self._metadata['name'] = name
        return self

    def get_namespace(self) -> Optional[str]:
        """ Cluster-scoped objects never have a namespace, even if it is in the metadata. """
        return self._metadata.get('namespace') if self.namespaced else None

    def get_labels(self) -> Dict[str, str]:
        return dict(self._metadata.get('labels') or {})

    def set_labels(self: _R, labels: Mapping[str, str]) -> _R:
        self._metadata['labels'] = dict(labels)
        return self

    def get_annotations(self) -> Dict[str, str]:
        return dict(self._metadata.get('annotations') or {})

    def set_annotations(self: _R, annotations: Mapping[str, str]) -> _R:
        self._metadata['annotations'] = dict(annotations)
        return self

    def get_resource_version(self) -> Optional[str]:
        return self._metadata.get('resourceVersion')

    def get_uid(self) -> Optional[str]:
        return self._metadata.get('uid')

    def is_new(self) -> bool:
        """ Whether the object was never stored in the cluster (as far as we know). """
        return not self._metadata.get('resourceVersion')

    #
    # Serialisation.
    #

    def to_dict(self) -> bodies.RawBody:
        """
        The body as sent to the API. Empty spec & status are omitted.
        """
        body: Dict[str, Any] = {
            'apiVersion': self.api_version,
            'kind': self.kind,
            'metadata': copy.deepcopy(self._metadata),
        }
        if self._spec:
            body['spec'] = copy.deepcopy(self._spec)
        if self._status:
            body['status'] = copy.deepcopy(self._status)
        body.update(copy.deepcopy(self._fields))
        return body  # type: ignore

    @classmethod
    def from_dict(cls: Type[_R], data: Mapping[str, Any]) -> _R:
        if not isinstance(data, collections.abc.Mapping):
            raise errors.InvalidArgument(f"A resource must be a mapping, got {type(data).__name__}.")
        data = copy.deepcopy(dict(data))
        resource = cls(
            metadata=data.get('metadata') or {},
            spec=data.get('spec') or {},
            status=data.get('status') or {},
        )
        resource.set_fields(data)
        return resource

    def to_json(self, **kwargs: Any) -> str:
        kwargs.setdefault('ensure_ascii', False)
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls: Type[_R], text: str | bytes) -> _R:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise errors.InvalidArgument(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise errors.InvalidArgument(f"Invalid JSON: expected an object, got {type(data).__name__}.")
        return cls.from_dict(data)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    @classmethod
    def from_yaml(cls: Type[_R], text: str | bytes) -> _R:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise errors.InvalidArgument(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise errors.InvalidArgument(f"Invalid YAML: expected an object, got {type(data).__name__}.")
        return cls.from_dict(data)

    def to_file(self, path: str) -> None:
        """ Write as YAML for ``.yaml``/``.yml`` files, and as JSON for all others. """
        is_yaml = os.path.splitext(path)[1].lower() in YAML_EXTENSIONS
        content = self.to_yaml() if is_yaml else self.to_json(indent=4)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

    @classmethod
    def from_file(cls: Type[_R], path: str) -> _R:
        try:
            with open(path, encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise errors.InvalidArgument(f"Unable to read file: {path}") from e
        is_yaml = os.path.splitext(path)[1].lower() in YAML_EXTENSIONS
        return cls.from_yaml(content) if is_yaml else cls.from_json(content)

    #
    # Lifecycle of an individual object.
    #

    async def save(self: _R, client: Optional[api.Client] = None) -> _R:
        return await lifecycle.save(self, client=client)

    async def refresh(self: _R, client: Optional[api.Client] = None) -> _R:
        return await lifecycle.refresh(self, client=client)

    async def delete(self, client: Optional[api.Client] = None) -> bool:
        return await lifecycle.delete(self, client=client)

    async def exists(self, client: Optional[api.Client] = None) -> bool:
        return await lifecycle.exists(self, client=client)

    #
    # Queries by the resource kind.
    #

    @classmethod
    async def get(
            cls: Type[_R],
            name: str,
            namespace: Optional[str] = None,
            client: Optional[api.Client] = None,
    ) -> _R:
        return await querying.get(cls, name, namespace=namespace, client=client)

    @classmethod
    async def get_many(
            cls: Type[_R],
            names: List[str],
            namespace: Optional[str] = None,
            client: Optional[api.Client] = None,
    ) -> Dict[str, _R]:
        return await querying.get_many(cls, names, namespace=namespace, client=client)

    @classmethod
    async def all(
            cls: Type[_R],
            namespace: Optional[str] = None,
            options: Optional[typedefs.QueryParams] = None,
            client: Optional[api.Client] = None,
    ) -> List[_R]:
        return await querying.all_objs(cls, namespace=namespace, options=options, client=client)

    @classmethod
    async def find_by_labels(
            cls: Type[_R],
            labels: bodies.Labels,
            namespace: Optional[str] = None,
            client: Optional[api.Client] = None,
    ) -> List[_R]:
        return await querying.find_by_labels(cls, labels, namespace=namespace, client=client)

    @classmethod
    async def find_one_by_labels(
            cls: Type[_R],
            labels: bodies.Labels,
            namespace: Optional[str] = None,
            client: Optional[api.Client] = None,
    ) -> Optional[_R]:
        return await querying.find_one_by_labels(cls, labels, namespace=namespace, client=client)


class NamespacedResource(Resource):
    """
    A K8s object of a namespaced kind.

    The namespace can be absent: then, the operations go to the cluster-wide
    paths (e.g. listing the objects in all namespaces).
    """

    namespaced: ClassVar[bool] = True

    def set_namespace(self: _R, namespace: str) -> _R:
        self._metadata['namespace'] = namespace
        return self


def spec_field(field: str, default: Any = None) -> Any:
    """ A shortcut for the accessors of the kind-specific fields, see :mod:`kinds`. """
    def getter(self: Resource) -> Any:
        return self.get_spec().get(field, copy.copy(default))

    def setter(self: Resource, value: Any) -> None:
        self.get_spec()[field] = value

    return property(getter, setter, doc=f"The ``spec.{field}`` of the object.")


def top_field(field: str, default: Any = None) -> Any:
    """ The same as :func:`spec_field`, but for the top-level fields (e.g. ``data``). """
    def getter(self: Resource) -> Any:
        return self.get_fields().get(field, copy.copy(default))

    def setter(self: Resource, value: Any) -> None:
        fields: MutableMapping[str, Any] = self.get_fields()
        fields[field] = value

    return property(getter, setter, doc=f"The top-level ``{field}`` of the object.")
