"""
The main kubecrud module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubecrud._cogs.auth.detection import (
    authenticate,
    is_in_cluster,
    get_available_contexts,
)
from kubecrud._cogs.auth.kubeconfig import (
    KubeconfigAuthentication,
)
from kubecrud._cogs.auth.providers import (
    TokenAuthentication,
    CertificateAuthentication,
)
from kubecrud._cogs.auth.serviceaccount import (
    InClusterAuthentication,
)
from kubecrud._cogs.clients.api import (
    Client,
    get_default_client,
    set_default_client,
    reset_default_client,
)
from kubecrud._cogs.clients.errors import (
    KubernetesError,
    InvalidArgument,
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIConnectionError,
    ResourceNotFound,
    is_conflict,
)
from kubecrud._cogs.clients.transport import (
    Response,
    Transport,
    AiohttpTransport,
)
from kubecrud._cogs.configs.configuration import (
    ClientSettings,
    NetworkingSettings,
    TransportSettings,
)
from kubecrud._cogs.helpers.versions import (
    version as __version__,
)
from kubecrud._cogs.structs.bodies import (
    RawBody,
    RawMeta,
    Labels,
    Annotations,
    ObjectReference,
    build_object_reference,
    format_label_selector,
)
from kubecrud._cogs.structs.credentials import (
    AuthenticationError,
    CredentialContext,
    CredentialProvider,
)
from kubecrud._cogs.structs.references import (
    Operation,
    ResourceRef,
    api_base,
    build_path,
    pluralize,
    register_plural,
)
from kubecrud._core.actions.loggers import (
    configure,
    LogFormat,
    ObjectLogger,
)
from kubecrud._core.resources.lifecycle import (
    save,
    create,
    update,
    refresh,
    delete,
    exists,
)
from kubecrud._core.resources.querying import (
    list_objs,
)
from kubecrud._core.resources.objects import (
    Resource,
    NamespacedResource,
    spec_field,
    top_field,
)
from kubecrud._core.resources.kinds import (
    Namespace,
    Node,
    PersistentVolume,
    Pod,
    Service,
    ConfigMap,
    Secret,
    ServiceAccount,
    Endpoints,
    Event,
    LimitRange,
    PersistentVolumeClaim,
    ReplicationController,
    ResourceQuota,
    Deployment,
    StatefulSet,
    DaemonSet,
    ReplicaSet,
    Job,
    CronJob,
    HorizontalPodAutoscaler,
    HorizontalPodAutoscalerV1,
    Ingress,
    IngressClass,
    NetworkPolicy,
    ClusterRole,
    ClusterRoleBinding,
    Role,
    RoleBinding,
    TokenReview,
    TokenRequest,
    SubjectAccessReview,
    SelfSubjectAccessReview,
    LocalSubjectAccessReview,
    StorageClass,
    CSIDriver,
    VolumeAttachment,
    VolumeSnapshot,
    VolumeSnapshotClass,
    CertificateSigningRequest,
    Lease,
    EndpointSlice,
    EventsEvent,
    RuntimeClass,
    PriorityClass,
    APIService,
)

__all__ = [
    'authenticate', 'is_in_cluster', 'get_available_contexts',
    'KubeconfigAuthentication',
    'TokenAuthentication',
    'CertificateAuthentication',
    'InClusterAuthentication',
    'AuthenticationError',
    'CredentialContext',
    'CredentialProvider',
    'Client',
    'get_default_client',
    'set_default_client',
    'reset_default_client',
    'KubernetesError',
    'InvalidArgument',
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'APIConnectionError',
    'ResourceNotFound',
    'is_conflict',
    'Response', 'Transport', 'AiohttpTransport',
    'ClientSettings', 'NetworkingSettings', 'TransportSettings',
    '__version__',
    'RawBody', 'RawMeta', 'Labels', 'Annotations', 'ObjectReference',
    'build_object_reference', 'format_label_selector',
    'Operation', 'ResourceRef', 'api_base', 'build_path', 'pluralize', 'register_plural',
    'configure', 'LogFormat', 'ObjectLogger',
    'save', 'create', 'update', 'refresh', 'delete', 'exists',
    'list_objs',
    'Resource', 'NamespacedResource', 'spec_field', 'top_field',
    'Namespace', 'Node', 'PersistentVolume', 'Pod', 'Service', 'ConfigMap', 'Secret',
    'ServiceAccount', 'Endpoints', 'Event', 'LimitRange', 'PersistentVolumeClaim',
    'ReplicationController', 'ResourceQuota',
    'Deployment', 'StatefulSet', 'DaemonSet', 'ReplicaSet',
    'Job', 'CronJob',
    'HorizontalPodAutoscaler', 'HorizontalPodAutoscalerV1',
    'Ingress', 'IngressClass', 'NetworkPolicy',
    'ClusterRole', 'ClusterRoleBinding', 'Role', 'RoleBinding',
    'TokenReview', 'TokenRequest',
    'SubjectAccessReview', 'SelfSubjectAccessReview', 'LocalSubjectAccessReview',
    'StorageClass', 'CSIDriver', 'VolumeAttachment', 'VolumeSnapshot', 'VolumeSnapshotClass',
    'CertificateSigningRequest', 'Lease', 'EndpointSlice', 'EventsEvent',
    'RuntimeClass', 'PriorityClass', 'APIService',
]
