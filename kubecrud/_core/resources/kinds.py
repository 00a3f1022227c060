"""
The built-in resource kinds of K8s, as served by a vanilla cluster.

Only the addressing is declared for most of them. Some popular kinds
have the shortcuts for their most used fields; all other fields are
accessible via ``get_spec()``, ``get_status()``, and ``get_fields()``.
"""
import base64
from typing import Any, Dict, List, Optional

from kubecrud._core.resources.objects import NamespacedResource, Resource, spec_field, top_field

#
# core/v1
#


class Namespace(Resource):
    api_version = 'v1'
    kind = 'Namespace'


class Node(Resource):
    api_version = 'v1'
    kind = 'Node'


class PersistentVolume(Resource):
    api_version = 'v1'
    kind = 'PersistentVolume'


class Pod(NamespacedResource):
    api_version = 'v1'
    kind = 'Pod'

    containers = spec_field('containers', [])
    restart_policy = spec_field('restartPolicy', 'Always')

    @property
    def phase(self) -> Optional[str]:
        return self.get_status().get('phase')

    @property
    def conditions(self) -> List[Dict[str, Any]]:
        return list(self.get_status().get('conditions') or [])

    def add_container(self, container: Dict[str, Any]) -> "Pod":
        self.get_spec().setdefault('containers', []).append(container)
        return self


class Service(NamespacedResource):
    api_version = 'v1'
    kind = 'Service'

    type = spec_field('type')
    selector = spec_field('selector', {})
    ports = spec_field('ports', [])
    cluster_ip = spec_field('clusterIP')
    external_name = spec_field('externalName')

    def add_port(self, port: Dict[str, Any]) -> "Service":
        self.get_spec().setdefault('ports', []).append(port)
        return self


class ConfigMap(NamespacedResource):
    api_version = 'v1'
    kind = 'ConfigMap'

    data = top_field('data', {})
    binary_data = top_field('binaryData', {})
    immutable = top_field('immutable', False)

    def add_data(self, key: str, value: str) -> "ConfigMap":
        self.get_fields().setdefault('data', {})[key] = value
        return self


class Secret(NamespacedResource):
    api_version = 'v1'
    kind = 'Secret'

    type = top_field('type')
    data = top_field('data', {})
    string_data = top_field('stringData', {})
    immutable = top_field('immutable', False)

    def add_data(self, key: str, value: str | bytes) -> "Secret":
        """ Add a value to ``data``; it is base64-encoded here, as the API expects. """
        raw = value.encode('utf-8') if isinstance(value, str) else value
        self.get_fields().setdefault('data', {})[key] = base64.b64encode(raw).decode('ascii')
        return self

    def add_string_data(self, key: str, value: str) -> "Secret":
        self.get_fields().setdefault('stringData', {})[key] = value
        return self

    def decode_data(self) -> Dict[str, bytes]:
        return {key: base64.b64decode(val) for key, val in (self.data or {}).items()}


class ServiceAccount(NamespacedResource):
    api_version = 'v1'
    kind = 'ServiceAccount'


class Endpoints(NamespacedResource):
    api_version = 'v1'
    kind = 'Endpoints'


class Event(NamespacedResource):
    api_version = 'v1'
    kind = 'Event'


class LimitRange(NamespacedResource):
    api_version = 'v1'
    kind = 'LimitRange'


class PersistentVolumeClaim(NamespacedResource):
    api_version = 'v1'
    kind = 'PersistentVolumeClaim'


class ReplicationController(NamespacedResource):
    api_version = 'v1'
    kind = 'ReplicationController'

    replicas = spec_field('replicas')


class ResourceQuota(NamespacedResource):
    api_version = 'v1'
    kind = 'ResourceQuota'


#
# apps/v1
#


class Deployment(NamespacedResource):
    api_version = 'apps/v1'
    kind = 'Deployment'

    replicas = spec_field('replicas')
    selector = spec_field('selector', {})
    template = spec_field('template', {})
    strategy = spec_field('strategy', {})


class StatefulSet(NamespacedResource):
    api_version = 'apps/v1'
    kind = 'StatefulSet'

    replicas = spec_field('replicas')
    selector = spec_field('selector', {})
    template = spec_field('template', {})
    service_name = spec_field('serviceName')


class DaemonSet(NamespacedResource):
    api_version = 'apps/v1'
    kind = 'DaemonSet'

    selector = spec_field('selector', {})
    template = spec_field('template', {})


class ReplicaSet(NamespacedResource):
    api_version = 'apps/v1'
    kind = 'ReplicaSet'

    replicas = spec_field('replicas')
    selector = spec_field('selector', {})
    template = spec_field('template', {})


#
# batch/v1
#


class Job(NamespacedResource):
    api_version = 'batch/v1'
    kind = 'Job'

    template = spec_field('template', {})
    backoff_limit = spec_field('backoffLimit')


class CronJob(NamespacedResource):
    api_version = 'batch/v1'
    kind = 'CronJob'

    schedule = spec_field('schedule')
    job_template = spec_field('jobTemplate', {})
    suspend = spec_field('suspend', False)


#
# autoscaling
#


class HorizontalPodAutoscaler(NamespacedResource):
    api_version = 'autoscaling/v2'
    kind = 'HorizontalPodAutoscaler'

    min_replicas = spec_field('minReplicas')
    max_replicas = spec_field('maxReplicas')


class HorizontalPodAutoscalerV1(NamespacedResource):
    api_version = 'autoscaling/v1'
    kind = 'HorizontalPodAutoscaler'

    min_replicas = spec_field('minReplicas')
    max_replicas = spec_field('maxReplicas')


#
# networking.k8s.io/v1
#


class Ingress(NamespacedResource):
    api_version = 'networking.k8s.io/v1'
    kind = 'Ingress'

    ingress_class_name = spec_field('ingressClassName')
    rules = spec_field('rules', [])


class IngressClass(Resource):
    api_version = 'networking.k8s.io/v1'
    kind = 'IngressClass'


class NetworkPolicy(NamespacedResource):
    api_version = 'networking.k8s.io/v1'
    kind = 'NetworkPolicy'


#
# rbac.authorization.k8s.io/v1 -- no spec, only the top-level fields.
#


class ClusterRole(Resource):
    api_version = 'rbac.authorization.k8s.io/v1'
    kind = 'ClusterRole'

    rules = top_field('rules', [])


class ClusterRoleBinding(Resource):
    api_version = 'rbac.authorization.k8s.io/v1'
    kind = 'ClusterRoleBinding'

    role_ref = top_field('roleRef', {})
    subjects = top_field('subjects', [])


class Role(NamespacedResource):
    api_version = 'rbac.authorization.k8s.io/v1'
    kind = 'Role'

    rules = top_field('rules', [])


class RoleBinding(NamespacedResource):
    api_version = 'rbac.authorization.k8s.io/v1'
    kind = 'RoleBinding'

    role_ref = top_field('roleRef', {})
    subjects = top_field('subjects', [])


#
# Authentication & authorization reviews: create-only.
#


class TokenReview(Resource):
    api_version = 'authentication.k8s.io/v1'
    kind = 'TokenReview'


class TokenRequest(NamespacedResource):
    api_version = 'authentication.k8s.io/v1'
    kind = 'TokenRequest'

    audiences = spec_field('audiences', [])
    expiration_seconds = spec_field('expirationSeconds')

    @property
    def token(self) -> Optional[str]:
        return self.get_status().get('token')

    def add_audience(self, audience: str) -> "TokenRequest":
        self.get_spec().setdefault('audiences', []).append(audience)
        return self


class SubjectAccessReview(Resource):
    api_version = 'authorization.k8s.io/v1'
    kind = 'SubjectAccessReview'


class SelfSubjectAccessReview(Resource):
    api_version = 'authorization.k8s.io/v1'
    kind = 'SelfSubjectAccessReview'


class LocalSubjectAccessReview(NamespacedResource):
    api_version = 'authorization.k8s.io/v1'
    kind = 'LocalSubjectAccessReview'


#
# Storage.
#


class StorageClass(Resource):
    api_version = 'storage.k8s.io/v1'
    kind = 'StorageClass'

    provisioner = top_field('provisioner')
    parameters = top_field('parameters', {})
    reclaim_policy = top_field('reclaimPolicy')


class CSIDriver(Resource):
    api_version = 'storage.k8s.io/v1'
    kind = 'CSIDriver'


class VolumeAttachment(Resource):
    api_version = 'storage.k8s.io/v1'
    kind = 'VolumeAttachment'


class VolumeSnapshot(NamespacedResource):
    api_version = 'snapshot.storage.k8s.io/v1'
    kind = 'VolumeSnapshot'


class VolumeSnapshotClass(Resource):
    api_version = 'snapshot.storage.k8s.io/v1'
    kind = 'VolumeSnapshotClass'


#
# Everything else.
#


class CertificateSigningRequest(Resource):
    api_version = 'certificates.k8s.io/v1'
    kind = 'CertificateSigningRequest'


class Lease(NamespacedResource):
    api_version = 'coordination.k8s.io/v1'
    kind = 'Lease'

    holder_identity = spec_field('holderIdentity')
    lease_duration_seconds = spec_field('leaseDurationSeconds')


class EndpointSlice(NamespacedResource):
    api_version = 'discovery.k8s.io/v1'
    kind = 'EndpointSlice'


class EventsEvent(NamespacedResource):
    api_version = 'events.k8s.io/v1'
    kind = 'Event'


class RuntimeClass(Resource):
    api_version = 'node.k8s.io/v1'
    kind = 'RuntimeClass'

    handler = top_field('handler')


class PriorityClass(Resource):
    api_version = 'scheduling.k8s.io/v1'
    kind = 'PriorityClass'

    value = top_field('value')
    global_default = top_field('globalDefault', False)


class APIService(Resource):
    api_version = 'apiregistration.k8s.io/v1'
    kind = 'APIService'
