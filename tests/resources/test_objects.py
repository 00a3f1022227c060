import base64
import json

import pytest
import yaml

import kubecrud
from kubecrud import ConfigMap, Deployment, HorizontalPodAutoscaler, InvalidArgument, \
                     NamespacedResource, Node, Pod, Resource, Secret, Service


class KubecrudExample(NamespacedResource):
    api_version = 'kubecrud.dev/v1'
    kind = 'KubecrudExample'


def test_new_object_is_empty():
    pod = Pod()
    assert pod.get_name() is None
    assert pod.get_namespace() is None
    assert pod.get_metadata() == {}
    assert pod.get_spec() == {}
    assert pod.get_status() == {}
    assert pod.get_fields() == {}
    assert pod.is_new()


def test_setters_are_chainable():
    pod = Pod().set_name('pod1').set_namespace('ns1').set_labels({'app': 'web'})
    assert pod.get_name() == 'pod1'
    assert pod.get_namespace() == 'ns1'
    assert pod.get_labels() == {'app': 'web'}


def test_annotations():
    pod = Pod(metadata={'annotations': {'a': 'b'}})
    assert pod.get_annotations() == {'a': 'b'}
    pod.set_annotations({'c': 'd'})
    assert pod.get_metadata()['annotations'] == {'c': 'd'}


def test_cluster_objects_have_no_namespace():
    node = Node(metadata={'name': 'node1', 'namespace': 'ns1'})
    assert node.get_namespace() is None
    assert not hasattr(node, 'set_namespace')


def test_stored_object_is_not_new():
    pod = Pod(metadata={'name': 'pod1', 'resourceVersion': '12', 'uid': 'uid1'})
    assert not pod.is_new()
    assert pod.get_resource_version() == '12'
    assert pod.get_uid() == 'uid1'


def test_repr():
    assert repr(Pod(metadata={'name': 'pod1', 'namespace': 'ns1'})) == '<Pod ns1/pod1>'
    assert repr(Node(metadata={'name': 'node1'})) == '<Node node1>'


def test_ref():
    ref = Deployment().ref()
    assert ref.api_version == 'apps/v1'
    assert ref.kind == 'Deployment'
    assert ref.namespaced
    assert ref.plural == 'deployments'
    assert ref.group == 'apps'


def test_to_dict_omits_empty_sections():
    pod = Pod(metadata={'name': 'pod1'})
    assert pod.to_dict() == {'apiVersion': 'v1', 'kind': 'Pod', 'metadata': {'name': 'pod1'}}


def test_to_dict_is_a_copy():
    pod = Pod(metadata={'name': 'pod1'}, spec={'containers': []})
    body = pod.to_dict()
    body['metadata']['name'] = 'changed'
    body['spec']['containers'].append({})
    assert pod.get_name() == 'pod1'
    assert pod.containers == []


def test_from_dict():
    pod = Pod.from_dict({
        'apiVersion': 'v1',
        'kind': 'Pod',
        'metadata': {'name': 'pod1', 'namespace': 'ns1'},
        'spec': {'restartPolicy': 'Never'},
        'status': {'phase': 'Pending'},
    })
    assert pod.get_namespace() == 'ns1'
    assert pod.restart_policy == 'Never'
    assert pod.phase == 'Pending'
    assert pod.get_fields() == {}


def test_from_dict_keeps_top_level_fields():
    cm = ConfigMap.from_dict({'metadata': {'name': 'cm1'}, 'data': {'a': 'b'}, 'immutable': True})
    assert cm.data == {'a': 'b'}
    assert cm.immutable is True
    assert cm.get_spec() == {}
    assert cm.to_dict()['data'] == {'a': 'b'}


@pytest.mark.parametrize('data', [None, [], 'text'])
def test_from_dict_rejects_non_mappings(data):
    with pytest.raises(InvalidArgument):
        Pod.from_dict(data)


def test_json():
    pod = Pod(metadata={'name': 'pod1'}, spec={'containers': [{'name': 'main'}]})
    text = pod.to_json()
    assert json.loads(text) == pod.to_dict()
    restored = Pod.from_json(text)
    assert restored.to_dict() == pod.to_dict()


@pytest.mark.parametrize('text', ['not json', '[1, 2]', '"string"'])
def test_invalid_json(text):
    with pytest.raises(InvalidArgument, match=r"Invalid JSON"):
        Pod.from_json(text)


def test_yaml():
    deployment = Deployment.from_yaml('''
        apiVersion: apps/v1
        kind: Deployment
        metadata:
          name: web
        spec:
          replicas: 3
    '''.replace('\n        ', '\n'))
    assert deployment.get_name() == 'web'
    assert deployment.replicas == 3
    assert yaml.safe_load(deployment.to_yaml()) == deployment.to_dict()


def test_yaml_keeps_the_order_of_keys():
    text = Pod(metadata={'name': 'pod1'}, spec={'x': 1}).to_yaml()
    assert text.index('apiVersion') < text.index('kind') < text.index('metadata') < text.index('spec')


@pytest.mark.parametrize('text', ['key: [', '- a\n- b\n', ''])
def test_invalid_yaml(text):
    with pytest.raises(InvalidArgument, match=r"Invalid YAML"):
        Pod.from_yaml(text)


@pytest.mark.parametrize('filename', ['pod.yaml', 'pod.yml', 'pod.json', 'pod.txt'])
def test_files(tmp_path, filename):
    path = str(tmp_path / filename)
    pod = Pod(metadata={'name': 'pod1'}, spec={'containers': [{'name': 'main'}]})
    pod.to_file(path)
    assert Pod.from_file(path).to_dict() == pod.to_dict()


def test_file_formats_by_extension(tmp_path):
    pod = Pod(metadata={'name': 'pod1'})
    pod.to_file(str(tmp_path / 'pod.json'))
    pod.to_file(str(tmp_path / 'pod.yaml'))
    assert (tmp_path / 'pod.json').read_text().startswith('{')
    assert (tmp_path / 'pod.yaml').read_text().startswith('apiVersion: v1')


def test_absent_file(tmp_path):
    with pytest.raises(InvalidArgument, match=r"Unable to read file"):
        Pod.from_file(str(tmp_path / 'absent.yaml'))


def test_custom_resource():
    obj = KubecrudExample(metadata={'name': 'kex1', 'namespace': 'ns1'}, spec={'field': 'value'})
    assert obj.ref().get_path(kubecrud.Operation.GET, namespace='ns1', name='kex1') == \
        '/apis/kubecrud.dev/v1/namespaces/ns1/kubecrudexamples/kex1'
    assert obj.to_dict()['apiVersion'] == 'kubecrud.dev/v1'


def test_base_resource_is_cluster_scoped():
    assert not Resource.namespaced
    assert NamespacedResource.namespaced


def test_pod_accessors():
    pod = Pod()
    assert pod.containers == []
    assert pod.restart_policy == 'Always'
    assert pod.phase is None
    assert pod.conditions == []
    pod.add_container({'name': 'main', 'image': 'nginx'}).add_container({'name': 'sidecar'})
    assert [c['name'] for c in pod.containers] == ['main', 'sidecar']


def test_default_values_are_not_shared():
    pod1, pod2 = Pod(), Pod()
    pod1.containers.append({'name': 'ghost'})
    assert pod2.containers == []


def test_service_accessors():
    service = Service(spec={'type': 'ClusterIP', 'clusterIP': '10.0.0.1'})
    service.selector = {'app': 'web'}
    service.add_port({'port': 80})
    assert service.type == 'ClusterIP'
    assert service.cluster_ip == '10.0.0.1'
    assert service.get_spec() == {'type': 'ClusterIP', 'clusterIP': '10.0.0.1',
                                  'selector': {'app': 'web'}, 'ports': [{'port': 80}]}


def test_config_map_data_is_top_level():
    cm = ConfigMap(metadata={'name': 'cm1'}).add_data('key', 'value')
    assert cm.to_dict() == {'apiVersion': 'v1', 'kind': 'ConfigMap',
                            'metadata': {'name': 'cm1'}, 'data': {'key': 'value'}}


def test_secret_data_is_encoded():
    secret = Secret(metadata={'name': 's1'}, type='Opaque')
    secret.add_data('password', 'hunter2').add_data('blob', b'\x00\x01')
    secret.add_string_data('plain', 'text')
    assert secret.data['password'] == base64.b64encode(b'hunter2').decode('ascii')
    assert secret.decode_data() == {'password': b'hunter2', 'blob': b'\x00\x01'}
    assert secret.to_dict()['type'] == 'Opaque'
    assert secret.to_dict()['stringData'] == {'plain': 'text'}


def test_deployment_accessors():
    deployment = Deployment()
    deployment.replicas = 5
    assert deployment.get_spec() == {'replicas': 5}
    assert deployment.template == {}


@pytest.mark.parametrize('cls, path', [
    (HorizontalPodAutoscaler, '/apis/autoscaling/v2/namespaces/ns1/horizontalpodautoscalers'),
    (kubecrud.HorizontalPodAutoscalerV1, '/apis/autoscaling/v1/namespaces/ns1/horizontalpodautoscalers'),
    (kubecrud.Ingress, '/apis/networking.k8s.io/v1/namespaces/ns1/ingresses'),
    (kubecrud.NetworkPolicy, '/apis/networking.k8s.io/v1/namespaces/ns1/networkpolicies'),
    (kubecrud.Endpoints, '/api/v1/namespaces/ns1/endpoints'),
    (kubecrud.CronJob, '/apis/batch/v1/namespaces/ns1/cronjobs'),
    (kubecrud.StorageClass, '/apis/storage.k8s.io/v1/storageclasses'),
    (kubecrud.EventsEvent, '/apis/events.k8s.io/v1/namespaces/ns1/events'),
])
def test_kind_paths(cls, path):
    assert cls().ref().get_path(kubecrud.Operation.LIST, namespace='ns1') == path


def test_token_request_accessors():
    request = kubecrud.TokenRequest(metadata={'name': 'sa1', 'namespace': 'ns1'})
    request.add_audience('api').add_audience('vault')
    request.expiration_seconds = 600
    assert request.get_spec() == {'audiences': ['api', 'vault'], 'expirationSeconds': 600}
    assert request.token is None
    request.set_status({'token': 'issued'})
    assert request.token == 'issued'
