import pytest

from kubecrud import InvalidArgument, Operation, ResourceRef, api_base, build_path, \
                     pluralize, register_plural
from kubecrud._cogs.structs import references


@pytest.fixture(autouse=True)
def _isolated_plurals(mocker):
    mocker.patch.dict(references.PLURALS)


@pytest.mark.parametrize('api_version, expected', [
    ('v1', '/api/v1'),
    ('apps/v1', '/apis/apps/v1'),
    ('networking.k8s.io/v1', '/apis/networking.k8s.io/v1'),
    ('kubecrud.dev/v1beta1', '/apis/kubecrud.dev/v1beta1'),
])
def test_api_base(api_version, expected):
    assert api_base(api_version) == expected


def test_api_base_requires_version():
    with pytest.raises(InvalidArgument):
        api_base('')


@pytest.mark.parametrize('kind, expected', [
    ('Endpoints', 'endpoints'),         # exception table
    ('NetworkPolicy', 'networkpolicies'),  # exception table
    ('CSIStorageCapacity', 'csistoragecapacities'),  # exception table
    ('Policy', 'policies'),             # y -> ies
    ('Ingress', 'ingresses'),           # s -> es
    ('Mesh', 'meshes'),                 # sh -> es
    ('Batch', 'batches'),               # ch -> es
    ('Box', 'boxes'),                   # x -> es
    ('Quiz', 'quizes'),                 # z -> es
    ('Pod', 'pods'),                    # default
    ('Deployment', 'deployments'),      # default
    ('Namespace', 'namespaces'),        # default
])
def test_pluralize(kind, expected):
    assert pluralize(kind) == expected


def test_pluralize_requires_kind():
    with pytest.raises(InvalidArgument):
        pluralize('')


def test_register_plural_extends_exceptions():
    assert pluralize('Octopus') == 'octopuses'
    register_plural('Octopus', 'octopi')
    assert pluralize('Octopus') == 'octopi'
    assert references.PLURALS['Octopus'] == 'octopi'


@pytest.mark.parametrize('kind, plural', [('', 'x'), ('X', '')])
def test_register_plural_requires_both(kind, plural):
    with pytest.raises(InvalidArgument):
        register_plural(kind, plural)


@pytest.mark.parametrize('operation', [Operation.GET, Operation.UPDATE, Operation.DELETE])
def test_deployment_instance_path(operation):
    path = build_path('apps/v1', 'Deployment', operation,
                      namespaced=True, namespace='default', name='web')
    assert path == '/apis/apps/v1/namespaces/default/deployments/web'


@pytest.mark.parametrize('operation', [Operation.CREATE, Operation.LIST, Operation.WATCH])
def test_deployment_collection_path(operation):
    path = build_path('apps/v1', 'Deployment', operation,
                      namespaced=True, namespace='default', name='web')
    assert path == '/apis/apps/v1/namespaces/default/deployments'


def test_namespaced_without_namespace_has_no_segment():
    path = build_path('v1', 'Pod', Operation.LIST, namespaced=True)
    assert path == '/api/v1/pods'


@pytest.mark.parametrize('operation, expected', [
    (Operation.GET, '/api/v1/nodes/node1'),
    (Operation.LIST, '/api/v1/nodes'),
])
def test_cluster_scoped_ignores_namespace(operation, expected):
    path = build_path('v1', 'Node', operation, namespaced=False, namespace='default', name='node1')
    assert path == expected
    assert '/namespaces/' not in path


@pytest.mark.parametrize('operation', [Operation.GET, Operation.UPDATE, Operation.DELETE])
@pytest.mark.parametrize('name', [None, ''])
def test_instance_operations_require_name(operation, name):
    with pytest.raises(InvalidArgument):
        build_path('v1', 'Pod', operation, namespaced=True, namespace='default', name=name)


def test_operations_accept_strings():
    path = build_path('v1', 'Pod', 'get', namespaced=True, namespace='ns1', name='pod1')
    assert path == '/api/v1/namespaces/ns1/pods/pod1'


def test_params_go_to_query_string():
    path = build_path('v1', 'Pod', Operation.LIST, namespaced=True, namespace='ns1',
                      params={'labelSelector': 'app=web,tier=db', 'limit': 10})
    assert path == '/api/v1/namespaces/ns1/pods?labelSelector=app%3Dweb%2Ctier%3Ddb&limit=10'


def test_params_lowercase_booleans():
    path = build_path('v1', 'Pod', Operation.WATCH, namespaced=False, params={'watch': True})
    assert path == '/api/v1/pods?watch=true'


def test_empty_params_add_no_question_mark():
    path = build_path('v1', 'Pod', Operation.LIST, namespaced=False, params={})
    assert path == '/api/v1/pods'


def test_resource_ref_of_core_api():
    ref = ResourceRef('v1', 'Pod', namespaced=True)
    assert ref.group == ''
    assert ref.version == 'v1'
    assert ref.plural == 'pods'
    assert repr(ref) == 'pods.v1'


def test_resource_ref_of_grouped_api():
    ref = ResourceRef('networking.k8s.io/v1', 'NetworkPolicy', namespaced=True)
    assert ref.group == 'networking.k8s.io'
    assert ref.version == 'v1'
    assert ref.plural == 'networkpolicies'
    assert repr(ref) == 'networkpolicies.v1.networking.k8s.io'


def test_resource_ref_builds_paths():
    ref = ResourceRef('apps/v1', 'Deployment', namespaced=True)
    assert ref.get_path(Operation.GET, namespace='default', name='web') == \
        '/apis/apps/v1/namespaces/default/deployments/web'
    assert ref.get_path(Operation.LIST) == '/apis/apps/v1/deployments'
