import json
import logging.handlers

import pytest

from kubecrud import ObjectLogger
from kubecrud._core.actions.loggers import ObjectJsonFormatter, ObjectPrefixingJsonFormatter, \
                                           ObjectPrefixingTextFormatter, ObjectTextFormatter


@pytest.fixture()
def ns_body():
    return {
        'kind': 'kind1',
        'apiVersion': 'api1/v1',
        'metadata': {'uid': 'uid1', 'name': 'name1', 'namespace': 'namespace1'},
    }


@pytest.fixture()
def cluster_body():
    return {
        'kind': 'kind1',
        'apiVersion': 'api1/v1',
        'metadata': {'uid': 'uid1', 'name': 'name1'},
    }


@pytest.fixture()
def buffer():
    handler = logging.handlers.BufferingHandler(capacity=100)
    logger = logging.getLogger('kubecrud.objects')
    logger.addHandler(handler)
    yield handler.buffer
    logger.removeHandler(handler)


@pytest.fixture()
def ns_record(buffer, ns_body):
    ObjectLogger(body=ns_body).info("hello")
    return buffer[0]


@pytest.fixture()
def cluster_record(buffer, cluster_body):
    ObjectLogger(body=cluster_body).info("hello")
    return buffer[0]


def test_reference_is_attached(ns_record):
    assert ns_record.k8s_ref == {
        'apiVersion': 'api1/v1',
        'kind': 'kind1',
        'name': 'name1',
        'uid': 'uid1',
        'namespace': 'namespace1',
    }


def test_reference_omits_absent_fields(cluster_record):
    assert 'namespace' not in cluster_record.k8s_ref


def test_message_extras_are_merged(buffer, ns_body):
    ObjectLogger(body=ns_body).info("hello", extra={'custom': 'value'})
    assert buffer[0].custom == 'value'
    assert buffer[0].k8s_ref['name'] == 'name1'


def test_prefixing_text_formatter_adds_prefixes_when_namespaced(ns_record):
    formatter = ObjectPrefixingTextFormatter()
    formatted = formatter.format(ns_record)
    assert formatted == '[namespace1/name1] hello'


def test_prefixing_text_formatter_adds_prefixes_when_cluster(cluster_record):
    formatter = ObjectPrefixingTextFormatter()
    formatted = formatter.format(cluster_record)
    assert formatted == '[name1] hello'


def test_prefixing_does_not_alter_the_original_record(ns_record):
    ObjectPrefixingTextFormatter().format(ns_record)
    assert ns_record.msg == 'hello'


def test_prefixing_json_formatter_adds_prefixes_when_namespaced(ns_record):
    formatter = ObjectPrefixingJsonFormatter()
    formatted = formatter.format(ns_record)
    decoded = json.loads(formatted)
    assert decoded['message'] == '[namespace1/name1] hello'


def test_regular_text_formatter_omits_prefixes(ns_record):
    formatter = ObjectTextFormatter()
    formatted = formatter.format(ns_record)
    assert formatted == 'hello'


def test_regular_json_formatter_omits_prefixes(ns_record):
    formatter = ObjectJsonFormatter()
    formatted = formatter.format(ns_record)
    decoded = json.loads(formatted)
    assert decoded['message'] == 'hello'


def test_json_has_the_reference_under_the_default_key(ns_record):
    formatter = ObjectJsonFormatter()
    decoded = json.loads(formatter.format(ns_record))
    assert decoded['object']['name'] == 'name1'
    assert decoded['object']['namespace'] == 'namespace1'
    assert 'k8s_ref' not in decoded
    assert 'timestamp' in decoded


def test_json_has_the_reference_under_a_custom_key(ns_record):
    formatter = ObjectJsonFormatter(refkey='k8s-obj')
    decoded = json.loads(formatter.format(ns_record))
    assert decoded['k8s-obj']['uid'] == 'uid1'
    assert 'object' not in decoded


@pytest.mark.parametrize('level, severity', [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
    (logging.CRITICAL, 'fatal'),
])
def test_json_severity(buffer, ns_body, level, severity):
    ObjectLogger(body=ns_body).log(level, "hello")
    decoded = json.loads(ObjectJsonFormatter().format(buffer[0]))
    assert decoded['severity'] == severity
