import json

import pytest

from kubeapply.clients.k8sapi import K8sAPI
from kubeapply.structs.results import Result


def test_apply_of_one_file(invoke, login, apply_object):
    result = invoke(['apply', '-f', 'manifest1.yaml'])
    assert result.exit_code == 0
    assert 'Service/svc-a: 201' in result.output
    assert apply_object.call_count == 1
    assert apply_object.call_args[0][0]['metadata']['name'] == 'svc-a'


def test_apply_of_multiple_files_in_order(invoke, login, apply_object):
    result = invoke(['apply', '-f', 'manifest2.yaml', '--filename', 'manifest1.yaml'])
    assert result.exit_code == 0
    names = [call[0][0]['metadata']['name'] for call in apply_object.call_args_list]
    assert names == ['dep-a', 'cfg-a', 'svc-a']


def test_apply_from_stdin(invoke, login, apply_object, srcdir):
    result = invoke(['apply', '-f', '-'], input=srcdir.join('manifest1.yaml').read())
    assert result.exit_code == 0
    assert apply_object.call_count == 1


def test_apply_failures_set_the_exit_code(invoke, login, mocker):
    status = {'kind': 'Status', 'reason': 'Forbidden', 'message': 'no access'}
    mocker.patch.object(K8sAPI, 'apply_object', side_effect=[
        Result(status=403, data=status),
        Result(status=201, data={}),
    ])
    result = invoke(['apply', '-f', 'manifest2.yaml'])
    assert result.exit_code == 1
    assert 'Deployment/dep-a: 403 (Forbidden: no access)' in result.output
    assert 'ConfigMap/cfg-a: 201' in result.output


def test_apply_of_invalid_objects_continues(invoke, login, mocker):
    mocker.patch.object(K8sAPI, 'apply_object', side_effect=[
        ValueError("The object has no name"),
        Result(status=201, data={}),
    ])
    result = invoke(['apply', '-f', 'manifest2.yaml'])
    assert result.exit_code == 1
    assert 'Deployment/dep-a: The object has no name' in result.output
    assert 'ConfigMap/cfg-a: 201' in result.output


def test_delete(invoke, login, delete_object, apply_object):
    result = invoke(['delete', '-f', 'manifest1.yaml'])
    assert result.exit_code == 0
    assert 'Service/svc-a: 200' in result.output
    assert delete_object.call_count == 1
    assert not apply_object.called


def test_delete_of_absent_objects(invoke, login, mocker):
    mocker.patch.object(K8sAPI, 'delete_object', return_value=Result(status=404, data={'kind': 'Status', 'reason': 'NotFound', 'message': 'gone'}))
    result = invoke(['delete', '-f', 'manifest1.yaml'])
    assert result.exit_code == 1
    assert 'Service/svc-a: 404 (NotFound: gone)' in result.output


def test_get(invoke, login, mocker):
    get = mocker.patch.object(K8sAPI, 'get', return_value=Result(status=200, data={'kind': 'PodList', 'items': []}))
    result = invoke(['get', '/api/v1/namespaces/ns1/pods'])
    assert result.exit_code == 0
    assert get.call_args[0][0] == '/api/v1/namespaces/ns1/pods'
    assert json.loads(result.output) == {'kind': 'PodList', 'items': []}


def test_get_failures_set_the_exit_code(invoke, login, mocker):
    mocker.patch.object(K8sAPI, 'get', return_value=Result(status=404, data={'kind': 'Status'}))
    result = invoke(['get', '/api/v1/namespaces/ns1/pods/absent'])
    assert result.exit_code == 1


@pytest.mark.parametrize('cmd', ['apply', 'delete'])
def test_filename_is_required(invoke, login, apply_object, delete_object, cmd):
    result = invoke([cmd])
    assert result.exit_code == 2
    assert not apply_object.called
    assert not delete_object.called


def test_absent_files_are_usage_errors(invoke, login, apply_object):
    result = invoke(['apply', '-f', 'absent.yaml'])
    assert result.exit_code == 2
    assert 'absent.yaml' in result.output
    assert not apply_object.called


def test_broken_manifests_are_usage_errors(invoke, login, apply_object):
    result = invoke(['apply', '-f', 'broken.yaml'])
    assert result.exit_code == 2
    assert 'not an object' in result.output
    assert not apply_object.called
