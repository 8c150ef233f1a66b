import functools
import textwrap

import click.testing
import pytest

from kubeapply.cli import main
from kubeapply.clients.k8sapi import K8sAPI
from kubeapply.structs.credentials import ConnectionInfo
from kubeapply.structs.results import Result

MANIFEST1 = textwrap.dedent("""
    apiVersion: v1
    kind: Service
    metadata:
      name: svc-a
      namespace: ns1
    spec:
      ports: [{port: 80}]
""")

MANIFEST2 = textwrap.dedent("""
    apiVersion: apps/v1
    kind: Deployment
    metadata:
      name: dep-a
      namespace: ns1
    ---
    apiVersion: v1
    kind: ConfigMap
    metadata:
      name: cfg-a
      namespace: ns1
""")


@pytest.fixture(autouse=True)
def srcdir(tmpdir):
    tmpdir.join('manifest1.yaml').write(MANIFEST1)
    tmpdir.join('manifest2.yaml').write(MANIFEST2)
    tmpdir.join('broken.yaml').write('- not\n- an\n- object\n')
    with tmpdir.as_cwd():
        yield tmpdir


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def login(mocker):
    info = ConnectionInfo(server='https://sa-server', token='sa-token', default_namespace='sa-ns')
    return mocker.patch('kubeapply.clients.login.login_with_service_account', return_value=info)


@pytest.fixture()
def no_login(mocker):
    return mocker.patch('kubeapply.clients.login.login_with_service_account', return_value=None)


@pytest.fixture()
def apply_object(mocker):
    return mocker.patch.object(K8sAPI, 'apply_object', return_value=Result(status=201, data={}))


@pytest.fixture()
def delete_object(mocker):
    return mocker.patch.object(K8sAPI, 'delete_object', return_value=Result(status=200, data={}))
