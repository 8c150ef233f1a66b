"""
Rudimentary login with the pod's service account.

The client is intended to run inside the cluster, where every pod gets
its service account's token, the cluster's CA certificate, and the pod's
namespace mounted as files, and the API server's address in the environment.

Authentication capabilities are limited to keep the code short & simple.
No kubeconfig parsing or sophisticated multi-step token retrieval is performed.
"""
import os
from typing import Optional

from kubeapply.structs import credentials

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'
CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'

DEFAULT_SERVER = 'https://kubernetes.default.svc'
DEFAULT_PORT = '443'


def get_in_cluster_server() -> str:
    """
    Get the API server's URL as injected into every pod's environment.
    """
    host = os.environ.get('KUBERNETES_SERVICE_HOST')
    port = os.environ.get('KUBERNETES_SERVICE_PORT') or DEFAULT_PORT
    if not host:
        return DEFAULT_SERVER
    if ':' in host and not host.startswith('['):  # IPv6
        host = f'[{host}]'
    return f'https://{host}:{port}'


def login_with_service_account() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login that gets the raw data from a service account.

    Returns ``None`` if there is no service account token (not in a pod).
    """
    if os.path.exists(TOKEN_PATH):
        with open(TOKEN_PATH, encoding='utf-8') as f:
            token = f.read().strip()

        namespace: Optional[str] = None
        if os.path.exists(NAMESPACE_PATH):
            with open(NAMESPACE_PATH, encoding='utf-8') as f:
                namespace = f.read().strip()

        ca_data: Optional[bytes] = None
        if os.path.exists(CA_PATH):
            with open(CA_PATH, 'rb') as f:
                ca_data = f.read()

        return credentials.ConnectionInfo(
            server=get_in_cluster_server(),
            ca_data=ca_data or None,
            token=token or None,
            default_namespace=namespace or None,
        )
    else:
        return None
