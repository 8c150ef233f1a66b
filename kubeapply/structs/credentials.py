"""
Authentication-related structures.

A minimally sufficient data structure to bring all the credentials together
in a structured and type-annotated way. The credentials are the information
passed to the HTTP protocol and TCP/SSL connection only, and nothing more:

* TCP server host & port (as a URL).
* SSL verification/ignorance flag.
* SSL certificate authority (a path or the data).
* HTTP ``Authorization: Bearer token`` (or other schemes).
* URL's default namespace for the objects without one.

The credentials are loaded once at startup and never change afterwards.

.. seealso::
    :func:`kubeapply.clients.login.login_with_service_account`.
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the client cannot get the credentials to the API. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    server: str  # e.g. "https://localhost:443"
    ca_path: Optional[str] = None
    ca_data: Optional[bytes] = None
    insecure: Optional[bool] = None
    scheme: Optional[str] = None  # RFC-7235/5.1: e.g. Bearer, Basic, Digest, etc.
    token: Optional[str] = dataclasses.field(default=None, repr=False)
    default_namespace: Optional[str] = None
