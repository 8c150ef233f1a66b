"""
The main kubeapply module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubeapply.clients.errors import (
    APIResponseError,
    RawStatus,
)
from kubeapply.clients.k8sapi import (
    K8sAPI,
)
from kubeapply.clients.login import (
    login_with_service_account,
)
from kubeapply.engines.loggers import (
    LogFormat,
    ObjectLogger,
    configure,
)
from kubeapply.helpers.typedefs import (
    Logger,
)
from kubeapply.helpers.versions import (
    version as __version__,
)
from kubeapply.structs.bodies import (
    RawBody,
    RawMeta,
)
from kubeapply.structs.configuration import (
    ClientSettings,
    NetworkingSettings,
    ResourceSettings,
)
from kubeapply.structs.credentials import (
    ConnectionInfo,
    LoginError,
)
from kubeapply.structs.references import (
    Pluralizer,
    naive_plural,
    get_plural_path,
    get_object_path,
)
from kubeapply.structs.results import (
    Result,
)

__all__ = [
    'APIResponseError',
    'RawStatus',
    'K8sAPI',
    'login_with_service_account',
    'LogFormat',
    'ObjectLogger',
    'configure',
    'Logger',
    'RawBody',
    'RawMeta',
    'ClientSettings',
    'NetworkingSettings',
    'ResourceSettings',
    'ConnectionInfo',
    'LoginError',
    'Pluralizer',
    'naive_plural',
    'get_plural_path',
    'get_object_path',
    'Result',
]
