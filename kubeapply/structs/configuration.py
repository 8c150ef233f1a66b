"""
All configuration flags, options, settings to fine-tune a client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

All of the settings have reasonable defaults, so that a freshly created
`ClientSettings` object is usable as is. The explicit per-call arguments,
such as ``timeout=``, always take precedence over the settings.
"""
import dataclasses
from typing import Optional

from kubeapply.structs import references


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = None
    """
    A total timeout (in seconds) for every API request, including the time
    to connect and to read the response body.

    The default is ``None``, i.e. no timeout: the requests are awaited
    as long as needed, unless cancelled by the caller.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout (in seconds) for establishing a connection to the API server,
    including the TLS handshake. ``None`` means no separate connect timeout.
    """


@dataclasses.dataclass
class ResourceSettings:

    pluralizer: references.Pluralizer = references.naive_plural
    """
    A function to derive the plural name of a resource from its kind,
    as used in the URLs (``Service`` -> ``services``).

    The default is the naive ``kind.lower() + 's'``, which is known to fail
    for the irregular plurals (``Proxy`` -> ``proxys``). It is kept as is
    for compatibility; replace it for the resources with irregular plurals.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    resources: ResourceSettings = dataclasses.field(default_factory=ResourceSettings)
