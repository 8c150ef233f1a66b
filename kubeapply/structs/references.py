"""
Addressing of the resources in the Kubernetes API by their objects.

The URL of an object is derived from its own fields only: ``apiVersion``,
``kind``, ``metadata.namespace``, ``metadata.name``. No discovery API is used,
so the plural name of the resource is guessed from its kind.

The default guess is naive: the kind is lowercased and suffixed with ``s``.
It works for most built-in and custom resources (``Service`` -> ``services``),
but not for the irregular plurals (``Proxy`` -> ``proxys``, not ``proxies``;
``Ingress`` -> ``ingresss``, not ``ingresses``). This is kept as the default
for compatibility. Use a custom pluralizer in the settings when needed::

    settings = kubeapply.ClientSettings()
    settings.resources.pluralizer = lambda kind: {'Ingress': 'ingresses'}.get(kind) or kind.lower() + 's'
"""
import urllib.parse
from typing import Any, Callable, Mapping, Optional

from kubeapply.structs import bodies

Pluralizer = Callable[[str], str]


def naive_plural(kind: str) -> str:
    return f'{kind.lower()}s'


def get_plural_path(
        body: Mapping[str, Any],
        *,
        pluralizer: Pluralizer = naive_plural,
        default_namespace: Optional[str] = None,
) -> str:
    """
    Build the collection's path of the object, as used for creation/listing.

    The core API group has no group name (``apiVersion: v1``) and lives under
    ``/api``; all other groups (``apiVersion: apps/v1``) live under ``/apis``.
    """
    api_version = body.get('apiVersion')
    kind = body.get('kind')
    namespace = bodies.get_namespace(body) or default_namespace
    if not api_version:
        raise ValueError(f"The object has no apiVersion: {body!r}")
    if not kind:
        raise ValueError(f"The object has no kind: {body!r}")
    if not namespace:
        raise ValueError(f"The object has no namespace, and there is no default one: {body!r}")

    root = '/apis' if '/' in api_version else '/api'
    plural = pluralizer(kind)
    return f'{root}/{api_version}/namespaces/{urllib.parse.quote(namespace)}/{plural}'


def get_object_path(
        body: Mapping[str, Any],
        *,
        pluralizer: Pluralizer = naive_plural,
        default_namespace: Optional[str] = None,
) -> str:
    """
    Build the object's own path, as used for reading/replacing/deleting.
    """
    name = bodies.get_name(body)
    if not name:
        raise ValueError(f"The object has no name: {body!r}")
    plural_path = get_plural_path(body, pluralizer=pluralizer, default_namespace=default_namespace)
    return f'{plural_path}/{urllib.parse.quote(name)}'
