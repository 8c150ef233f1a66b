"""
All the structures coming from/to the Kubernetes API.

For type-checking, they are detailed to the per-field level (`TypedDict`)
only for the fields used by this package. The objects can contain arbitrary
other fields at runtime; those are passed through as an opaque payload.

Everything marked "raw" is plain JSON-decoded data as sent to or received
from the Kubernetes API, with no wrapping or processing.
"""
from typing import Any, List, Mapping, Optional, cast

from typing_extensions import TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    generateName: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


def get_name(body: Mapping[str, Any]) -> Optional[str]:
    return cast(Optional[str], (body.get('metadata') or {}).get('name'))


def get_namespace(body: Mapping[str, Any]) -> Optional[str]:
    return cast(Optional[str], (body.get('metadata') or {}).get('namespace'))


def get_resource_version(body: Mapping[str, Any]) -> Optional[str]:
    return cast(Optional[str], (body.get('metadata') or {}).get('resourceVersion'))


def with_resource_version(
        body: RawBody,
        resource_version: Optional[str],
) -> RawBody:
    """
    Return a copy of the body with the resource version injected.

    Only the top level and the metadata are copied (shallow); the rest
    of the payload is shared with the original. The original body is never
    modified, so the caller's object stays as it was before the call.

    If the new resource version is ``None``, the field is removed from the copy.
    """
    copied = cast(RawBody, dict(body))
    metadata = cast(RawMeta, dict(body.get('metadata') or {}))
    if resource_version is None:
        metadata.pop('resourceVersion', None)
    else:
        metadata['resourceVersion'] = resource_version
    copied['metadata'] = metadata
    return copied
