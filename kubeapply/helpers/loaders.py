"""
Manifest-loading for the objects to be applied or deleted.

The files are usually specified on the command-line, the same way as
for ``kubectl apply -f``. Every file can contain multiple YAML documents
separated by ``---``; every non-empty document is a resource object.

A single dash (``-``) instead of a path reads the documents from stdin.
Multiple files can be specified; the objects are yielded in that order.
"""
import collections.abc
import sys
from typing import IO, Iterable, Iterator, List, cast

import yaml

from kubeapply.structs import bodies


class ManifestError(Exception):
    """ Raised when a manifest contains something that is not an object. """


def iter_objs(
        stream: IO[str],
        *,
        source: str = '<stream>',
) -> Iterator[bodies.RawBody]:
    for idx, doc in enumerate(yaml.safe_load_all(stream)):
        if doc is None:
            continue  # empty documents, e.g. after a trailing "---".
        if not isinstance(doc, collections.abc.Mapping):
            raise ManifestError(f"Document #{idx} in {source} is not an object: {doc!r}")

        # A "List" kind is how kubectl outputs multiple objects; unwrap it.
        if doc.get('kind') == 'List' and isinstance(doc.get('items'), list):
            for item in doc['items']:
                if not isinstance(item, collections.abc.Mapping):
                    raise ManifestError(f"List item in {source} is not an object: {item!r}")
                yield cast(bodies.RawBody, dict(item))
        else:
            yield cast(bodies.RawBody, dict(doc))


def load_objs(
        paths: Iterable[str],
) -> List[bodies.RawBody]:
    """
    Load all objects from all files/stdin in the order of the paths.
    """
    objs: List[bodies.RawBody] = []
    for path in paths:
        if path == '-':
            objs.extend(iter_objs(sys.stdin, source='stdin'))
        else:
            with open(path, encoding='utf-8') as f:
                objs.extend(iter_objs(f, source=path))
    return objs
