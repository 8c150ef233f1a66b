import collections.abc
import logging

from kubeapply.clients import api, auth
from kubeapply.engines import loggers
from kubeapply.helpers import typedefs
from kubeapply.structs import bodies, configuration, references, results


async def apply_obj(
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        body: bodies.RawBody,
        logger: typedefs.Logger,
) -> results.Result:
    """
    Create the object, or replace it if it already exists (as ``kubectl apply``).

    The replacement requires the current ``resourceVersion`` of the object,
    which is unknown in advance. So, the creation is attempted first,
    and only if it fails with HTTP 409 Conflict (i.e. the name is taken),
    the live object is read, and its ``resourceVersion`` is used to replace it.
    This costs one request if the object is new, and three if it exists.

    Every outcome of the creation except 409 is returned as is, including
    the failures. If the live object cannot be read (e.g. it is gone already,
    or there is no permission to read it), the reading's result is returned
    instead, and no replacement is attempted.

    The caller's body is never modified: the replacement is done with a copy.
    """
    objlogger = _make_object_logger(body, logger)
    plural_path = references.get_plural_path(
        body,
        pluralizer=settings.resources.pluralizer,
        default_namespace=context.default_namespace,
    )

    objlogger.debug(f"Creating the {body.get('kind')} object.")
    created = await api.post(
        url=plural_path,
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    if created.status != 409:
        return created

    object_path = references.get_object_path(
        body,
        pluralizer=settings.resources.pluralizer,
        default_namespace=context.default_namespace,
    )

    objlogger.debug(f"The {body.get('kind')} object exists already. Reading its resource version.")
    fetched = await api.get(
        url=object_path,
        context=context,
        settings=settings,
        logger=logger,
    )
    if fetched.status != 200:
        objlogger.warning(f"Cannot read the existing {body.get('kind')} object: "
                          f"status {fetched.status}: {fetched.message or fetched.data!r}")
        return fetched

    # The live object must be a mapping; anything else carries no resource version.
    live = fetched.data if isinstance(fetched.data, collections.abc.Mapping) else {}
    resource_version = bodies.get_resource_version(live)
    replacement = bodies.with_resource_version(body, resource_version)

    objlogger.debug(f"Replacing the {body.get('kind')} object at version {resource_version!r}.")
    replaced = await api.put(
        url=object_path,
        payload=replacement,
        context=context,
        settings=settings,
        logger=logger,
    )
    return replaced


async def delete_obj(
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        body: bodies.RawBody,
        logger: typedefs.Logger,
) -> results.Result:
    """
    Delete the object (as ``kubectl delete``).

    The object's existence is not checked in advance: if it is absent,
    HTTP 404 is returned as a normal result.
    """
    objlogger = _make_object_logger(body, logger)
    object_path = references.get_object_path(
        body,
        pluralizer=settings.resources.pluralizer,
        default_namespace=context.default_namespace,
    )

    objlogger.debug(f"Deleting the {body.get('kind')} object.")
    deleted = await api.delete(
        url=object_path,
        context=context,
        settings=settings,
        logger=logger,
    )
    return deleted


def _make_object_logger(body: bodies.RawBody, logger: typedefs.Logger) -> loggers.ObjectLogger:
    # The adapters carry their own extras, which would be lost when re-wrapped.
    return loggers.ObjectLogger(body=body, logger=logger if isinstance(logger, logging.Logger) else None)
