import json
from typing import Any, Dict, Mapping, Optional

import aiohttp

from kubeapply.clients import auth, errors
from kubeapply.helpers import typedefs
from kubeapply.structs import configuration, results


async def request(
        method: str,
        url: str,  # relative to the server/api root.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        data: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> results.Result:
    """
    Perform one HTTP request, and return its status and the parsed body.

    The HTTP statuses are not interpreted: 4xx/5xx are returned as results.
    There are no retries of any kind. The connectivity & TLS errors are
    escalated as is; a non-JSON body is escalated as `APIResponseError`.
    """
    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    logger.debug(f"Request: {what}")
    async with context.session.request(
        method=method.upper(),
        url=url,
        data=data,
        headers=headers,
        timeout=timeout,
    ) as response:
        status = response.status
        raw = await response.read()
    logger.debug(f"Response: {status} for {what}")

    return results.Result(status=status, data=parse_body(raw, status=status))


def parse_body(raw: bytes, *, status: int) -> Any:
    # Some responses have no body at all, e.g. 204 No Content. It is not a failure:
    # such results carry `data=None` rather than raising `APIResponseError`,
    # so that the callers can check the status alone, as for any other response.
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        text = raw.decode('utf-8', errors='replace')
        raise errors.APIResponseError(f"Unparseable response with status {status}: {text[:200]!r}",
                                      status=status, text=text) from e


def encode_payload(
        payload: object,
        headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Serialize the payload to JSON, and declare its type & exact byte length.
    """
    data = json.dumps(payload).encode('utf-8')
    defaults = {
        'Content-Type': 'application/json',
        'Content-Length': str(len(data)),
    }
    return dict(data=data, headers=merge_headers(defaults, headers))


def merge_headers(
        defaults: Mapping[str, str],
        overrides: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    # Header names are case-insensitive: the caller's "content-type" replaces our "Content-Type".
    overrides = overrides or {}
    overridden = {name.lower() for name in overrides}
    merged = {name: value for name, value in defaults.items() if name.lower() not in overridden}
    merged.update(overrides)
    return merged


async def get(
        url: str,  # relative to the server/api root.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> results.Result:
    return await request(
        method='get',
        url=url,
        headers=headers,
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )


async def post(
        url: str,  # relative to the server/api root.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        payload: object,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> results.Result:
    return await request(
        method='post',
        url=url,
        **encode_payload(payload, headers),
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )


async def put(
        url: str,  # relative to the server/api root.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        payload: object,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> results.Result:
    return await request(
        method='put',
        url=url,
        **encode_payload(payload, headers),
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )


async def delete(
        url: str,  # relative to the server/api root.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> results.Result:
    return await request(
        method='delete',
        url=url,
        headers=headers,
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )
