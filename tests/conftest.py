import asyncio
import collections
import dataclasses
import json
import logging
import re
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

import aiohttp.test_utils
import aiohttp.web
import pytest

from kubeapply.clients.auth import APIContext
from kubeapply.clients.k8sapi import K8sAPI
from kubeapply.structs.configuration import ClientSettings
from kubeapply.structs.credentials import ConnectionInfo

#
# A fake Kubernetes API server. Reasons:
# 1. The requests must go through the real HTTP client (headers, bodies, etc).
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#


@dataclasses.dataclass(frozen=True)
class RecordedRequest:
    method: str
    path: str
    query_string: str
    headers: Any  # case-insensitive multi-dict, as received.
    raw: bytes
    data: Any  # parsed JSON, or text if not JSON, or None if empty.


Responder = Callable[[RecordedRequest], Any]  # returns (status, payload) or an awaitable of it.


class FakeAPI:
    """
    A server-side double of Kubernetes API with scripted responses.

    Every request is recorded for later assertions. The responses are queued
    per method & path, and are consumed one by one as the requests come::

        fake_api.add('post', '/api/v1/namespaces/ns1/services', {}, status=409)
        fake_api.add('get', '/api/v1/namespaces/ns1/services/svc-a', {'metadata': {...}})
        ...
        assert len(fake_api.requests) == 2
        assert fake_api.calls('post')[0].data == {...}

    The unexpected requests (with nothing queued) get HTTP 599,
    so that they are clearly visible in the results and in the assertions.
    """

    def __init__(self) -> None:
        super().__init__()
        self.url = ''
        self.requests: List[RecordedRequest] = []
        self._queues: Dict[Tuple[str, str], Deque[Responder]] = collections.defaultdict(collections.deque)
        self.app = aiohttp.web.Application()
        self.app.router.add_route('*', '/{tail:.*}', self._handle)

    def add(
            self,
            method: str,
            path: str,
            payload: Any = None,
            *,
            status: int = 200,
            body: Optional[bytes] = None,
            responder: Optional[Responder] = None,
    ) -> None:
        if responder is None:
            def responder(request: RecordedRequest) -> Tuple[int, Any]:
                return status, body if body is not None else payload
        self._queues[method.upper(), path].append(responder)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[RecordedRequest]:
        return [request for request in self.requests
                if (method is None or request.method == method.upper()) and
                   (path is None or request.path == path)]

    async def _handle(self, request: aiohttp.web.Request) -> aiohttp.web.Response:
        raw = await request.read()
        try:
            data = json.loads(raw) if raw else None
        except ValueError:
            data = raw.decode('utf-8', errors='replace')

        recorded = RecordedRequest(
            method=request.method,
            path=request.path,
            query_string=request.query_string,
            headers=request.headers,
            raw=raw,
            data=data,
        )
        self.requests.append(recorded)

        queue = self._queues.get((request.method, request.path))
        if not queue:
            return aiohttp.web.json_response({'kind': 'Status', 'message': 'unexpected'}, status=599)

        outcome = queue.popleft()(recorded)
        if asyncio.iscoroutine(outcome):
            outcome = await outcome
        status, payload = outcome

        if isinstance(payload, bytes):
            return aiohttp.web.Response(body=payload, status=status)
        else:
            return aiohttp.web.json_response(payload, status=status)


@pytest.fixture()
async def fake_api():
    fake = FakeAPI()
    server = aiohttp.test_utils.TestServer(fake.app)
    await server.start_server()
    fake.url = str(server.make_url('/')).rstrip('/')
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture()
def settings():
    return ClientSettings()


@pytest.fixture()
def logger():
    return logging.getLogger('kubeapply.tests')


@pytest.fixture()
def info(fake_api):
    return ConnectionInfo(server=fake_api.url, token='fake-token')


@pytest.fixture()
async def context(info):
    context = APIContext(info)
    try:
        yield context
    finally:
        await context.close()


@pytest.fixture()
async def k8s(info, settings, logger):
    async with K8sAPI(info, settings=settings, logger=logger) as k8s:
        yield k8s


#
# Helpers for the logging checks.
#


@pytest.fixture(autouse=True)
def _restore_logging():
    """ Undo the CLI's logging configuration, so that it does not leak into other tests. """
    root = logging.getLogger()
    asyncio_logger = logging.getLogger('asyncio')
    handlers, level = root.handlers[:], root.level
    asyncio_handlers, asyncio_propagate = asyncio_logger.handlers[:], asyncio_logger.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    asyncio_logger.handlers[:] = asyncio_handlers
    asyncio_logger.propagate = asyncio_propagate


@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    def assert_logs_fn(patterns, prohibited=[], strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # The expected pattern is at position 0.
            # Looking-ahead: if one of the following patterns matches, while the
            # 0th does not, then the log message is missing, and we fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            # Check that the prohibited patterns do not appear in any message.
            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        # If all patterns have been matched in order, we are done.
        # if some are left, but the messages are over, then we fail.
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
