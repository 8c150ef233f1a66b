"""
The results of the API requests, as returned to the callers.

Every request returns a result regardless of the HTTP status: both the
successes (2xx) and the failures (4xx, 5xx) are the normal outcomes of the API
calls, and the callers decide what to do with them. Only the transport-level
failures (connectivity, TLS, unparseable responses) are raised as errors.

For the failures, Kubernetes usually responds with a ``Status`` object,
which explains the reason in more details than the HTTP status alone.
"""
import collections.abc
import dataclasses
from typing import Any, Optional, cast

from kubeapply.clients import errors


@dataclasses.dataclass(frozen=True)
class Result:
    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_status(self) -> bool:
        return isinstance(self.data, collections.abc.Mapping) and self.data.get('kind') == 'Status'

    @property
    def payload(self) -> Optional[errors.RawStatus]:
        return cast(errors.RawStatus, self.data) if self.is_status else None

    @property
    def reason(self) -> Optional[str]:
        payload = self.payload
        return payload.get('reason') if payload else None

    @property
    def message(self) -> Optional[str]:
        payload = self.payload
        return payload.get('message') if payload else None
