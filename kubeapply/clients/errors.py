"""
K8s API errors.

The HTTP-level failures (4xx, 5xx) are not errors here: they are returned
to the callers as regular results with the status and the body, so that
the callers could decide what to do with e.g. 404 or 409.

Low-level errors, such as the network connectivity issues, SSL/HTTPS issues,
etc, are escalated from the client library (now, ``aiohttp``) as is, since
they are related not to the domain of K8s API, but rather to the networking
and encryption.

The only own error is for the responses that cannot be interpreted at all,
i.e. that are not JSON. The original error of the decoder is chained
as the cause -- for better explainability of errors in the stack traces.
"""
from typing import Collection, Optional

from typing_extensions import Literal, TypedDict


class RawStatusCause(TypedDict, total=False):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict, total=False):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict, total=False):
    apiVersion: str
    kind: Literal["Status"]
    code: int
    status: Literal["Success", "Failure"]
    reason: str
    message: str
    details: RawStatusDetails


class APIResponseError(Exception):
    """ Raised when the API response cannot be parsed as JSON. """

    def __init__(
            self,
            message: str,
            *,
            status: int,
            text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self._status = status
        self._text = text

    @property
    def status(self) -> int:
        return self._status

    @property
    def text(self) -> Optional[str]:
        return self._text
