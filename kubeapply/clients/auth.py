import base64
import ssl
from typing import Dict, Optional

import aiohttp

from kubeapply.helpers import versions
from kubeapply.structs import credentials


class APIContext:
    """
    A container for an aiohttp session and the connection's static info.

    The SSL context with the trusted CA is built once when the container is
    constructed, and then is used for all the connections of this container
    only -- the process-wide SSL defaults are never touched.

    The session itself is created lazily on the first request, so that
    it belongs to the event loop where the requests are actually made.
    It is closed by `close`; a new one is opened if requested again.
    """

    # Contextual information for URL building.
    server: str
    default_namespace: Optional[str]

    # The constructed connection parameters, shared by all the sessions.
    ssl_context: ssl.SSLContext
    headers: Dict[str, str]

    def __init__(
            self,
            info: credentials.ConnectionInfo,
    ) -> None:
        super().__init__()
        self.server = info.server
        self.default_namespace = info.default_namespace
        self.ssl_context = make_ssl_context(info)
        self.headers = make_headers(info)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(
                    limit=0,
                    ssl=self.ssl_context,
                ),
                headers=self.headers,
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None


def make_ssl_context(info: credentials.ConnectionInfo) -> ssl.SSLContext:
    if info.ca_path and info.ca_data:
        raise credentials.LoginError("Both CA path & data are set. Need only one.")

    context = ssl.create_default_context(
        purpose=ssl.Purpose.SERVER_AUTH,
        cafile=info.ca_path,
        cadata=decode_to_pem(info.ca_data) if info.ca_data is not None else None,
    )

    if info.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return context


def make_headers(info: credentials.ConnectionInfo) -> Dict[str, str]:

    # It is a good practice to self-identify a bit.
    headers: Dict[str, str] = {}
    headers['User-Agent'] = f'kubeapply/{versions.version or "unknown"}'

    # The token auth part.
    if info.scheme and info.token:
        headers['Authorization'] = f'{info.scheme} {info.token}'
    elif info.scheme:
        headers['Authorization'] = f'{info.scheme}'
    elif info.token:
        headers['Authorization'] = f'Bearer {info.token}'

    return headers


def decode_to_pem(data: bytes) -> str:
    if data.startswith(b'-----BEGIN '):
        return data.decode('ascii')
    else:
        return base64.b64decode(data).decode('ascii')
