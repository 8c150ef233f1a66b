from types import TracebackType
from typing import Mapping, Optional, Type

import aiohttp

from kubeapply.clients import api, applying, auth, login
from kubeapply.engines import loggers
from kubeapply.helpers import typedefs
from kubeapply.structs import bodies, configuration, credentials, references, results


class K8sAPI:
    """
    A minimalistic client to the Kubernetes API for in-cluster usage.

    It bundles the credentials, the settings, and the logger, so that
    they do not need to be passed to every call. Usage::

        async with kubeapply.K8sAPI.from_service_account() as k8s:
            result = await k8s.apply_object({
                'apiVersion': 'v1',
                'kind': 'ConfigMap',
                'metadata': {'namespace': 'default', 'name': 'cfg'},
                'data': {'key': 'value'},
            })
            if not result.ok:
                print(result.status, result.message)

    All the requests return a `Result` with the HTTP status and the parsed
    body, regardless of the status. Only the transport failures are raised.

    The client keeps no state between the requests except for the credentials
    and the HTTP session. Concurrent calls are not synchronised in any way:
    e.g., racing applies of the same object can conflict or overwrite each other.
    """

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            settings: Optional[configuration.ClientSettings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.info = info
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.logger = logger if logger is not None else loggers.clients_logger
        self.context = auth.APIContext(info)

    @classmethod
    def from_service_account(
            cls,
            *,
            settings: Optional[configuration.ClientSettings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> "K8sAPI":
        info = login.login_with_service_account()
        if info is None:
            raise credentials.LoginError("No service account found. Not running in a cluster?")
        return cls(info, settings=settings, logger=logger)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self.info.server}>'

    async def __aenter__(self) -> "K8sAPI":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.context.close()

    async def request(
            self,
            url: str,
            method: str = 'GET',
            *,
            data: Optional[bytes] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> results.Result:
        return await api.request(
            method=method,
            url=url,
            data=data,
            headers=headers,
            timeout=timeout,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def get(
            self,
            url: str,
            *,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> results.Result:
        return await api.get(
            url=url,
            headers=headers,
            timeout=timeout,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def post(
            self,
            url: str,
            payload: object,
            *,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> results.Result:
        return await api.post(
            url=url,
            payload=payload,
            headers=headers,
            timeout=timeout,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def put(
            self,
            url: str,
            payload: object,
            *,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> results.Result:
        return await api.put(
            url=url,
            payload=payload,
            headers=headers,
            timeout=timeout,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def delete(
            self,
            url: str,
            *,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> results.Result:
        return await api.delete(
            url=url,
            headers=headers,
            timeout=timeout,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    def get_plural_path(self, body: bodies.RawBody) -> str:
        return references.get_plural_path(
            body,
            pluralizer=self.settings.resources.pluralizer,
            default_namespace=self.context.default_namespace,
        )

    async def apply_object(self, body: bodies.RawBody) -> results.Result:
        return await applying.apply_obj(
            body=body,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def delete_object(self, body: bodies.RawBody) -> results.Result:
        return await applying.delete_obj(
            body=body,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )
