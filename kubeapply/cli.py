import asyncio
import dataclasses
import functools
import json
from typing import Any, Callable, Collection, Dict, List, Optional

import click

from kubeapply.clients import k8sapi, login
from kubeapply.engines import loggers
from kubeapply.helpers import loaders
from kubeapply.structs import bodies, credentials


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    A decorator to get the credentials in all commands the same way.

    The explicitly given options override the in-cluster service account.
    If there is no service account, the server must be specified explicitly.
    """
    @click.option('--server', type=str, envvar='KUBEAPPLY_SERVER')
    @click.option('--token', type=str, envvar='KUBEAPPLY_TOKEN')
    @click.option('--ca-file', type=click.Path(exists=True, dir_okay=False), envvar='KUBEAPPLY_CA_FILE')
    @click.option('--insecure', is_flag=True, envvar='KUBEAPPLY_INSECURE')
    @click.option('-n', '--namespace', type=str, envvar='KUBEAPPLY_NAMESPACE')
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(server: Optional[str],
                token: Optional[str],
                ca_file: Optional[str],
                insecure: bool,
                namespace: Optional[str],
                *args: Any, **kwargs: Any) -> Any:
        info = get_connection_info(server=server, token=token, ca_file=ca_file,
                                   insecure=insecure, namespace=namespace)
        return fn(*args, info=info, **kwargs)

    return wrapper


def get_connection_info(
        *,
        server: Optional[str] = None,
        token: Optional[str] = None,
        ca_file: Optional[str] = None,
        insecure: Optional[bool] = None,
        namespace: Optional[str] = None,
) -> credentials.ConnectionInfo:
    info = login.login_with_service_account()
    if info is None and server is None:
        raise click.UsageError("No service account found, and no --server is specified.")
    elif info is None:
        info = credentials.ConnectionInfo(server=server or '')

    overrides: Dict[str, Any] = {}
    if server is not None:
        overrides.update(server=server)
    if token is not None:
        overrides.update(token=token)
    if ca_file is not None:
        with open(ca_file, 'rb') as f:
            overrides.update(ca_data=f.read(), ca_path=None)
    if insecure:
        overrides.update(insecure=insecure)
    if namespace is not None:
        overrides.update(default_namespace=namespace)
    return dataclasses.replace(info, **overrides)


@click.version_option(prog_name='kubeapply')
@click.group(name='kubeapply', context_settings=dict(
    auto_envvar_prefix='KUBEAPPLY',
))
def main() -> None:
    pass


@main.command()
@logging_options
@connection_options
@click.option('-f', '--filename', 'paths', multiple=True, required=True)
def apply(
        info: credentials.ConnectionInfo,
        paths: Collection[str],
) -> None:
    """ Create or replace the objects from the manifests. """
    objs = load_manifests(paths)
    ok = asyncio.run(process(info=info, objs=objs, verb='apply'))
    if not ok:
        raise click.exceptions.Exit(1)


@main.command()
@logging_options
@connection_options
@click.option('-f', '--filename', 'paths', multiple=True, required=True)
def delete(
        info: credentials.ConnectionInfo,
        paths: Collection[str],
) -> None:
    """ Delete the objects from the manifests. """
    objs = load_manifests(paths)
    ok = asyncio.run(process(info=info, objs=objs, verb='delete'))
    if not ok:
        raise click.exceptions.Exit(1)


@main.command()
@logging_options
@connection_options
@click.argument('url')
def get(
        info: credentials.ConnectionInfo,
        url: str,
) -> None:
    """ Read a raw API path (e.g. /api/v1/namespaces/default/pods) as JSON. """
    ok = asyncio.run(fetch(info=info, url=url))
    if not ok:
        raise click.exceptions.Exit(1)


def load_manifests(paths: Collection[str]) -> List[bodies.RawBody]:
    try:
        return loaders.load_objs(paths)
    except (OSError, loaders.ManifestError) as e:
        raise click.UsageError(str(e))


async def process(
        *,
        info: credentials.ConnectionInfo,
        objs: Collection[bodies.RawBody],
        verb: str,
) -> bool:
    all_ok = True
    async with k8sapi.K8sAPI(info) as k8s:
        for obj in objs:
            ref = f"{obj.get('kind')}/{bodies.get_name(obj)}"
            try:
                if verb == 'apply':
                    result = await k8s.apply_object(obj)
                else:
                    result = await k8s.delete_object(obj)
            except ValueError as e:
                click.echo(f"{ref}: {e}", err=True)
                all_ok = False
                continue

            all_ok = all_ok and result.ok
            suffix = f" ({result.reason}: {result.message})" if result.is_status and not result.ok else ""
            click.echo(f"{ref}: {result.status}{suffix}")
    return all_ok


async def fetch(
        *,
        info: credentials.ConnectionInfo,
        url: str,
) -> bool:
    async with k8sapi.K8sAPI(info) as k8s:
        result = await k8s.get(url)
    click.echo(json.dumps(result.data, indent=2))
    return result.ok
