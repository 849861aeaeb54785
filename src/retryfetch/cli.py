"""CLI interface for retryfetch"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import click
import httpx
from pydantic import ValidationError

from retryfetch.application.connectivity import ConnectivityProbe
from retryfetch.domain.config.retry import RetryPolicy
from retryfetch.domain.models.connection import ConnectionReport, ConnectionStatus
from retryfetch.domain.models.request_spec import RequestSpec
from retryfetch.infrastructure.config.config_manager import ConfigManager
from retryfetch.infrastructure.fetcher import BoundedRetryingFetcher
from retryfetch.infrastructure.transport.base import Transport
from retryfetch.infrastructure.transport.factory import TransportFactory

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_headers(raw_headers: Sequence[str]) -> Dict[str, str]:
    """Parse curl-style 'Name: value' header arguments

    Raises:
        click.BadParameter: If a header has no colon or an empty name
    """
    headers: Dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Invalid header {raw!r}, expected 'Name: value'", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _resolve_policy(
    config_manager: ConfigManager,
    max_retries: Optional[int],
    base_delay_ms: Optional[float],
    verbose: bool,
) -> RetryPolicy:
    """Merge CLI overrides into the configured retry policy"""
    values = config_manager.get_retry_policy().model_dump()
    if max_retries is not None:
        values["max_retries"] = max_retries
    if base_delay_ms is not None:
        values["base_delay_ms"] = base_delay_ms
    try:
        return RetryPolicy(**values)
    except ValidationError as e:
        _die(f"Invalid retry options: {e.errors()[0]['msg']}", verbose=verbose, exc=e)


def _create_transport(config_manager: ConfigManager, verbose: bool) -> Transport:
    request_config = config_manager.get_request_config()
    logger.debug(f"Using transport: {request_config.transport}")
    try:
        return TransportFactory.create(request_config.transport, request_config.mock.model_dump())
    except ValueError as e:
        _die(str(e), verbose=verbose, exc=e)


def _output_response(response: httpx.Response, include_headers: bool) -> None:
    """Output response to console"""
    click.echo(f"HTTP {response.status_code} {response.reason_phrase}".rstrip())
    if include_headers:
        for name, value in response.headers.items():
            click.echo(f"{name}: {value}")
        click.echo("")
    if response.content:
        click.echo(response.text)


def _output_report(report: ConnectionReport) -> None:
    if report.latency_ms is not None:
        click.echo(f"Status: {report.status.value} ({report.latency_ms:.0f} ms)")
    else:
        click.echo(f"Status: {report.status.value}")


async def _run_fetch(transport: Transport, headers: Dict[str, str], spec: RequestSpec, policy: RetryPolicy):
    fetcher = BoundedRetryingFetcher(transport, default_headers=headers)
    try:
        return await fetcher.execute(spec, policy)
    finally:
        await transport.aclose()


async def _run_probe(
    transport: Transport,
    headers: Dict[str, str],
    config_manager: ConfigManager,
    url: Optional[str],
    wait: bool,
) -> Tuple[ConnectionReport, bool]:
    probe_config = config_manager.get_probe_config()
    fetcher = BoundedRetryingFetcher(transport, default_headers=headers)
    try:
        probe = ConnectivityProbe.from_config(fetcher, probe_config, url=url)
        if wait:
            online = await probe.wait_for_connection(
                max_wait_ms=probe_config.max_wait_ms,
                poll_interval_ms=probe_config.poll_interval_ms,
            )
            return probe.last_report or ConnectionReport(probe.status), online
        report = await probe.check()
        return report, report.status != ConnectionStatus.OFFLINE
    finally:
        await transport.aclose()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .retryfetch.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """retryfetch - resilient HTTP requests with bounded retries"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("url", type=str)
@click.option("--method", "-X", default="GET", show_default=True, help="HTTP method")
@click.option("--header", "-H", "headers", multiple=True, help="Request header, 'Name: value'. Repeatable.")
@click.option("--data", "-d", type=str, help="Request body")
@click.option("--timeout-ms", type=int, help="Per-attempt timeout in milliseconds. Overrides config.")
@click.option("--max-retries", type=int, help="Total number of attempts. Overrides config.")
@click.option("--base-delay-ms", type=float, help="Delay before the second attempt. Overrides config.")
@click.option("--include", "-i", is_flag=True, help="Print response headers")
@click.pass_context
def fetch(
    ctx,
    url: str,
    method: str,
    headers: Tuple[str, ...],
    data: Optional[str],
    timeout_ms: Optional[int],
    max_retries: Optional[int],
    base_delay_ms: Optional[float],
    include: bool,
):
    """Send a request, retrying transport failures.

    URL: Address to request
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        request_config = config_manager.get_request_config()
        policy = _resolve_policy(config_manager, max_retries, base_delay_ms, verbose)
        spec = RequestSpec(
            url=url,
            method=method.upper(),
            headers=parse_headers(headers),
            body=data,
            timeout_ms=timeout_ms if timeout_ms is not None else request_config.timeout_ms,
        )
        transport = _create_transport(config_manager, verbose)
        logger.info(f"{spec.method} {spec.url} (max {policy.max_retries} attempts)")

        response = asyncio.run(_run_fetch(transport, request_config.headers, spec, policy))
        _output_response(response, include)

    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


@cli.command()
@click.argument("url", type=str, required=False)
@click.option("--wait", is_flag=True, help="Poll until online or the configured wait budget is spent")
@click.pass_context
def probe(ctx, url: Optional[str], wait: bool):
    """Check whether an endpoint is reachable.

    URL: Endpoint to probe (default: probe.url from config)
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        request_config = config_manager.get_request_config()
        transport = _create_transport(config_manager, verbose)

        report, online = asyncio.run(_run_probe(transport, request_config.headers, config_manager, url, wait))
        _output_report(report)
        if not online:
            _die("Endpoint is unreachable", verbose=verbose)

    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
