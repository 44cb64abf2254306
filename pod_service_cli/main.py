"""Main CLI entry point with command definitions."""

import click
import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from .client import PodServiceClient, ServiceClientError
from .config import Config, ConfigError, load_pod_spec_file
from .ui import (
    console,
    format_pod,
    print_error,
    print_info,
    print_pod_table,
    print_success,
)


def get_client_from_config(
    config: Config, url: Optional[str] = None, api_key: Optional[str] = None
) -> PodServiceClient:
    """Create pod service client from config, with command-line overrides."""
    service_url = url or config.get("service_url")
    auth_key = api_key or config.get("api_key")

    if not service_url:
        raise ConfigError(
            "Pod service URL not configured. Run: pod-service config set service-url <url>"
        )

    return PodServiceClient(base_url=service_url, api_key=auth_key)


def run_with_client(
    url: Optional[str],
    api_key: Optional[str],
    action: Callable[[PodServiceClient], Awaitable[Any]],
):
    """Run an async action against the pod service and report failures."""

    async def runner():
        async with get_client_from_config(Config(), url, api_key) as client:
            await action(client)

    try:
        asyncio.run(runner())
    except (ConfigError, ServiceClientError) as e:
        print_error(str(e))


url_option = click.option("--url", help="Pod service URL (overrides config)")
api_key_option = click.option("--api-key", help="API key (overrides config)")
spec_file_argument = click.argument(
    "spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


@click.group()
@click.version_option(package_name="pod-service")
def cli():
    """Pod Service CLI - manage pod records and their Kubernetes Deployments."""
    pass


@cli.command(name="list")
@url_option
@api_key_option
def list_pods(url: Optional[str], api_key: Optional[str]):
    """List pod records."""

    async def action(client: PodServiceClient):
        print_pod_table(await client.list_pods())

    run_with_client(url, api_key, action)


@cli.command()
@click.argument("pod_id", type=int)
@url_option
@api_key_option
def show(pod_id: int, url: Optional[str], api_key: Optional[str]):
    """Show details of a pod record."""

    async def action(client: PodServiceClient):
        console.print(format_pod(await client.get_pod(pod_id)))

    run_with_client(url, api_key, action)


@cli.command()
@spec_file_argument
@url_option
@api_key_option
def add(spec_file: Path, url: Optional[str], api_key: Optional[str]):
    """Register a pod record from a YAML spec file."""

    async def action(client: PodServiceClient):
        pod_id = await client.add_pod(load_pod_spec_file(spec_file))
        print_success(f"Pod record created: {pod_id}")

    run_with_client(url, api_key, action)


@cli.command()
@click.argument("pod_id", type=int)
@spec_file_argument
@url_option
@api_key_option
def update(pod_id: int, spec_file: Path, url: Optional[str], api_key: Optional[str]):
    """Update a pod record from a YAML spec file."""

    async def action(client: PodServiceClient):
        pod = await client.update_pod(pod_id, load_pod_spec_file(spec_file))
        print_success(f"Pod record {pod['id']} updated")

    run_with_client(url, api_key, action)


@cli.command()
@click.argument("pod_id", type=int)
@url_option
@api_key_option
def remove(pod_id: int, url: Optional[str], api_key: Optional[str]):
    """Delete a pod record without touching the cluster."""

    async def action(client: PodServiceClient):
        await client.delete_pod(pod_id)
        print_success(f"Pod record {pod_id} deleted")

    run_with_client(url, api_key, action)


@cli.command()
@spec_file_argument
@url_option
@api_key_option
def deploy(spec_file: Path, url: Optional[str], api_key: Optional[str]):
    """Create the pod's Deployment in the cluster."""

    async def action(client: PodServiceClient):
        result = await client.create_deployment(load_pod_spec_file(spec_file))
        print_success(f"Pod {result['namespace']}/{result['pod_name']} created in cluster")

    run_with_client(url, api_key, action)


@cli.command()
@spec_file_argument
@url_option
@api_key_option
def redeploy(spec_file: Path, url: Optional[str], api_key: Optional[str]):
    """Replace the pod's Deployment in the cluster."""

    async def action(client: PodServiceClient):
        result = await client.update_deployment(load_pod_spec_file(spec_file))
        print_success(f"Pod {result['namespace']}/{result['pod_name']} updated in cluster")

    run_with_client(url, api_key, action)


@cli.command()
@click.argument("pod_id", type=int)
@url_option
@api_key_option
def undeploy(pod_id: int, url: Optional[str], api_key: Optional[str]):
    """Delete the pod's Deployment from the cluster, then its record."""

    async def action(client: PodServiceClient):
        result = await client.delete_deployment(pod_id)
        print_success(f"Pod {result['namespace']}/{result['pod_name']} deleted from cluster")

    run_with_client(url, api_key, action)


@cli.group()
def config():
    """Manage CLI configuration."""
    pass


@config.command(name="set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value."""
    try:
        name = Config().set(key, value)
        print_success(f"Configuration updated: {name} = {value}")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="get")
@click.argument("key")
def config_get(key: str):
    """Get a configuration value."""
    try:
        settings = Config()
        name = settings.normalize_key(key)
        value = settings.get(name)
        if value:
            console.print(f"{name} = {value}")
        else:
            print_info(f"Configuration key '{name}' not set")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="list")
def config_list():
    """List all configuration values."""
    try:
        config_data = Config().get_all()

        if not config_data:
            print_info("No configuration set")
            return

        console.print("[bold]Configuration:[/bold]")
        for key, value in config_data.items():
            # Mask API key
            if key == "api_key" and value:
                value = "*" * 8 + value[-4:] if len(value) > 4 else "****"
            console.print(f"  {key} = {value}")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="unset")
@click.argument("key")
def config_unset(key: str):
    """Remove a configuration value."""
    try:
        name = Config().delete(key)
        print_success(f"Configuration key '{name}' removed")
    except ConfigError as e:
        print_error(str(e))


if __name__ == "__main__":
    cli()
