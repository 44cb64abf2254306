"""Terminal UI components and formatting."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from typing import Dict, Any, List


console = Console()


def print_error(message: str):
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str):
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def print_info(message: str):
    """Print an info message."""
    console.print(f"[bold blue]ℹ[/bold blue] {message}")


def format_ports(ports: List[Dict[str, Any]]) -> str:
    return ", ".join(f"{p['container_port']}/{p.get('protocol', 'TCP')}" for p in ports) or "-"


def format_pod(pod: Dict[str, Any]) -> Panel:
    """
    Format a pod record for display.

    Args:
        pod: Pod record dictionary

    Returns:
        Rich Panel with formatted pod
    """
    lines = [
        f"[bold]Pod ID:[/bold] {pod['id']}",
        f"[bold]Name:[/bold] {pod['name']}",
        f"[bold]Namespace:[/bold] {pod['namespace']}",
        f"[bold]Image:[/bold] {pod['image']}",
        f"[bold]Replicas:[/bold] {pod['replicas']}",
        f"[bold]Pull policy:[/bold] {pod['pull_policy']}",
        f"[bold]CPU:[/bold] {pod['cpu_max']}  [bold]Memory:[/bold] {pod['memory_max']}",
        f"[bold]Ports:[/bold] {format_ports(pod.get('ports', []))}",
    ]

    if pod.get("env"):
        lines.append("")
        lines.append("[bold]Environment:[/bold]")
        for env in pod["env"]:
            lines.append(f"  • {env['key']}={env.get('value', '')}")

    return Panel(
        "\n".join(lines),
        title=f"Pod {pod['namespace']}/{pod['name']}",
        border_style="blue",
        box=box.ROUNDED,
    )


def print_pod_table(pods: List[Dict[str, Any]]):
    """Print pod records as a table."""
    if not pods:
        print_info("No pods found")
        return

    table = Table(title="Pods", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Namespace")
    table.add_column("Name", style="bold")
    table.add_column("Image")
    table.add_column("Replicas", justify="right")
    table.add_column("Ports")

    for pod in pods:
        table.add_row(
            str(pod["id"]),
            pod["namespace"],
            pod["name"],
            pod["image"],
            str(pod["replicas"]),
            format_ports(pod.get("ports", [])),
        )

    console.print(table)
