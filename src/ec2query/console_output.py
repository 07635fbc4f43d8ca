"""Console output formatting for the ec2query CLI."""
from __future__ import annotations

import json
from typing import Any, List

from rich.console import Console
from rich.table import Table

from .models import EC2Object, ElasticAddress, Image, SecurityGroup


class ConsoleOutput:
    """Handles formatting and displaying output to the console."""

    def __init__(self):
        """Initialize console output with a Rich console instance."""
        self.console = Console()

    def print_images(self, images: List[Image]) -> None:
        """Print a table of images.

        Args:
            images: List of Image objects
        """
        if not images:
            self.console.print("[yellow]No images found.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Image ID", style="green")
        table.add_column("Name", style="magenta")
        table.add_column("State", style="yellow")
        table.add_column("Owner", style="blue")
        table.add_column("Root Device", style="cyan")
        table.add_column("Public", justify="center")

        for image in images:
            state = image.image_state or ""
            table.add_row(
                image.image_id or "",
                image.name or "",
                state.capitalize(),
                image.image_owner_id or "",
                image.root_device_type or "",
                "✓" if image.is_public else "✗",
                style="red" if state == "failed" else None,
            )

        self.console.print(f"\n[bold underline]Images ({len(images)})[/bold underline]")
        self.console.print(table)

    def print_security_groups(self, groups: List[SecurityGroup]) -> None:
        """Print a table of security groups with their ingress rules.

        Args:
            groups: List of SecurityGroup objects
        """
        if not groups:
            self.console.print("[yellow]No security groups found.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Group ID", style="green")
        table.add_column("Name", style="magenta")
        table.add_column("VPC", style="blue")
        table.add_column("Description")
        table.add_column("Ingress", style="yellow")

        for group in groups:
            table.add_row(
                group.group_id or "",
                group.group_name or "",
                group.vpc_id or "",
                group.group_description or "",
                "\n".join(str(p) for p in group.ip_permissions),
            )

        self.console.print(f"\n[bold underline]Security Groups ({len(groups)})[/bold underline]")
        self.console.print(table)

    def print_addresses(self, addresses: List[ElasticAddress]) -> None:
        """Print a table of elastic IP addresses.

        Args:
            addresses: List of ElasticAddress objects
        """
        if not addresses:
            self.console.print("[yellow]No addresses found.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Public IP", style="green")
        table.add_column("Domain", style="magenta")
        table.add_column("Allocation ID", style="yellow")
        table.add_column("Instance", style="blue")

        for address in addresses:
            table.add_row(
                address.public_ip or "",
                address.domain or "standard",
                address.allocation_id or "",
                address.instance_id or "",
                style=None if address.instance_id else "red",
            )

        self.console.print(f"\n[bold underline]Elastic IPs ({len(addresses)})[/bold underline]")
        self.console.print(table)

    def print_result(self, result: Any) -> None:
        """Print the decoded result of an arbitrary action."""
        if isinstance(result, list):
            for item in result:
                self.print_result(item)
            return
        if isinstance(result, EC2Object):
            result = result.payload
        if isinstance(result, dict):
            self.console.print_json(json.dumps(result, default=str))
        else:
            self.console.print(str(result))

    def print_error(self, message: str) -> None:
        """Print an error message.

        Args:
            message: Error message to display
        """
        self.console.print(f"[red]Error: {message}[/red]")

    def print_warning(self, message: str) -> None:
        """Print a warning message.

        Args:
            message: Warning message to display
        """
        self.console.print(f"[yellow]Warning: {message}[/yellow]")
