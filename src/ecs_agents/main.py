"""Operator CLI for inspecting and reclaiming agent tasks."""

import asyncio
import json

from rich.console import Console
import typer

from ecs_agents.agent import EcsAgent
from ecs_agents.ecs_client import EcsTaskClient, TaskClient
from ecs_agents.exceptions import AgentIdentityError, TaskDescribeError
from ecs_agents.listener import BufferedTaskListener
from ecs_agents.logging_config import setup_logging
from ecs_agents.models import TaskSnapshot

EXIT_NOT_SURVIVABLE = 1
EXIT_DESCRIBE_FAILED = 2
EXIT_INVALID_IDENTITY = 3

app = typer.Typer()
console = Console()


def get_task_client() -> TaskClient:
    return EcsTaskClient()


@app.callback()
def callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Override configured log level"),
):
    """
    ECS agent lifecycle tools
    """
    setup_logging(log_level=log_level)


async def check_command(
    task_arn: str, cluster_arn: str, node_name: str
) -> tuple[TaskSnapshot | None, bool]:
    client = get_task_client()
    try:
        agent = EcsAgent(client, node_name)
        agent.bind_task(task_arn, cluster_arn)
        return await agent.inspect_task()
    finally:
        client.close()


async def terminate_command(task_arn: str, cluster_arn: str, node_name: str) -> list[str]:
    client = get_task_client()
    try:
        agent = EcsAgent(client, node_name)
        agent.bind_task(task_arn, cluster_arn)
        listener = BufferedTaskListener()
        await agent.terminate(listener)
        return listener.messages
    finally:
        client.close()


def _print_snapshot(snapshot: TaskSnapshot | None) -> None:
    if snapshot is None:
        console.print("Task: [red]not found[/red]")
        return

    console.print(f"Last status: [magenta]{snapshot.last_status}[/magenta]")
    console.print(f"Desired status: [magenta]{snapshot.desired_status}[/magenta]")
    if snapshot.stopped_reason:
        console.print(f"Stopped reason: {snapshot.stopped_reason}")


@app.command()
def check(
    task_arn: str = typer.Option(..., "--task-arn"),
    cluster_arn: str = typer.Option(..., "--cluster-arn"),
    node_name: str = typer.Option("cli", "--node-name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Report a task's state and whether it can keep serving as an agent"""
    try:
        snapshot, survivable = asyncio.run(check_command(task_arn, cluster_arn, node_name))
    except AgentIdentityError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=EXIT_INVALID_IDENTITY) from e
    except TaskDescribeError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=EXIT_DESCRIBE_FAILED) from e

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "task_arn": task_arn,
                    "cluster_arn": cluster_arn,
                    "found": snapshot is not None,
                    "last_status": snapshot.last_status if snapshot else None,
                    "desired_status": snapshot.desired_status if snapshot else None,
                    "stopped_reason": snapshot.stopped_reason if snapshot else None,
                    "survivable": survivable,
                },
                indent=2,
            )
        )
    else:
        _print_snapshot(snapshot)
        if survivable:
            console.print(f"[bold green]✓ Survivable[/bold green] [cyan]{task_arn}[/cyan]")
        else:
            console.print(f"[bold yellow]✗ Not survivable[/bold yellow] [cyan]{task_arn}[/cyan]")

    if not survivable:
        raise typer.Exit(code=EXIT_NOT_SURVIVABLE)


@app.command()
def terminate(
    task_arn: str = typer.Option(..., "--task-arn"),
    cluster_arn: str = typer.Option(..., "--cluster-arn"),
    node_name: str = typer.Option("cli", "--node-name"),
):
    """Stop a task, reporting but never failing on ECS errors"""
    try:
        messages = asyncio.run(terminate_command(task_arn, cluster_arn, node_name))
    except AgentIdentityError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=EXIT_INVALID_IDENTITY) from e

    for message in messages:
        console.print(f"[yellow]{message}[/yellow]")
    console.print(f"[bold green]✓ Terminated[/bold green] [cyan]{task_arn}[/cyan]")


if __name__ == "__main__":
    app()
