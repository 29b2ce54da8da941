"""CLI commands for sysvctl."""

import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from sysvctl import __version__
from sysvctl.daemon.logger import SYSLOG_EXTRA

app = typer.Typer(
    name="sysvctl",
    help="sysvctl - run any program as a SysV init service",
    no_args_is_help=True,
)

console = Console()


def _stderr_sink(message: str) -> None:
    sys.stderr.write(message)


def _configure_logging(verbose: bool) -> None:
    """Console sink for everything except records bound for syslog."""
    logger.remove()
    logger.add(
        _stderr_sink,
        level="DEBUG" if verbose else "INFO",
        format="<level>{level: <8}</level> | {message}",
        filter=lambda record: SYSLOG_EXTRA not in record["extra"],
    )


def version_callback(value: bool):
    if value:
        console.print(f"sysvctl v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(None, "--version", "-V", callback=version_callback, is_eager=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """sysvctl - run any program as a SysV init service."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    _configure_logging(verbose)


# ============================================================================
# Configuration
# ============================================================================


@app.command("init-config")
def init_config(ctx: typer.Context):
    """Write the default host layout to the config file."""
    from sysvctl.config.loader import get_config_path, save_config
    from sysvctl.config.schema import Config

    config_path = ctx.obj.get("config_path") or get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Wrote default configuration to {config_path}")


# ============================================================================
# Service management
# ============================================================================


def _get_backend(ctx: typer.Context, descriptor=None, name: str = ""):
    """Create a SysVBackend for ``descriptor`` (or a bare ``name``)."""
    from sysvctl.config.loader import load_config
    from sysvctl.daemon import ServiceDescriptor, SysVBackend

    config = load_config(ctx.obj.get("config_path"))
    return SysVBackend(descriptor or ServiceDescriptor(name=name), config)


def _run_service_action(ctx: typer.Context, name: str, action: str, success_msg: str) -> None:
    """Run a backend action with standard error handling."""
    try:
        backend = _get_backend(ctx, name=name)
        getattr(backend, action)()
        console.print(f"[green]✓[/green] {success_msg}")
    except (RuntimeError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def install(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Service name; becomes /etc/init.d/<name>"),
    executable: str = typer.Argument(..., help="Program to supervise"),
    args: list[str] | None = typer.Argument(None, help="Program arguments (put them after --)"),
    display_name: str = typer.Option("", "--display-name", help="Short description for LSB headers"),
    description: str = typer.Option("", "--description", "-d", help="Longer description"),
    workdir: str = typer.Option("", "--workdir", "-w", help="Working directory for the program"),
    user: str = typer.Option("", "--user", "-u", help="Run the program as this user"),
):
    """Install a program as a SysV init service."""
    from sysvctl.daemon import ServiceDescriptor

    try:
        descriptor = ServiceDescriptor(
            name=name,
            display_name=display_name,
            description=description,
            executable=executable,
            arguments=tuple(args or ()),
            working_directory=workdir,
            user_name=user,
        )
        backend = _get_backend(ctx, descriptor)
        script = backend.install()
        console.print(f"[green]✓[/green] Service installed: {script}")
        console.print(f"Start with: [cyan]sysvctl start {name}[/cyan]")
    except (RuntimeError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def uninstall(ctx: typer.Context, name: str = typer.Argument(..., help="Service name")):
    """Deregister a service and remove its init script and logs."""
    try:
        _get_backend(ctx, name=name).uninstall()
        console.print("[green]✓[/green] Service uninstalled")
    except (RuntimeError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def start(ctx: typer.Context, name: str = typer.Argument(..., help="Service name")):
    """Start a service via the host's service command."""
    _run_service_action(ctx, name, "start", f"{name} started")


@app.command()
def stop(ctx: typer.Context, name: str = typer.Argument(..., help="Service name")):
    """Stop a service."""
    _run_service_action(ctx, name, "stop", f"{name} stopped")


@app.command()
def restart(ctx: typer.Context, name: str = typer.Argument(..., help="Service name")):
    """Restart a service."""
    _run_service_action(ctx, name, "restart", f"{name} restarted")


@app.command()
def status(ctx: typer.Context, name: str = typer.Argument(..., help="Service name")):
    """Show service status."""
    try:
        backend = _get_backend(ctx, name=name)
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    info = backend.get_info()
    log_out, log_err = backend.log_paths()

    table = Table(title=f"{name} Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Service", info.name)
    table.add_row("Installed", "[green]yes[/green]" if info.installed else "[red]no[/red]")
    table.add_row("Running", "[green]yes[/green]" if info.running else "[dim]no[/dim]")
    table.add_row("PID", str(info.pid) if info.pid else "-")
    table.add_row("Init script", str(info.service_file) if info.service_file else "-")
    table.add_row("Stdout log", str(log_out))
    table.add_row("Stderr log", str(log_err))

    console.print(table)


@app.command()
def logs(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Service name"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines to show"),
    stderr: bool = typer.Option(False, "--stderr", "-e", help="Show stderr log instead"),
):
    """Tail a service's log files."""
    import subprocess as sp

    try:
        backend = _get_backend(ctx, name=name)
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    log_out, log_err = backend.log_paths()
    log_file = log_err if stderr else log_out

    if not log_file.exists():
        console.print(f"[yellow]Log file not found:[/yellow] {log_file}")
        console.print("Has the service been started?")
        raise typer.Exit(1)

    cmd = ["tail", f"-n{lines}"]
    if follow:
        cmd.append("-f")
    cmd.append(str(log_file))

    try:
        sp.run(cmd)
    except KeyboardInterrupt:
        pass


# ============================================================================
# Init script entry point
# ============================================================================


@app.command("supervise", hidden=True)
def supervise(
    action: str = typer.Argument("", help="start|stop|restart|status"),
    name: str = typer.Option(..., "--name"),
    command: str = typer.Option(..., "--command"),
    user: str = typer.Option("", "--user"),
    workdir: str = typer.Option("", "--workdir"),
    su: str = typer.Option("/bin/su", "--su"),
    shell: str = typer.Option("/bin/bash", "--shell"),
    pid_file: Path = typer.Option(..., "--pid-file"),
    stdout_log: Path = typer.Option(..., "--stdout-log"),
    stderr_log: Path = typer.Option(..., "--stderr-log"),
    script: Path | None = typer.Option(None, "--script"),
):
    """Run one lifecycle transition; invoked by generated init scripts."""
    from sysvctl.daemon.logger import select_logger
    from sysvctl.daemon.supervisor import LaunchSpec, Supervisor

    spec = LaunchSpec(
        name=name,
        command=command,
        pid_file=pid_file,
        stdout_log=stdout_log,
        stderr_log=stderr_log,
        user=user,
        working_directory=workdir,
        su=su,
        shell=shell,
        script=script,
    )
    service_logger = select_logger(name, interactive=sys.stdout.isatty)
    supervisor = Supervisor(spec, logger=service_logger, console=Console(highlight=False))
    raise typer.Exit(supervisor.run(action))
