"""Thin CLI wrapper for apkstage.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from apkstage import __version__
from apkstage.config import Settings, get_settings, print_settings_json
from apkstage.errors import ApkStageError, ConfigError, error_from_exception

if TYPE_CHECKING:
    from apkstage.projects.schema import StageConfig

app = typer.Typer(
    name="apkstage",
    help="APK Stager - resolve a sub-project's APK and stage it into a parent build",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

WorkspaceOption = Annotated[
    Path,
    typer.Option("--workspace", "-w", help="Root of the multi-project build"),
]
ProjectDirOption = Annotated[
    Path,
    typer.Option("--project-dir", "-p", help="Parent project receiving the copy"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Staging config file (YAML or JSON)"),
]
SubProjectOption = Annotated[
    str | None,
    typer.Option("--sub-project", "-s", help="Producing sub-project identifier"),
]
VariantOption = Annotated[
    str | None,
    typer.Option("--variant", help="Sub-project build variant"),
]
TaskOption = Annotated[
    list[str] | None,
    typer.Option("--task", "-t", help="Requested task name (can be repeated)"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"apkstage version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """APK Stager - resolve a sub-project's APK and stage it into a parent build."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _fail(exc: ApkStageError, json_output: bool) -> NoReturn:
    if json_output:
        _emit_json({"error": error_from_exception(exc).to_dict()})
    else:
        err_console.print(f"[red]{exc}[/red]")
    raise typer.Exit(code=1) from exc


def _load_config(
    settings: Settings,
    project_dir: Path,
    config_path: Path | None,
    **overrides: Any,
) -> "StageConfig":
    from apkstage.projects.io import load_stage_config, merge_overrides

    if config_path is None:
        config_path = project_dir / settings.config_file
    elif not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    return merge_overrides(load_stage_config(config_path), **overrides)


@app.command()
def config(json_output: JsonOption = False) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
    else:
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Files:[/bold]")
        console.print(f"  Config file:         {settings.config_file}")
        console.print(f"  Artifact extension:  {settings.artifact_extension}")
        console.print()
        console.print("[bold]Build intent:[/bold]")
        markers = ", ".join(settings.explicit_task_markers) or "(none)"
        console.print(f"  Explicit markers:    {markers}")
        console.print()
        console.print("[bold]Walk:[/bold]")
        console.print(f"  Max depth:           {settings.max_walk_depth}")
        console.print(f"  Follow symlinks:     {settings.follow_symlinks}")
        console.print()
        console.print("[bold]Logging:[/bold]")
        console.print(f"  Log level:           {settings.log_level}")


@app.command()
def stage(
    workspace: WorkspaceOption = Path("."),
    project_dir: ProjectDirOption = Path("."),
    config_path: ConfigOption = None,
    sub_project: SubProjectOption = None,
    variant: VariantOption = None,
    assets_dir: Annotated[
        str | None,
        typer.Option("--assets-dir", help="Staging directory relative to the parent"),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="File name of the staged copy"),
    ] = None,
    tasks: TaskOption = None,
    require: Annotated[
        bool,
        typer.Option("--require", help="Exit non-zero when nothing was staged"),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Resolve the sub-project's artifact and copy it into the parent's assets.

    A missing sub-project or artifact is reported and skipped. Use --require
    when packaging cannot proceed without the staged copy.
    """
    from apkstage.staging.service import stage_subproject

    settings = get_settings()
    try:
        stage_config = _load_config(
            settings,
            project_dir,
            config_path,
            sub_project=sub_project,
            variant=variant,
            assets_dir=assets_dir,
            target_apk_name=name,
        )
        result = stage_subproject(
            workspace,
            project_dir,
            stage_config,
            task_names=tasks or [],
            settings=settings,
        )
    except ApkStageError as e:
        _fail(e, json_output)

    if json_output:
        _emit_json(result.to_dict())
    elif result.staged:
        console.print(f"[green]{result.message}[/green]")
        if result.artifact is not None and result.artifact.materialized:
            console.print(
                f"  Materialized from: {result.artifact.materialized_from}"
            )
    else:
        console.print(f"[yellow]{result.message}[/yellow]")

    if require and not result.staged:
        raise typer.Exit(code=1)


@app.command()
def locate(
    workspace: WorkspaceOption = Path("."),
    project_dir: ProjectDirOption = Path("."),
    config_path: ConfigOption = None,
    sub_project: SubProjectOption = None,
    variant: VariantOption = None,
    tasks: TaskOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show the search roots and the artifact a staging run would pick.

    Nothing is written. When an explicit build would promote an intermediate
    artifact, the source and the would-be canonical copy are both shown.
    """
    from apkstage.staging.service import locate_artifact

    settings = get_settings()
    try:
        stage_config = _load_config(
            settings,
            project_dir,
            config_path,
            sub_project=sub_project,
            variant=variant,
        )
        result = locate_artifact(
            workspace, stage_config, task_names=tasks or [], settings=settings
        )
    except ApkStageError as e:
        _fail(e, json_output)

    artifact = str(result.artifact.path) if result.artifact else None
    if json_output:
        _emit_json(
            {
                "intent": result.intent.value,
                "build_root": str(result.build_root),
                "roots": [
                    {"path": str(r.path), "rank": r.rank, "kind": r.kind.value}
                    for r in result.roots
                ],
                "artifact": artifact,
                "would_materialize": (
                    {"source": str(result.would_materialize), "destination": artifact}
                    if result.would_materialize
                    else None
                ),
            }
        )
        return

    console.print(f"[bold]Intent:[/bold] {result.intent.value}")
    console.print("[bold]Search roots:[/bold]")
    for r in result.roots:
        marker = "" if r.path.exists() else " (missing)"
        console.print(f"  {r.rank}. {r.path} ({r.kind.value}){marker}")
    if result.would_materialize:
        console.print(
            f"[green]Would materialize {result.would_materialize} -> {artifact}[/green]"
        )
    elif artifact:
        console.print(f"[green]Artifact: {artifact}[/green]")
    else:
        console.print("[yellow]No artifact found[/yellow]")


@app.command()
def hooks(
    project_dir: ProjectDirOption = Path("."),
    config_path: ConfigOption = None,
    host_tasks: Annotated[
        list[str] | None,
        typer.Option("--host-task", help="Task present in the parent project"),
    ] = None,
    sub_tasks: Annotated[
        list[str] | None,
        typer.Option("--sub-task", help="Task present in the sub-project"),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Show where the staging task is wired for the given task sets."""
    from apkstage.hooks import TaskRegistry, plan_hooks, qualified

    settings = get_settings()
    try:
        stage_config = _load_config(settings, project_dir, config_path)
    except ApkStageError as e:
        _fail(e, json_output)

    host = TaskRegistry(":", host_tasks or [])
    sub = TaskRegistry(f":{stage_config.sub_project}", sub_tasks or [])
    plan = plan_hooks(stage_config, host, sub)

    if json_output:
        _emit_json(plan.to_dict())
        return

    console.print(f"[bold]{plan.stage_task}[/bold] depends on {plan.depends_on}")
    for hook in plan.hooks:
        verb = "before" if hook.relation == "depends_on" else "after"
        console.print(f"  runs {verb} {qualified(hook.project, hook.task)}")
    if plan.missing:
        console.print(f"  not present: {', '.join(plan.missing)}")


if __name__ == "__main__":
    app()
