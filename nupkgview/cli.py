"""Command-line interface for nupkgview."""
from __future__ import annotations

import json
from pathlib import Path

import click

from .errors import NupkgError
from .logs import LEVELS, configure_logging
from .mcp import generate_mcp_startup_config
from .models import FileEntry, PackageContent
from .parser import NupkgParser

_package_arg = click.argument("package", type=click.Path(exists=True, dir_okay=False, path_type=Path))


def _parse(package: Path) -> PackageContent:
    try:
        return NupkgParser().parse_package(package)
    except NupkgError as e:
        raise click.ClickException(str(e)) from e


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(list(LEVELS), case_sensitive=False),
    default="warn",
    envvar="NUPKGVIEW_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def cli(ctx, log_level: str):
    """NuGet package (.nupkg) inspection utilities.
    If invoked without a sub-command it starts the web server (same as `serve`)."""
    configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command("info", help="Show the manifest metadata of a package.")
@_package_arg
@click.option("--json", "as_json", is_flag=True, help="Print the full parse result as JSON.")
def info(package: Path, as_json: bool):
    content = _parse(package)
    if as_json:
        click.echo(json.dumps(content.to_dict(), indent=2))
        return

    meta = content.metadata
    click.echo(f"{meta.id} {meta.version}")
    for label, value in (
        ("Title", meta.title),
        ("Authors", ", ".join(meta.authors)),
        ("Owners", ", ".join(meta.owners)),
        ("Description", meta.description),
        ("License", meta.license or meta.license_url),
        ("Project", meta.project_url),
        ("Repository", meta.repository_url),
        ("Tags", ", ".join(meta.tags)),
        ("Package types", ", ".join(pt.name for pt in meta.package_types)),
    ):
        if value:
            click.echo(f"  {label}: {value}")
    if meta.dependencies:
        click.echo("  Dependencies:")
        for dep in meta.dependencies:
            framework = f" [{dep.target_framework}]" if dep.target_framework else ""
            click.echo(f"    {dep.id} {dep.version or ''}{framework}".rstrip())
    for label, path in (("Readme", content.readme_path), ("License file", content.license_path), ("Icon", content.icon_path)):
        if path:
            click.echo(f"  {label}: {path}")


def _echo_tree(nodes: tuple[FileEntry, ...], depth: int = 0) -> None:
    for node in nodes:
        if node.is_directory:
            click.echo(f"{'  ' * depth}{node.name}/")
            _echo_tree(node.children or (), depth + 1)
        else:
            click.echo(f"{'  ' * depth}{node.name} ({node.size} bytes)")


@cli.command("tree", help="Print the file tree of a package.")
@_package_arg
def tree(package: Path):
    _echo_tree(_parse(package).files)


@cli.command("cat", help="Write the raw bytes of one package entry to stdout.")
@_package_arg
@click.argument("entry")
def cat(package: Path, entry: str):
    try:
        content = NupkgParser().get_file_content(package, entry)
    except NupkgError as e:
        raise click.ClickException(str(e)) from e
    click.get_binary_stream("stdout").write(content.content)


@cli.command("mcp-config", help="Print the MCP client startup configuration of an MCP server package.")
@_package_arg
def mcp_config(package: Path):
    content = _parse(package)
    if content.mcp_server_content is None:
        raise click.ClickException(f"{package.name} has no .mcp/server.json")
    try:
        server = json.loads(content.mcp_server_content)
    except ValueError as e:
        raise click.ClickException(f"Invalid {content.mcp_server_path}: {e}") from e
    click.echo(json.dumps(generate_mcp_startup_config(server), indent=2))


@cli.command("serve", help="Run the web server.")
@click.option("--host", default="127.0.0.1")
@click.option("--port", default=5000, type=int)
@click.option("--debug/--no-debug", default=False)
def serve(host: str, port: int, debug: bool):
    """Run the nupkgview JSON web application."""
    from .web import create_app

    app = create_app()
    click.echo(f"* Serving on http://{host}:{port} (debug={debug})")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    cli()
