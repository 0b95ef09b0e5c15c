"""CLI entry point using Click"""

import click
import json
import sys
from . import (
    KINDS,
    hover,
    describe,
    __version__,
)


def _contents_to_markdown(contents) -> str:
    """Flatten LSP hover contents to markdown text."""
    if isinstance(contents, str):
        return contents
    if isinstance(contents, list):
        return "\n\n".join(_contents_to_markdown(c) for c in contents)
    if "language" in contents:
        return f"```{contents['language']}\n{contents['value']}\n```"
    return contents.get("value", "")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--format",
    type=click.Choice(["json", "markdown"]),
    default="json",
    help="Output format",
)
@click.option(
    "--data",
    "data_paths",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Extra CSS custom data JSON file (repeatable)",
)
@click.pass_context
def cli(ctx, format, data_paths):
    """csslens: documentation hovers for CSS

    Examples:
      csslens hover styles.css 0 12
      csslens describe property color
      csslens lsp  # Start LSP server for editors
    """
    ctx.ensure_object(dict)
    ctx.obj["format"] = format
    ctx.obj["data_paths"] = list(data_paths) or None


@cli.command("hover")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.argument("line", type=int)
@click.argument("character", type=int)
@click.option("--plain", is_flag=True, help="Strip markup as a plain text client would")
@click.pass_context
def hover_cmd(ctx, file, line, character, plain):
    """Show the hover for a position in a stylesheet

    LINE and CHARACTER are zero based, as in LSP.
    """
    fmt = ctx.obj["format"]
    try:
        result = hover(file.read(), line, character, markdown=not plain, data_paths=ctx.obj["data_paths"])
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if result is None:
        click.echo("No hover information", err=True)
        sys.exit(1)
    if fmt == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        click.echo(_contents_to_markdown(result["contents"]))


@cli.command("describe")
@click.argument("kind", type=click.Choice(KINDS))
@click.argument("name")
@click.pass_context
def describe_cmd(ctx, kind, name):
    """Look up documentation for a property, at-rule or pseudo selector

    Examples:
      csslens describe property border-radius
      csslens describe at-rule font-face
      csslens describe pseudo ::before
    """
    fmt = ctx.obj["format"]
    try:
        result = describe(kind, name, data_paths=ctx.obj["data_paths"])
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if result is None:
        click.echo(f"No documentation for {kind} '{name}'", err=True)
        sys.exit(1)
    if fmt == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        click.echo(f"## {result['name']}")
        click.echo()
        click.echo(_contents_to_markdown(result["description"]))
        if result["browser_label"]:
            click.echo()
            click.echo(f"*{result['browser_label']}*")


@cli.command()
@click.option("--stdio", is_flag=True, default=False, hidden=True,
              help="Use stdio transport (default, accepted for LSP client compatibility).")
def lsp(**_kwargs):
    """Start Language Server Protocol server

    Communicates over stdio. Used by editor extensions.

    Installation:
      # Neovim: vim.lsp.start({ cmd = { "csslens", "lsp" } })
    """
    try:
        from .lsp import start_server
        start_server()
    except ImportError as e:
        click.echo(
            "LSP dependencies not installed. Install with:\n"
            "  pip install 'csslens[lsp]'\n"
            f"\nMissing: {e}",
            err=True,
        )
        sys.exit(1)


@cli.command()
def mcp():
    """Start MCP server for AI agents

    This starts a Model Context Protocol server that communicates over stdio.
    AI agents can connect to it to look up CSS documentation.

    Installation:
      pip install 'csslens[mcp]'
    """
    try:
        import asyncio
        from .mcp import run_server

        asyncio.run(run_server())
    except ImportError as e:
        click.echo(
            "MCP dependencies not installed. Install with:\n"
            "  pip install 'csslens[mcp]'\n"
            f"\nMissing: {e}",
            err=True,
        )
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nMCP server stopped", err=True)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
