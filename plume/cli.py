"""Command-line interface for Plume.

This module defines the CLI commands using Click framework.

Commands:
- publish: Create or update a post from a markdown file.
- remove: Remove a post by title.

Running without a command, or with an unknown command or option, prints the
help text and exits successfully.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click

from . import __version__
from .archive import ArchiveError
from .blog import Blog, BlogError, load_state, prepare_paths
from .config import ConfigError, load_config
from .posts import PostError
from .templates import RenderError

HELP_TEXT = """A super simple static site generator for a blog.

\b
To create or update a post:
  plume publish example_file.md

\b
The first line of the file must be a heading holding the post's title:
  # Post title
  <The post's content goes here>

\b
To remove a post:
  plume remove 'Post title'
"""

_USER_ERRORS = (PostError, ArchiveError, BlogError, ConfigError, RenderError)


class _HelpGroup(click.Group):
    """Group that shows help instead of failing on an unknown command or option.

    Only the group's own arguments are covered; a subcommand missing its
    argument still fails with a usage error.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError:
            click.echo(ctx.get_help())
            ctx.exit(0)

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if args and args[0] not in self.commands:
            click.echo(ctx.get_help())
            ctx.exit(0)
        return super().resolve_command(ctx, args)


@click.group(cls=_HelpGroup, invoke_without_command=True, help=HELP_TEXT)
@click.version_option(version=__version__, prog_name="plume")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root holding blog.yaml (defaults to the current directory)",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None):
    ctx.obj = (root or Path.cwd()).resolve()
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument(
    "markdown_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.pass_obj
def publish(project_root: Path, markdown_path: Path):
    """Create or update a post from a markdown file."""
    try:
        blog = _open_blog(project_root)
        post = blog.publish(markdown_path)
        _finish(blog)
    except _USER_ERRORS as exc:
        _fail(exc, project_root)
    rel_path = _display_path(blog.output_path(post), project_root)
    click.echo(f'Published "{post.title}" ({post.read_time}) -> {rel_path}')


@cli.command()
@click.argument("title")
@click.option(
    "--purge", is_flag=True, help="Also delete the post's generated HTML page"
)
@click.pass_obj
def remove(project_root: Path, title: str, purge: bool):
    """Remove a post by title."""
    try:
        blog = _open_blog(project_root)
        removed = blog.remove(title, purge=purge)
        _finish(blog)
    except _USER_ERRORS as exc:
        _fail(exc, project_root)
    if removed:
        click.echo(f'Removed "{title}"')
    else:
        click.echo(f'No post titled "{title}"; rebuilt the index anyway')


def _open_blog(project_root: Path) -> Blog:
    config = load_config(project_root)
    prepare_paths(config)
    return Blog(config, load_state(config))


def _finish(blog: Blog) -> None:
    blog.build()
    blog.save()


def _display_path(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        return path


def _fail(exc: Exception, project_root: Path) -> NoReturn:
    """Report a command failure and exit with status 1."""
    click.echo(click.style("Command failed:", fg="red", bold=True), err=True)
    source_path = getattr(exc, "source_path", None)
    if source_path is not None:
        rel_path = _display_path(Path(source_path).resolve(), project_root)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
    message = getattr(exc, "message", str(exc))
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1) from None


def main():
    """Entry point for the CLI application."""
    cli()
