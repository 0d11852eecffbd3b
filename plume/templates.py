"""Template rendering engine for Plume.

This module uses Jinja2 to render the two site templates:

- The post template, rendered once per published post with that post's fields.
- The home template, rendered with the full archive mapping as ``posts``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)
from markupsafe import Markup

from .config import BlogConfig
from .posts import Post
from .utils import parse_publish_date


class RenderError(Exception):
    """Error while rendering a template, with the template path.

    Attributes:
        source_path: Path to the template that failed.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


_FAILURE_LABELS: tuple[tuple[type[Exception], str], ...] = (
    (UndefinedError, "Undefined variable"),
    (TypeError, "Wrong type"),
    (AttributeError, "Missing attribute"),
)


def _describe_failure(exc: Exception) -> str:
    """Prefix a template runtime failure with what kind of mistake it is."""
    for kind, label in _FAILURE_LABELS:
        if isinstance(exc, kind):
            return f"{label}: {exc}"
    return f"{type(exc).__name__}: {exc}"


def _newest_first(posts: Mapping[str, Post]) -> list[Post]:
    def key(post: Post) -> tuple[int, str]:
        published = parse_publish_date(post.publish_date)
        # Unparsable dates sort last.
        return (-published.toordinal() if published else 0, post.title)

    return sorted(posts.values(), key=key)


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        config: Blog configuration naming the templates.
    """

    def __init__(self, config: BlogConfig):
        self.config = config
        self._environments: dict[Path, Environment] = {}

    def _environment(self, directory: Path) -> Environment:
        env = self._environments.get(directory)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(directory),
                autoescape=select_autoescape(["html", "xml", "template"]),
                keep_trailing_newline=True,
            )
            self._environments[directory] = env
        return env

    def render(self, template_path: Path, context: dict[str, Any]) -> str:
        """Render a template file with the given context.

        Args:
            template_path: Path to the template file.
            context: Variables to make available in the template.

        Returns:
            Rendered text.

        Raises:
            RenderError: If the template is missing, malformed, or fails to render.
        """
        env = self._environment(template_path.parent)
        try:
            template = env.get_template(template_path.name)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise RenderError(template_path, "Template not found", exc) from exc
        except TemplateSyntaxError as exc:
            raise RenderError(
                template_path,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except Exception as exc:
            raise RenderError(template_path, _describe_failure(exc), exc) from exc

    def _blog_context(self) -> dict[str, str]:
        return {"title": self.config.blog_title, "url": self.config.blog_url}

    def render_post(self, post: Post) -> str:
        """Render the post template for one post.

        The post's fields are available at the top level of the context, with
        ``rendered_html`` marked safe so it is inserted unescaped.
        """
        context = asdict(post)
        context["rendered_html"] = Markup(post.rendered_html)
        context["post"] = post
        context["blog"] = self._blog_context()
        return self.render(self.config.post_template, context)

    def render_home(self, posts: Mapping[str, Post]) -> str:
        """Render the home template.

        Context:
            posts: Mapping of title to Post for every archived post.
            post_list: The same posts, newest first.
            blog: Blog title and URL.
        """
        context = {
            "posts": dict(posts),
            "post_list": _newest_first(posts),
            "blog": self._blog_context(),
        }
        return self.render(self.config.home_template, context)
