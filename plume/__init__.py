"""Plume static blog generator.

This package turns markdown files into a small static blog: one HTML page per
post, a home index page, and an RSS feed. The blog is driven by two commands,
``publish`` and ``remove``, each run as a single batch invocation.

State that must survive between invocations lives in two documents:
- The archive (JSON) maps each post title to its output path and publish date.
- The feed (RSS 2.0) lists one item per published post.

Modules:
- posts: Post metadata derivation from markdown.
- archive: Archive persistence.
- feeds: RSS feed synchronization.
- blog: Orchestration of the publish/remove commands and site rebuild.
- cli: Click command-line interface.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
