"""Inkwell blog content manager.

This package owns the content model of a Markdown blog: posts and static
pages written as files with a YAML metadata block and a Markdown body.
It parses and validates those files and enumerates and looks up
Documents. It indexes them by tag and exports them as a JSON manifest
for an external site generator to render.

The main entry point is the CLI module, which provides commands for
listing, inspecting, validating, exporting and creating content.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
