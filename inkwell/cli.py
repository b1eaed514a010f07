"""Command-line interface for Inkwell.

This module defines the CLI commands using Click framework. Every
command runs against the project in the current directory.

Commands:
- list: List documents, most recent first.
- show: Show one document's metadata (and optionally its body).
- tags: List tags with document counts.
- check: Validate every content file.
- export: Write the JSON manifest for the site generator.
- new: Create a new post or page interactively.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import click
import questionary

from . import __version__
from .collections import ContentCollection
from .config import content_dir, load_config
from .errors import ConfigError, DocumentError, DocumentNotFoundError
from .frontmatter import dump_frontmatter
from .utils import slugify


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Inkwell blog content manager."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


@cli.command(name="list")
@click.option("--tag", default=None, help="Only list documents with this tag")
@click.option("--drafts", is_flag=True, help="Include draft content")
def list_documents(tag: str | None, drafts: bool):
    """List documents, most recent first."""
    collection = _open_collection(drafts)
    with _document_errors():
        documents = collection.with_tag(tag) if tag else list(collection)
    for document in documents:
        when = document.date.isoformat() if document.date else "----------"
        marker = click.style(" (draft)", fg="yellow") if document.draft else ""
        click.echo(f"{when}  {document.slug:<32} {document.title}{marker}")


@cli.command()
@click.argument("identifier")
@click.option("--body", is_flag=True, help="Print the document body too")
@click.option("--drafts", is_flag=True, help="Include draft content")
def show(identifier: str, body: bool, drafts: bool):
    """Show one document by identifier."""
    collection = _open_collection(drafts)
    with _document_errors():
        try:
            document = collection.get(identifier)
        except DocumentNotFoundError as exc:
            raise click.ClickException(str(exc)) from None
    click.echo(click.style(document.title, bold=True))
    click.echo(f"  slug:   {document.slug}")
    click.echo(f"  kind:   {document.kind}")
    click.echo(f"  file:   {_relative(document.path, Path.cwd())}")
    if document.author:
        click.echo(f"  author: {document.author}")
    if document.date:
        click.echo(f"  date:   {document.date.isoformat()}")
    if document.tags:
        click.echo(f"  tags:   {', '.join(document.tags)}")
    if document.icon:
        click.echo(f"  icon:   {document.icon}")
    if document.order is not None:
        click.echo(f"  order:  {document.order}")
    if body:
        click.echo()
        click.echo(document.body)


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft content")
def tags(drafts: bool):
    """List tags with the number of documents carrying each."""
    collection = _open_collection(drafts)
    with _document_errors():
        counts = collection.tags().counts()
    for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0].lower())):
        click.echo(f"{count:>4}  {tag}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Check draft content too")
def check(drafts: bool):
    """Validate every content file."""
    from .validation import check_collection

    collection = _open_collection(drafts)
    diagnostics = check_collection(collection)
    root = Path.cwd()
    for diagnostic in diagnostics:
        color = "red" if diagnostic.is_error else "yellow"
        click.echo(
            click.style(f"{_relative(diagnostic.path, root)}: ", fg="white")
            + click.style(diagnostic.level, fg=color, bold=True)
            + f": {diagnostic.message}",
            err=True,
        )
    errors = sum(1 for d in diagnostics if d.is_error)
    warnings = len(diagnostics) - errors
    if errors:
        click.echo(click.style(f"{errors} error(s), {warnings} warning(s)", fg="red"), err=True)
        raise SystemExit(1)
    click.echo(f"All content is valid ({warnings} warning(s))")


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Manifest path (overrides inkwell.yaml manifest)",
)
@click.option("--drafts", is_flag=True, help="Include draft content")
def export(output: Path | None, drafts: bool):
    """Write the JSON manifest for the site generator."""
    from .manifest import ManifestRenderer

    collection = _open_collection(drafts)
    target = output or Path.cwd() / str(collection.config["manifest"])
    with _document_errors():
        ManifestRenderer(target).render(collection)
    click.echo(f"Exported {len(collection)} documents to {target}")


@cli.command()
def new():
    """Create a new post or page interactively."""
    project_root = Path.cwd()
    config = _load_config(project_root)
    root = content_dir(project_root, config)
    posts_dir = root / str(config["posts_dir"])
    pages_dir = root / str(config["pages_dir"])

    kind = questionary.select(
        "Kind:", choices=["post", "page"], style=_questionary_style()
    ).ask()
    if kind is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tag_text = questionary.text(
        "Tags (comma-separated):", style=_questionary_style()
    ).ask()
    if tag_text is None:
        raise click.Abort()

    slug = slugify(title)
    if not slug:
        raise click.ClickException(f"Cannot derive a filename from title '{title}'")
    if slug in _existing_slugs(posts_dir, pages_dir):
        raise click.ClickException(f"A document with identifier '{slug}' already exists")

    metadata: dict = {"title": title}
    if config.get("author"):
        metadata["author"] = config["author"]
    if kind == "post":
        today = date.today()
        metadata["date"] = today
        target = posts_dir / f"{today.isoformat()}-{slug}.md"
    else:
        metadata["order"] = _next_order(pages_dir)
        target = pages_dir / f"{slug}.md"
    tags_list = [t.strip() for t in tag_text.split(",") if t.strip()]
    if tags_list:
        metadata["tags"] = tags_list

    if target.exists():
        raise click.ClickException(f"File already exists: {_relative(target, project_root)}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_frontmatter(metadata, "\nStart writing here.\n"), encoding="utf-8")
    click.echo(f"Created {_relative(target, project_root)}")


@contextmanager
def _document_errors():
    """Turn a DocumentError into a red diagnostic and exit status 1."""
    try:
        yield
    except DocumentError as exc:
        rel_path = _relative(exc.source_path, Path.cwd())
        click.echo(click.style("Invalid content:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None


def _load_config(project_root: Path) -> dict:
    try:
        return load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None


def _open_collection(drafts: bool) -> ContentCollection:
    project_root = Path.cwd()
    config = _load_config(project_root)
    root = content_dir(project_root, config)
    if not root.is_dir():
        raise click.ClickException(
            f"No content directory found at {_relative(root, project_root)}. "
            "Run this command from an Inkwell project root."
        )
    return ContentCollection(root, config, include_drafts=drafts)


def _existing_slugs(*folders: Path) -> set[str]:
    """Collect identifiers already taken by files in the given folders."""
    slugs = set()
    for folder in folders:
        if not folder.exists():
            continue
        for f in folder.rglob("*.md"):
            slugs.add(slugify(f.stem.lstrip("_")))
    return slugs


def _next_order(pages_dir: Path) -> int:
    """Return an ordering hint after every numbered page."""
    from .extractors import OrderExtractor
    from .frontmatter import split_frontmatter

    highest = 0
    if pages_dir.exists():
        for path in pages_dir.rglob("*.md"):
            try:
                frontmatter, _ = split_frontmatter(path.read_text(encoding="utf-8"), path)
                order = OrderExtractor().extract(frontmatter, "", path)["order"]
            except (DocumentError, OSError, UnicodeDecodeError):
                continue
            if order is not None:
                highest = max(highest, order)
    return highest + 1


def _relative(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
