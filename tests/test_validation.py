from datetime import date
from pathlib import Path

from inkwell.collections import ContentCollection
from inkwell.content import Document
from inkwell.validation import ERROR, WARNING, Diagnostic, check_collection, lint_document, missing_media


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_clean_collection_has_no_diagnostics(tmp_path):
    content = tmp_path / "content"
    write(content / "posts" / "2022-05-01-caching.md", "---\ntitle: Caching\n---\nBody\n")
    write(content / "pages" / "about.md", "---\ntitle: About\norder: 1\n---\nBody\n")
    assert check_collection(ContentCollection(content)) == []


def test_reports_every_error_not_just_the_first(tmp_path):
    content = tmp_path / "content"
    missing = write(content / "posts" / "2022-01-01-a.md", "No block\n")
    no_title = write(content / "posts" / "2022-01-02-b.md", "---\nauthor: X\n---\nBody\n")
    bad_date = write(content / "posts" / "2022-01-03-c.md", "---\ntitle: C\ndate: 2022-02-30\n---\nBody\n")
    write(content / "posts" / "2022-01-04-d.md", "---\ntitle: D\n---\nBody\n")
    dup = write(content / "pages" / "d.md", "---\ntitle: D page\norder: 1\n---\nBody\n")

    diagnostics = check_collection(ContentCollection(content))
    errors = [d for d in diagnostics if d.is_error]
    assert [d.path for d in errors] == [missing, no_title, bad_date, dup]
    assert "missing metadata block" in errors[0].message
    assert "title" in errors[1].message
    assert "invalid metadata" in errors[2].message
    assert "already used" in errors[3].message


def test_convention_warnings(tmp_path):
    content = tmp_path / "content"
    undated = write(content / "posts" / "no-date.md", "---\ntitle: Undated\n---\nBody\n")
    mismatch = write(
        content / "posts" / "2022-05-01-mismatch.md",
        "---\ntitle: Mismatch\ndate: 2022-06-01\n---\nBody\n",
    )
    unordered = write(content / "pages" / "about.md", "---\ntitle: About\n---\nBody\n")
    write(content / "pages" / "img" / "present.png", "png")
    images = write(
        content / "pages" / "gallery.md",
        "---\ntitle: Gallery\norder: 2\n---\n![a](img/present.png) ![b](img/absent.png) "
        "![c](https://example.com/c.png) ![d](/static/d.png)\n",
    )

    diagnostics = check_collection(ContentCollection(content))
    assert all(d.level == WARNING for d in diagnostics)
    messages = {(d.path, d.message) for d in diagnostics}
    assert (undated, "post filename has no YYYY-MM-DD- prefix") in messages
    assert (
        mismatch,
        "date 2022-06-01 does not match filename date 2022-05-01",
    ) in messages
    assert (unordered, "page has no 'order' hint") in messages
    assert (images, "image not found: img/absent.png") in messages
    assert len(diagnostics) == 4


def test_invalid_filename_date_warns(tmp_path):
    path = tmp_path / "posts" / "2022-02-30-leap.md"
    document = Document(title="Leap", body="x", slug="leap", kind="post", path=path)
    warnings = lint_document(document)
    assert [w.message for w in warnings] == ["filename date 2022-02-30 is not a valid date"]


def test_missing_media_ignores_query_and_fragment(tmp_path):
    (tmp_path / "pic.png").write_text("png", encoding="utf-8")
    document = Document(
        title="T",
        body="x",
        slug="t",
        kind="post",
        path=tmp_path / "2020-01-01-t.md",
        date=date(2020, 1, 1),
        media=["pic.png?v=2", "pic.png#top", "{{ asset }}", "gone.png"],
    )
    assert missing_media(document) == ["gone.png"]


def test_images_with_spaces_or_accents_are_found(tmp_path):
    content = tmp_path / "content"
    write(content / "pages" / "img" / "my pic.png", "png")
    write(content / "pages" / "img" / "caf\u00e9.png", "png")
    write(
        content / "pages" / "about.md",
        "---\ntitle: About\norder: 1\n---\n![me](<img/my pic.png>)\n\n![cafe](img/caf\u00e9.png)\n",
    )
    assert check_collection(ContentCollection(content)) == []


def test_diagnostic_formatting():
    diagnostic = Diagnostic(Path("posts/a.md"), "bad", ERROR)
    assert str(diagnostic) == "posts/a.md: error: bad"
    assert diagnostic.is_error
    assert not Diagnostic(Path("a.md"), "meh", WARNING).is_error
