import json
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from inkwell import __version__
from inkwell.cli import _existing_slugs, _next_order, cli
from inkwell.frontmatter import split_frontmatter


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path, monkeypatch):
    content = tmp_path / "content"
    write(
        content / "posts" / "2022-05-01-caching.md",
        '---\ntitle: "Caching"\ndate: 2022-05-01\ntags: [Python, Back-end]\n---\nCaches.\n',
    )
    write(
        content / "posts" / "2023-02-14-asyncio.md",
        "---\ntitle: Async programming\ntags: [Python]\n---\nLoops.\n",
    )
    write(content / "posts" / "_2024-01-01-wip.md", "---\ntitle: WIP\n---\nSoon.\n")
    write(content / "pages" / "about.md", "---\ntitle: About me\norder: 1\n---\nHi.\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def fake_questions(monkeypatch, answers):
    responses = iter(answers)

    class MockQuestion:
        def ask(self):
            return next(responses)

    def ask(*args, **kwargs):
        return MockQuestion()

    monkeypatch.setattr("inkwell.cli.questionary.select", ask)
    monkeypatch.setattr("inkwell.cli.questionary.text", ask)


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_is_newest_first(project):
    result = CliRunner().invoke(cli, ["list"], catch_exceptions=False)
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert [line.split()[1] for line in lines] == ["asyncio", "caching", "about"]
    assert lines[0].startswith("2023-02-14")
    assert lines[2].startswith("----------")


def test_list_filters_and_drafts(project):
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--tag", "Back-end"], catch_exceptions=False)
    assert result.output.split()[1] == "caching"
    assert len(result.output.splitlines()) == 1

    result = runner.invoke(cli, ["list", "--drafts"], catch_exceptions=False)
    assert "wip" in result.output
    assert "(draft)" in result.output


def test_show_document(project):
    result = CliRunner().invoke(cli, ["show", "caching", "--body"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Caching" in result.output
    assert "date:   2022-05-01" in result.output
    assert "tags:   Python, Back-end" in result.output
    assert "posts/2022-05-01-caching.md" in result.output
    assert "Caches." in result.output


def test_show_unknown_identifier(project):
    result = CliRunner().invoke(cli, ["show", "haskell"])
    assert result.exit_code == 1
    assert "No document with identifier 'haskell'" in result.output


def test_tags_counts(project):
    result = CliRunner().invoke(cli, ["tags"], catch_exceptions=False)
    assert result.exit_code == 0
    assert result.output.splitlines() == ["   2  Python", "   1  Back-end"]


def test_malformed_content_names_file(project):
    write(project / "content" / "posts" / "2020-01-01-bad.md", "# no metadata\n")
    result = CliRunner().invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "Invalid content:" in result.output
    assert "posts/2020-01-01-bad.md" in result.output
    assert "missing metadata block" in result.output


def test_check_passes_and_fails(project):
    runner = CliRunner()
    result = runner.invoke(cli, ["check"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "All content is valid (0 warning(s))" in result.output

    write(project / "content" / "posts" / "2020-01-01-bad.md", "---\ndate: 2020-01-01\n---\nx\n")
    write(project / "content" / "pages" / "now.md", "---\ntitle: Now\n---\nx\n")
    result = runner.invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "missing required key 'title'" in result.output
    assert "page has no 'order' hint" in result.output
    assert "1 error(s), 1 warning(s)" in result.output


def test_export_writes_manifest(project):
    write(project / "inkwell.yaml", "title: Notes\nmanifest: build/site.json\n")
    result = CliRunner().invoke(cli, ["export"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Exported 3 documents" in result.output
    data = json.loads((project / "build" / "site.json").read_text(encoding="utf-8"))
    assert data["site"]["title"] == "Notes"
    assert [d["slug"] for d in data["documents"]] == ["asyncio", "caching", "about"]

    out = project / "other.json"
    result = CliRunner().invoke(cli, ["export", "-o", str(out), "--drafts"], catch_exceptions=False)
    assert result.exit_code == 0
    assert json.loads(out.read_text(encoding="utf-8"))["documents"][0]["slug"] == "wip"


def test_missing_content_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["list"])
    assert result.exit_code != 0
    assert "No content directory found" in result.output


def test_bad_config_is_reported(project):
    write(project / "inkwell.yaml", "- not\n- a mapping\n")
    result = CliRunner().invoke(cli, ["list"])
    assert result.exit_code != 0
    assert "configuration must be a mapping" in result.output

    write(project / "inkwell.yaml", "since: 2022-13-01\n")
    result = CliRunner().invoke(cli, ["list"])
    assert result.exit_code != 0
    assert "inkwell.yaml" in result.output
    assert not isinstance(result.exception, ValueError)


def test_new_post(project, monkeypatch):
    write(project / "inkwell.yaml", "author: Ana\n")
    fake_questions(monkeypatch, ["post", "Rule-based parsing in Haskell", "Haskell, Parsing"])
    result = CliRunner().invoke(cli, ["new"], catch_exceptions=False)
    assert result.exit_code == 0

    today = date.today()
    target = project / "content" / "posts" / f"{today.isoformat()}-rule-based-parsing-in-haskell.md"
    assert target.exists()
    meta, body = split_frontmatter(target.read_text(encoding="utf-8"), target)
    assert meta == {
        "title": "Rule-based parsing in Haskell",
        "author": "Ana",
        "date": today,
        "tags": ["Haskell", "Parsing"],
    }
    assert body.strip()

    listed = CliRunner().invoke(cli, ["list"], catch_exceptions=False)
    assert "rule-based-parsing-in-haskell" in listed.output


def test_new_page_gets_next_order(project, monkeypatch):
    fake_questions(monkeypatch, ["page", "Uses", ""])
    result = CliRunner().invoke(cli, ["new"], catch_exceptions=False)
    assert result.exit_code == 0
    target = project / "content" / "pages" / "uses.md"
    meta, _ = split_frontmatter(target.read_text(encoding="utf-8"), target)
    assert meta == {"title": "Uses", "order": 2}


def test_new_refuses_existing_identifier(project, monkeypatch):
    fake_questions(monkeypatch, ["page", "Caching", ""])
    result = CliRunner().invoke(cli, ["new"])
    assert result.exit_code != 0
    assert "identifier 'caching' already exists" in result.output


def test_new_aborts_when_cancelled(project, monkeypatch):
    fake_questions(monkeypatch, [None])
    result = CliRunner().invoke(cli, ["new"])
    assert result.exit_code != 0


def test_helpers(tmp_path):
    pages = tmp_path / "pages"
    write(pages / "a.md", "---\ntitle: A\norder: 4\n---\nx\n")
    write(pages / "b.md", "---\ntitle: B\n---\nx\n")
    write(pages / "broken.md", "no block")
    write(tmp_path / "posts" / "_2020-01-01-draft-post.md", "x")
    assert _next_order(pages) == 5
    assert _next_order(tmp_path / "missing") == 1
    assert _existing_slugs(tmp_path / "posts", pages) == {"draft-post", "a", "b", "broken"}


def test_verbose_enables_debug_logging(project, monkeypatch):
    calls = {}
    monkeypatch.setattr(
        "inkwell.cli.logging.basicConfig", lambda **kwargs: calls.update(kwargs)
    )
    result = CliRunner().invoke(cli, ["--verbose", "list"], catch_exceptions=False)
    assert result.exit_code == 0
    assert calls["level"] == 10


def test_module_main_entrypoint():
    from inkwell.__main__ import main

    assert callable(main)
