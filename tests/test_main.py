import yaml

from blogtools.config import ROOT
from blogtools.main import main

from conftest import write_page, write_post


def test_repository_posts_pass_check(capsys):
    assert main(["--root", str(ROOT), "check"]) == 0
    assert "✓ checked" in capsys.readouterr().out


def test_check_clean_blog(blog, capsys):
    assert main(["--root", str(blog), "check"]) == 0
    assert "✓ checked 2 posts" in capsys.readouterr().out


def test_check_fails_on_errors(blog, capsys):
    write_post(blog, "2024-04-01-untitled.md", {"date": "2024-04-01"})
    assert main(["--root", str(blog), "check"]) == 1
    err = capsys.readouterr().err
    assert "ERROR:" in err
    assert "2024-04-01-untitled.md: error: title is missing or empty" in err


def test_check_strict_fails_on_warnings(blog, capsys):
    write_post(blog, "2024-04-01-dup.md", {
        "title": "Dup", "date": "2024-04-01", "tags": ["orm", "orm"],
    })
    assert main(["--root", str(blog), "check"]) == 0
    assert "! " in capsys.readouterr().out
    assert main(["--root", str(blog), "check", "--strict"]) == 1


def test_check_without_posts_dir(tmp_path, capsys):
    assert main(["--root", str(tmp_path), "check"]) == 1
    assert "_posts/ missing" in capsys.readouterr().err


def test_links_requires_build(blog, capsys):
    assert main(["--root", str(blog), "links"]) == 1
    assert "run the Jekyll build first" in capsys.readouterr().err


def test_links_on_build_output(blog, capsys):
    site = blog / "_site"
    write_page(site, "index.html", '<a href="/posts/iterator/">x</a>')
    write_page(site, "posts/iterator/index.html", '<a href="/posts/only-values/">y</a>')
    assert main(["--root", str(blog), "links"]) == 1
    assert "broken link /posts/only-values/" in capsys.readouterr().err

    write_page(site, "posts/only-values/index.html", "ok")
    assert main(["--root", str(blog), "links", "--site", str(site)]) == 0


def test_index_prints_yaml(blog, capsys):
    assert main(["--root", str(blog), "index"]) == 0
    report = yaml.safe_load(capsys.readouterr().out)
    assert report["categories"]["Django"]["count"] == 2
    assert report["tags"]["queryset"]["posts"] == ["Only and values"]


def test_new_scaffolds_post(blog, capsys):
    argv = ["--root", str(blog), "new", "Prefetch related", "-c", "Django", "-t", "orm"]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "prefetch-related.md" in out
    assert len(list((blog / "_posts").glob("*-prefetch-related.md"))) == 1

    assert main(argv) == 1
    assert "already exists" in capsys.readouterr().err
