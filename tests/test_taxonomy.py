from datetime import datetime, timedelta, timezone

from blogtools.posts import Post
from blogtools.taxonomy import build_index, check_taxonomy, index_report


def _post(tmp_path, slug, day, categories=(), tags=(), **kw):
    return Post(
        path=tmp_path / f"2024-01-{day:02d}-{slug}.md",
        slug=slug,
        title=slug.title(),
        date=datetime(2024, 1, day),
        categories=list(categories),
        tags=list(tags),
        **kw,
    )


def test_build_index_newest_first_and_skips_unpublished(tmp_path):
    old = _post(tmp_path, "old", 1, ["Django"], ["orm"])
    new = _post(tmp_path, "new", 5, ["Django", "ORM"], ["orm", "memory"])
    hidden = _post(tmp_path, "hidden", 9, ["Django"], ["orm"], published=False)
    draft = _post(tmp_path, "draft", 9, ["Django"], draft=True)

    index = build_index([old, new, hidden, draft])
    assert list(index["categories"]) == ["Django", "ORM"]
    assert [p.slug for p in index["categories"]["Django"]] == ["new", "old"]
    assert [p.slug for p in index["tags"]["orm"]] == ["new", "old"]
    assert [p.slug for p in index["tags"]["memory"]] == ["new"]


def test_check_taxonomy_flags_same_archive_page(tmp_path):
    a = _post(tmp_path, "a", 1, ["Django"], ["query set"])
    b = _post(tmp_path, "b", 2, ["django"], ["Query-Set", "orm"])

    issues = check_taxonomy([a, b])
    messages = sorted(i.message for i in issues)
    assert messages == [
        "category 'Django' shares the archive page 'django' with 'django'",
        "tag 'query set' shares the archive page 'query-set' with 'Query-Set'",
    ]
    assert all(i.level == "warning" for i in issues)


def test_check_taxonomy_clean(tmp_path):
    a = _post(tmp_path, "a", 1, ["Django"], ["orm"])
    b = _post(tmp_path, "b", 2, ["Django"], ["orm", "iterator"])
    assert check_taxonomy([a, b]) == []


def test_index_report(tmp_path):
    a = _post(tmp_path, "first", 1, ["Django"], ["orm"])
    b = _post(tmp_path, "second", 2, ["Django"], [])
    report = index_report(build_index([a, b]))
    assert report == {
        "categories": {"Django": {"count": 2, "posts": ["Second", "First"]}},
        "tags": {"orm": {"count": 1, "posts": ["First"]}},
    }


def test_build_index_orders_by_instant_across_offsets(tmp_path):
    kst = timezone(timedelta(hours=9))
    # 10:00 +0900 is 01:00 UTC, earlier than 05:00 UTC despite the later wall clock
    seoul = _post(tmp_path, "seoul", 1, ["Django"])
    seoul.date = datetime(2024, 1, 1, 10, 0, tzinfo=kst)
    london = _post(tmp_path, "london", 1, ["Django"])
    london.date = datetime(2024, 1, 1, 5, 0, tzinfo=timezone.utc)

    index = build_index([seoul, london])
    assert [p.slug for p in index["categories"]["Django"]] == ["london", "seoul"]


def test_build_index_puts_pinned_posts_first(tmp_path):
    old = _post(tmp_path, "old", 1, ["Django"], pinned=True)
    new = _post(tmp_path, "new", 5, ["Django"])
    undated = _post(tmp_path, "undated", 3, ["Django"])
    undated.date = None

    index = build_index([new, old, undated])
    assert [p.slug for p in index["categories"]["Django"]] == ["old", "new", "undated"]
