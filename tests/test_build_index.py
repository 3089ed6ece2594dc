import datetime as dt
from pathlib import Path
from types import SimpleNamespace

from bs4 import BeautifulSoup

from postpreview.build import build_index, render_index
from postpreview.models import Post, SiteConfig


def _post(slug: str, date: dt.date, **overrides) -> Post:
    payload = {
        "relativeUrl": f"/{slug}/",
        "title": slug.title(),
        "description": f"About {slug}.",
        "date": date,
        "slug": slug,
    }
    payload.update(overrides)
    return Post.model_validate(payload)


def test_render_index_orders_newest_first():
    posts = [
        _post("old", dt.date(2020, 1, 1)),
        _post("new", dt.datetime(2024, 5, 1, 8, 0)),
        _post("middle", dt.date(2022, 6, 1)),
    ]

    result = render_index(posts)

    assert result.ok
    assert [post.slug for post in result.rendered] == ["new", "middle", "old"]
    soup = BeautifulSoup(result.html, "html.parser")
    hrefs = [link["href"] for link in soup.select("article.post-preview h2 a")]
    assert hrefs == ["/new/", "/middle/", "/old/"]


def test_render_index_keeps_input_order_for_equal_dates():
    same_day = dt.date(2024, 1, 1)
    posts = [_post("first", same_day), _post("second", same_day)]

    result = render_index(posts)

    assert [post.slug for post in result.rendered] == ["first", "second"]


def test_render_index_skips_invalid_posts():
    posts = [
        _post("good", dt.date(2024, 1, 1)),
        {"slug": "broken", "title": "No description", "date": "2024-01-02"},
    ]

    result = render_index(posts)

    assert not result.ok
    assert [post.slug for post in result.rendered] == ["good"]
    assert len(result.failures) == 1
    assert result.failures[0].label == "broken"
    assert "description" in str(result.failures[0])


def test_render_index_empty():
    result = render_index([])
    assert result.html == ""
    assert result.ok


def test_build_index_writes_listing(tmp_path: Path):
    output = tmp_path / "out" / "index.html"
    config = SiteConfig(content_dir=Path("content/posts"), output=output)

    result = build_index(config)

    assert result.ok
    html = output.read_text(encoding="utf-8")
    soup = BeautifulSoup(html, "html.parser")
    titles = [link.get_text() for link in soup.select("h2 a")]
    assert titles == ["Release notes", "Hello, bridge", "Party like it's 1999"]
    dates = [p.get_text() for p in soup.select("p.post-preview__date")]
    assert dates == ["June 18, 2024", "March 05, 2024", "December 01, 1999"]
    assert "&lt;code&gt;0.2&lt;/code&gt;" in html


def test_build_index_isolates_broken_files(tmp_path: Path):
    content = tmp_path / "posts"
    content.mkdir()
    (content / "2024-01-01-good.md").write_text(
        "---\ntitle: Good\ndescription: d\n---\n", encoding="utf-8"
    )
    (content / "2024-01-02-bad.md").write_text("---\ntitle: Bad\n---\n", encoding="utf-8")
    output = tmp_path / "index.html"

    result = build_index(SiteConfig(content_dir=content, output=output))

    assert [post.slug for post in result.rendered] == ["good"]
    assert len(result.failures) == 1
    assert result.failures[0].label.endswith("2024-01-02-bad.md")
    assert "/2024/01/01/good/" in output.read_text(encoding="utf-8")


def test_build_index_is_deterministic(tmp_path: Path):
    first = tmp_path / "a.html"
    second = tmp_path / "b.html"

    build_index(SiteConfig(content_dir=Path("content/posts"), output=first))
    build_index(SiteConfig(content_dir=Path("content/posts"), output=second))

    assert first.read_bytes() == second.read_bytes()


def test_build_index_records_unreadable_files(tmp_path: Path):
    content = tmp_path / "posts"
    content.mkdir()
    (content / "2024-01-01-good.md").write_text(
        "---\ntitle: Good\ndescription: d\n---\n", encoding="utf-8"
    )
    (content / "2024-01-02-latin1.md").write_bytes(
        "---\ntitle: Café\ndescription: d\n---\n".encode("latin-1")
    )
    (content / "2024-01-03-numeric.md").write_text(
        "---\ntitle: N\ndescription: d\ncategories: 2024\n---\n", encoding="utf-8"
    )
    output = tmp_path / "index.html"

    result = build_index(SiteConfig(content_dir=content, output=output))

    assert [post.slug for post in result.rendered] == ["good"]
    labels = sorted(Path(failure.label).name for failure in result.failures)
    assert labels == ["2024-01-02-latin1.md", "2024-01-03-numeric.md"]
    assert "/2024/01/01/good/" in output.read_text(encoding="utf-8")


def test_render_index_compares_across_timezones():
    posts = [
        _post("a", dt.datetime(2024, 1, 1, 10, 0, tzinfo=dt.timezone(dt.timedelta(hours=5)))),
        _post("b", dt.datetime(2024, 1, 1, 6, 0, tzinfo=dt.timezone.utc)),
        _post("c", dt.datetime(2024, 1, 1, 5, 30)),
    ]

    result = render_index(posts)

    assert [post.slug for post in result.rendered] == ["b", "c", "a"]


def test_render_index_accepts_attribute_objects():
    posts = [
        SimpleNamespace(
            relative_url="/ns/",
            title="Namespace",
            description="d",
            date=dt.date(2024, 2, 2),
            slug="ns",
        ),
        SimpleNamespace(title="Half", date=dt.date(2024, 2, 3)),
    ]

    result = render_index(posts)

    assert [post.relative_url for post in result.rendered] == ["/ns/"]
    assert len(result.failures) == 1
    assert result.failures[0].label == "Half"
    assert 'href="/ns/"' in result.html
