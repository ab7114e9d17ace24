"""Tests for Markdown conversion and page rendering."""

from __future__ import annotations

import collections.abc as cabc
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from knowledge_site.generator import (
    FixedLayoutPage,
    GenericDocumentPage,
    HtmlContentRenderer,
    PageRenderer,
)
from knowledge_site.homepage import NOT_FOUND_PAGE, fixed_pages, home_page

SiteFactory = cabc.Callable[..., Path]


@pytest.fixture
def renderer() -> HtmlContentRenderer:
    return HtmlContentRenderer()


class TestHtmlContentRenderer:
    """Markdown features used by the notebook pages."""

    def test_fenced_code_is_highlighted_with_language(
        self, renderer: HtmlContentRenderer
    ) -> None:
        html = renderer.markdown("```rust,no_run\nfn main() {}\n```\n")
        soup = BeautifulSoup(html, "html.parser")
        block = soup.select_one("div.codehilite")
        assert block is not None
        assert block.get("data-language") == "rust"
        assert "fn main" in block.get_text()
        assert "no_run" not in html

    def test_highlight_ranges_mark_lines(self, renderer: HtmlContentRenderer) -> None:
        html = renderer.markdown("```rust {2}\nlet a = 1;\nlet b = 2;\n```\n")
        soup = BeautifulSoup(html, "html.parser")
        highlighted = soup.select(".codehilite .hll")
        assert len(highlighted) == 1
        assert "let b" in highlighted[0].get_text()

    def test_code_title_is_rendered_above_the_block(
        self, renderer: HtmlContentRenderer
    ) -> None:
        html = renderer.markdown('```rust title="main.rs"\nfn main() {}\n```\n')
        soup = BeautifulSoup(html, "html.parser")
        title = soup.select_one("div.code-title")
        assert title is not None
        assert title.get_text() == "main.rs"
        assert title.find_next_sibling("div", class_="codehilite") is not None

    def test_details_blocks_keep_markdown(self, renderer: HtmlContentRenderer) -> None:
        html = renderer.markdown(
            "<details>\n<summary>Bindings</summary>\n\n**bold** text\n\n</details>\n"
        )
        soup = BeautifulSoup(html, "html.parser")
        details = soup.select_one("details")
        assert details is not None
        assert details.select_one("summary").get_text() == "Bindings"
        assert details.select_one("strong").get_text() == "bold"
        assert "markdown" not in details.attrs

    def test_admonitions_become_styled_blocks(
        self, renderer: HtmlContentRenderer
    ) -> None:
        html = renderer.markdown(":::tip Reading order\nStart with *variables*.\n:::\n")
        soup = BeautifulSoup(html, "html.parser")
        block = soup.select_one("div.admonition.admonition-tip")
        assert block is not None
        assert block.select_one(".admonition-title").get_text() == "Reading order"
        assert block.select_one("em").get_text() == "variables"

    def test_admonition_markers_inside_code_are_literal(
        self, renderer: HtmlContentRenderer
    ) -> None:
        html = renderer.markdown("```text\n:::note\n```\n")
        assert "admonition" not in html
        assert ":::note" in html

    def test_table_of_contents_collects_second_and_third_level(
        self, renderer: HtmlContentRenderer
    ) -> None:
        result = renderer.convert("## Ownership\n\n### Moves\n\n#### Deep\n\nText\n")
        assert [(entry.level, entry.anchor, entry.label) for entry in result.toc] == [
            (2, "ownership", "Ownership"),
            (3, "moves", "Moves"),
        ]

    def test_stylesheet_scopes_both_themes(self, renderer: HtmlContentRenderer) -> None:
        css = renderer.stylesheet
        assert "html[data-theme='light'] .codehilite" in css
        assert "html[data-theme='dark'] .codehilite" in css

    def test_tilde_and_backtick_fences_keep_their_languages(
        self, renderer: HtmlContentRenderer
    ) -> None:
        html = renderer.markdown(
            "~~~python\nprint(1)\n~~~\n\n```rust\nfn main() {}\n```\n"
        )
        soup = BeautifulSoup(html, "html.parser")
        languages = [
            block.get("data-language") for block in soup.select("div.codehilite")
        ]
        assert languages == ["python", "rust"]

    def test_empty_body_renders_nothing(self, renderer: HtmlContentRenderer) -> None:
        assert renderer.markdown("  \n") == ""


class TestPageRenderer:
    """Whole pages: chrome, sidebar state, links, and fixed layouts."""

    def _render_doc(
        self, compose_site: cabc.Callable, config_path: Path, route: str
    ) -> tuple[BeautifulSoup, object]:
        site, content, navigation = compose_site(config_path)
        document = content.by_route()[route]
        rendered = PageRenderer().render(GenericDocumentPage(document), navigation, site)
        return BeautifulSoup(rendered.html, "html.parser"), rendered

    def test_document_page_marks_active_entry_and_neighbours(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {
                "intro.md": "---\ntitle: Intro\nsidebar_position: 1\n---\nHi\n",
                "basics/variables.md": "---\ntitle: Variables\n---\n## Mutability\n",
                "basics/ownership.md": "---\ntitle: Ownership\n---\nOwn\n",
            }
        )

        soup, rendered = self._render_doc(
            compose_site, config_path, "/docs/basics/variables"
        )

        assert rendered.output_path == "docs/basics/variables/index.html"
        assert soup.title.get_text() == "Variables | Test Notes"
        active = soup.select("a.menu__link--active")
        assert [link.get_text() for link in active] == ["Variables"]
        assert active[0]["href"] == "/notes/docs/basics/variables"
        category = soup.select_one("details.menu__details")
        assert category is not None and category.has_attr("open")
        assert soup.select_one(".pagination-nav__link--prev")["href"] == (
            "/notes/docs/basics/ownership"
        )
        assert soup.select_one(".pagination-nav__link--next") is None
        assert soup.select_one(".table-of-contents a")["href"] == "#mutability"

    def test_table_of_contents_can_be_hidden(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {"intro.md": "---\nhide_table_of_contents: true\n---\n## Section\n"}
        )

        soup, _rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        assert soup.select_one(".table-of-contents") is None
        assert soup.select_one("h2#section") is not None

    def test_relative_markdown_links_become_document_urls(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {
                "intro.md": "See [vars](basics/variables.md#shadowing) and "
                "[the book](https://doc.rust-lang.org/book/).\n",
                "basics/variables.md": "Back to [intro](../intro.md).\n",
            }
        )

        soup, rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        hrefs = [a["href"] for a in soup.select("article a")]
        assert "/notes/docs/basics/variables#shadowing" in hrefs
        assert "https://doc.rust-lang.org/book/" in hrefs
        assert rendered.broken == ()

    def test_percent_encoded_targets_resolve(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {
                "intro.md": "See [x](my%20notes.md) and ![card](img/rust%20card.svg)\n",
                "my notes.md": "---\ntitle: My Notes\n---\nHi\n",
                "img/rust card.svg": "<svg xmlns='http://www.w3.org/2000/svg'/>",
            }
        )

        soup, rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        assert rendered.broken == ()
        assert soup.select_one("article a")["href"] == "/notes/docs/my%20notes"
        assert soup.select_one("article img")["src"] == (
            "/notes/assets/docs/img/rust%20card.svg"
        )
        (asset,) = rendered.assets
        assert asset.output_path == "assets/docs/img/rust card.svg"

    def test_missing_link_targets_are_recorded(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {"intro.md": "[gone](./gone.md) and [absent](/docs/absent)\n"}
        )

        _soup, rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        assert [ref.describe() for ref in rendered.broken] == [
            "/docs/intro: missing target './gone.md'",
            "/docs/intro: missing target '/docs/absent'",
        ]

    def test_relative_images_are_scheduled_for_copying(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {
                "basics/ownership.md": "![moves](img/move.svg)\n",
                "basics/img/move.svg": "<svg xmlns='http://www.w3.org/2000/svg'/>",
                "intro.md": "![missing](img/nope.png)\n",
            }
        )

        soup, rendered = self._render_doc(
            compose_site, config_path, "/docs/basics/ownership"
        )
        assert soup.select_one("article img")["src"] == (
            "/notes/assets/docs/basics/img/move.svg"
        )
        (asset,) = rendered.assets
        assert asset.output_path == "assets/docs/basics/img/move.svg"
        assert asset.source.resolve() == (
            config_path.parent / "docs/basics/img/move.svg"
        ).resolve()

        _soup, intro = self._render_doc(compose_site, config_path, "/docs/intro")
        assert [(ref.kind, ref.target) for ref in intro.broken] == [
            ("asset", "img/nope.png")
        ]

    def test_announcement_bar_without_dismiss_control(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            config={
                "theme": {
                    "announcement_bar": {
                        "id": "bar-1",
                        "content": "Read the <a href='/notes/docs/intro'>intro</a>",
                        "background_color": "#7063f3",
                        "is_closeable": False,
                    }
                }
            }
        )

        soup, _rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        bar = soup.select_one("#announcement-bar")
        assert bar is not None
        assert bar["data-announcement-id"] == "bar-1"
        assert "#7063f3" in bar["style"]
        assert bar.select_one("a").get_text() == "intro"
        assert bar.select_one("button") is None
        assert "localStorage" not in str(bar)

    def test_closeable_announcement_bar_remembers_dismissal(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            config={"theme": {"announcement_bar": {"id": "bar-2", "content": "Hi"}}}
        )

        soup, _rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        bar = soup.select_one("#announcement-bar")
        assert bar.select_one("button.announcement-bar__close") is not None
        assert "localStorage" in bar.select_one("script").get_text()

    def test_footer_renders_groups_and_copyright(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        soup, _rendered = self._render_doc(
            compose_site, site_factory(), "/docs/intro"
        )

        footer = soup.select_one("footer.footer--dark")
        assert footer.select_one(".footer__title").get_text() == "More"
        assert footer.select_one(".footer__link")["target"] == "_blank"
        assert footer.select_one(".footer__copyright").get_text() == "© 2024 Tests"

    def test_footer_copyright_keeps_its_markup(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            config={"theme": {"footer": {"copyright": "© {year} Tests<br />Notes"}}}
        )

        soup, _rendered = self._render_doc(compose_site, config_path, "/docs/intro")

        copyright_line = soup.select_one(".footer__copyright")
        assert copyright_line.select_one("br") is not None
        assert copyright_line.get_text() == "© 2024 TestsNotes"
        assert "&lt;br" not in str(copyright_line)

    def test_homepage_hero_uses_configured_copy(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        site, _content, navigation = compose_site(site_factory())

        rendered = PageRenderer().render(home_page(site), navigation, site)

        soup = BeautifulSoup(rendered.html, "html.parser")
        assert rendered.output_path == "index.html"
        assert soup.select_one(".hero__title").get_text() == (
            "Quick refresher for busy engineers"
        )
        assert soup.select_one(".hero__ctas a")["href"] == "/notes/docs/intro"
        assert soup.select_one(".hero__secondary") is None
        assert soup.select_one('meta[name="description"]')["content"] == (
            "A living Rust Cheatsheet built from the Rust Book (2021)."
        )

    def test_not_found_page_writes_404_html(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        site, _content, navigation = compose_site(site_factory())

        rendered = PageRenderer().render(NOT_FOUND_PAGE, navigation, site)

        assert rendered.output_path == "404.html"
        assert "Page Not Found" in rendered.html

    def test_homepage_is_skipped_when_a_document_owns_the_root(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        config_path = site_factory(
            {"intro.md": "---\nslug: /\n---\nHi\n"},
            config={
                "docs": {"route_base_path": ""},
                "homepage": {"primary_cta": {"label": "Start", "to": "/"}},
                "theme": {"navbar": {"items": [{"label": "Start", "to": "/"}]}},
            },
        )
        site, _content, navigation = compose_site(config_path)

        pages = fixed_pages(site, navigation)

        assert pages == [NOT_FOUND_PAGE]

    def test_rendering_is_deterministic(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        site, content, navigation = compose_site(site_factory())
        page = GenericDocumentPage(content.documents[0])

        first = PageRenderer().render(page, navigation, site)
        second = PageRenderer().render(page, navigation, site)

        assert first == second
        assert first.html.encode("utf-8") == second.html.encode("utf-8")

    def test_unknown_page_types_are_rejected(
        self, site_factory: SiteFactory, compose_site: cabc.Callable
    ) -> None:
        site, _content, navigation = compose_site(site_factory())

        with pytest.raises(TypeError, match="unsupported page type"):
            PageRenderer().render("not a page", navigation, site)  # type: ignore[arg-type]

    def test_fixed_layout_pages_accept_custom_templates(
        self,
        site_factory: SiteFactory,
        compose_site: cabc.Callable,
        tmp_path: Path,
    ) -> None:
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "plain.jinja").write_text("<p>{{ html_title }}</p>\n")
        site, _content, navigation = compose_site(site_factory())
        page = FixedLayoutPage(route="/about", template="plain.jinja", title="About")

        rendered = PageRenderer(templates_dir=templates).render(page, navigation, site)

        assert rendered.html == "<p>About</p>\n"
        assert rendered.output_path == "about/index.html"
