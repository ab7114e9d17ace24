"""Build the complete static site in one sequential pass.

The builder loads content, composes navigation, renders every page in memory,
verifies every internal ``href``/``src`` against the routes and files the build
will produce, and only then writes. Output goes to a staging directory next to
the target that is swapped into place at the end, so a failed build never
leaves a partially written site behind.

Example
-------
>>> from pathlib import Path
>>> from knowledge_site.builder import SiteBuilder
>>> from knowledge_site.config import load_site_config
>>> builder = SiteBuilder(load_site_config(Path("site.yaml")))  # doctest: +SKIP
>>> builder.run()[0]  # doctest: +SKIP
PosixPath('build/docs/intro/index.html')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import tempfile
import typing as typ
from pathlib import Path

from .content import ContentLoader
from .errors import ReferenceCollector
from .generator import (
    SITE_CSS,
    SITEMAP,
    AssetCopy,
    GenericDocumentPage,
    LinkChecker,
    PageRenderer,
    RenderedPage,
)
from .homepage import fixed_pages
from .navigation import NavigationComposer

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .generator import Page
    from .navigation import NavigationModel

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class SiteRender:
    """Everything a build writes, held in memory until it has been verified."""

    navigation: NavigationModel
    pages: tuple[RenderedPage, ...]
    stylesheet: str
    sitemap: str
    static_files: tuple[str, ...]

    @property
    def assets(self) -> tuple[AssetCopy, ...]:
        """Return the document assets referenced by any page, first-seen order."""
        return tuple(
            dict.fromkeys(asset for page in self.pages for asset in page.assets)
        )


class SiteBuilder:
    """Render a :class:`SiteConfig` into a static site directory."""

    def __init__(
        self,
        site: SiteConfig,
        *,
        output_dir: Path | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        site : SiteConfig
            Loaded site configuration; its paths are already absolute.
        output_dir : Path, optional
            Override for ``site.output_dir``.
        templates_dir : Path, optional
            Directory of Jinja templates; defaults to the packaged templates.
        """
        self.site = site
        self.output_dir = output_dir or site.output_dir
        self.renderer = PageRenderer(templates_dir=templates_dir)

    def render(self) -> SiteRender:
        """Run the whole pipeline in memory.

        Raises
        ------
        ContentLoadError
            When content files are malformed.
        BrokenReferenceError
            Listing every navigation entry, body link, image, and chrome URL
            that does not resolve.
        """
        content = ContentLoader(
            self.site.docs.path, route_base=self.site.docs_route
        ).load()
        collector = ReferenceCollector()
        navigation = NavigationComposer(self.site).compose(
            content, collector=collector
        )
        pages: list[Page] = [GenericDocumentPage(doc) for doc in navigation.documents]
        pages.extend(fixed_pages(self.site, navigation))
        rendered = tuple(
            self.renderer.render(page, navigation, self.site) for page in pages
        )
        for page in rendered:
            collector.extend(page.broken)

        static_files = tuple(_list_files(self.site.static_dir))
        files = {
            *static_files,
            *(asset.output_path for page in rendered for asset in page.assets),
            *(page.output_path for page in rendered),
            SITE_CSS,
            SITEMAP,
        }
        checker = LinkChecker(
            self.site, navigation.routes, files, skip=navigation.hrefs()
        )
        for page in rendered:
            collector.extend(checker.check(page.route, page.html))
        collector.raise_if_any()

        logger.info("rendered %d pages", len(rendered))
        return SiteRender(
            navigation=navigation,
            pages=rendered,
            stylesheet=self.renderer.stylesheet(self.site),
            sitemap=self.renderer.sitemap(self.site, navigation.routes),
            static_files=static_files,
        )

    def run(self) -> list[Path]:
        """Render, verify, and write the site; return the written files.

        Nothing is written unless every check passes. The previous contents of
        the output directory are replaced only after the new tree is complete.
        """
        result = self.render()
        parent = self.output_dir.parent
        parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=".knowledge-site-", dir=parent))
        try:
            relative = self._write(result, staging)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        self._swap(staging)
        logger.info("wrote %d files to %s", len(relative), self.output_dir)
        return [self.output_dir / path for path in relative]

    def _write(self, result: SiteRender, root: Path) -> list[str]:
        written: list[str] = []
        for page in result.pages:
            _write_text(root / page.output_path, page.html)
            written.append(page.output_path)
        _write_text(root / SITE_CSS, result.stylesheet)
        written.append(SITE_CSS)
        _write_text(root / SITEMAP, result.sitemap)
        written.append(SITEMAP)
        for asset in result.assets:
            target = root / asset.output_path
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(asset.source, target)
            written.append(asset.output_path)
        for name in result.static_files:
            target = root / name
            if target.exists():
                logger.warning("static file '%s' shadows a generated file", name)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.site.static_dir / name, target)
            written.append(name)
        return written

    def _swap(self, staging: Path) -> None:
        """Move ``staging`` into place as the output directory."""
        backup: Path | None = None
        if self.output_dir.exists():
            backup = self.output_dir.with_name(f".{self.output_dir.name}.old")
            if backup.exists():
                shutil.rmtree(backup)
            self.output_dir.rename(backup)
        staging.rename(self.output_dir)
        if backup is not None:
            shutil.rmtree(backup)


def _list_files(directory: Path) -> list[str]:
    """Return POSIX paths of every file under ``directory``, sorted."""
    if not directory.is_dir():
        return []
    return sorted(
        path.relative_to(directory).as_posix()
        for path in directory.rglob("*")
        if path.is_file()
    )


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


__all__ = ["SiteBuilder", "SiteRender"]
