"""Cyclopts CLI entrypoint for building and previewing the knowledge site.

The ``knowledge-site`` console script builds the static site from
``site.yaml``, checks it without writing, or builds and serves it locally.
Options can also be supplied through ``KNOWLEDGE_SITE_*`` environment
variables, which keeps CI invocations short.

Examples
--------
Build the site described by ``site.yaml`` into its configured output folder:

>>> from knowledge_site.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from knowledge_site.cli import app
>>> app(["build", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .builder import SiteBuilder
from .config import load_site_config
from .errors import SiteBuildError
from .serve import serve as serve_directory

DEFAULT_CONFIG = Path("site.yaml")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = App(
    name="knowledge-site",
    config=cyclopts.config.Env("KNOWLEDGE_SITE_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT
    )


def _fail(exc: SiteBuildError | FileNotFoundError) -> typ.NoReturn:
    """Print every problem carried by ``exc`` to stderr and exit with status 1."""
    problems = (
        exc.problems() if isinstance(exc, SiteBuildError) else [f"error: {exc}"]
    )
    for problem in problems:
        print(problem, file=sys.stderr)
    raise SystemExit(1) from exc


def _build(config: Path, output_dir: Path | None) -> Path:
    """Build the site and print each written path; return the output folder."""
    try:
        site = load_site_config(config)
        builder = SiteBuilder(site, output_dir=output_dir)
        written = builder.run()
    except (SiteBuildError, FileNotFoundError) as exc:
        _fail(exc)
    for path in written:
        print(f"wrote {_format_path(path)}")
    return builder.output_dir


@app.command(help="Build the static site from Markdown notes.")
def build(
    *,
    config: typ.Annotated[Path, Parameter(help="Path to site config")] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to ``site.yaml`` (``KNOWLEDGE_SITE_CONFIG``).
    output_dir : Path or None, optional
        Output folder overriding ``output_dir`` from the configuration.
    verbose : bool, optional
        Log pipeline progress at DEBUG level.

    Raises
    ------
    SystemExit
        With status 1 when the configuration, content, or references are
        invalid; every problem is printed to stderr and nothing is written.
    """
    _configure_logging(verbose=verbose)
    _build(config, output_dir)


@app.command(help="Run the full pipeline without writing any output.")
def check(
    *,
    config: typ.Annotated[Path, Parameter(help="Path to site config")] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Load, compose, render, and verify links; report problems like ``build``."""
    _configure_logging(verbose=verbose)
    try:
        result = SiteBuilder(load_site_config(config)).render()
    except (SiteBuildError, FileNotFoundError) as exc:
        _fail(exc)
    print(f"ok: {len(result.pages)} pages, no broken references")


@app.command(help="Build the site and serve it for local preview.")
def serve(
    *,
    config: typ.Annotated[Path, Parameter(help="Path to site config")] = DEFAULT_CONFIG,
    host: typ.Annotated[str, Parameter(help="Interface to bind")] = "localhost",
    port: typ.Annotated[int, Parameter(help="Port to listen on")] = 3000,
    build_first: typ.Annotated[
        bool,
        Parameter(
            name="--build", negative="--no-build", help="Rebuild before serving"
        ),
    ] = True,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Serve the output folder under the configured base URL."""
    _configure_logging(verbose=verbose)
    if build_first:
        output_dir = _build(config, None)
        site = load_site_config(config)
    else:
        try:
            site = load_site_config(config)
        except (SiteBuildError, FileNotFoundError) as exc:
            _fail(exc)
        output_dir = site.output_dir
    serve_directory(output_dir, base_url=site.base_url, host=host, port=port)


def main() -> None:
    """Invoke the Cyclopts application behind the ``knowledge-site`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
