"""Tests for the local preview server."""

from __future__ import annotations

import threading
import urllib.error
import urllib.request
from pathlib import Path

import pytest

from knowledge_site.serve import make_server


@pytest.fixture
def server_url(tmp_path: Path):  # noqa: ANN201
    """Serve a tiny tree under ``/notes/`` on an ephemeral port."""
    (tmp_path / "docs" / "intro").mkdir(parents=True)
    (tmp_path / "index.html").write_text("home", encoding="utf-8")
    (tmp_path / "docs" / "intro" / "index.html").write_text("intro", encoding="utf-8")
    httpd = make_server(tmp_path, base_url="/notes/", host="127.0.0.1", port=0)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    host, port = httpd.server_address[:2]
    yield f"http://{host}:{port}"
    httpd.shutdown()
    httpd.server_close()
    thread.join(timeout=5)


def _fetch(url: str) -> tuple[int, str, str]:
    with urllib.request.urlopen(url, timeout=5) as response:  # noqa: S310
        return response.status, response.url, response.read().decode("utf-8")


def test_files_are_served_under_the_base_url(server_url: str) -> None:
    status, _url, body = _fetch(f"{server_url}/notes/docs/intro/")

    assert status == 200
    assert body == "intro"


def test_bare_origin_redirects_to_the_base_url(server_url: str) -> None:
    status, url, body = _fetch(f"{server_url}/")

    assert status == 200
    assert url.endswith("/notes/")
    assert body == "home"


def test_missing_files_return_404(server_url: str) -> None:
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        _fetch(f"{server_url}/notes/docs/nowhere/")

    assert excinfo.value.code == 404
