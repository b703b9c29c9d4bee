"""Tests for the product page loader."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from src.common.config import LoaderSettings
from src.price_engine.models import FailureReason
from src.price_engine.page_loader import PageLoader

PAGE = b"<html><head><title>Mouse</title></head><body><p>$5.00</p></body></html>"


def _response(status_code: int = 200, content: bytes = PAGE) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.text = content.decode()
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=resp
        )
    return resp


@pytest.fixture
def loader(tmp_path):
    config = LoaderSettings(
        rate_limit_rpm=100000,
        max_retries=2,
        random_user_agent=False,
        raw_html_cache_dir=str(tmp_path),
    )
    with PageLoader(config) as page_loader:
        page_loader._session = MagicMock()
        yield page_loader


class TestLoad:
    def test_success(self, loader):
        loader._session.get.return_value = _response()

        page = loader.load("https://shop.example.com/p/1")

        assert page.ok
        assert page.status_code == 200
        assert page.tree.select_one("title").get_text() == "Mouse"
        headers = loader._session.get.call_args.kwargs["headers"]
        assert headers["User-Agent"] == loader.config.user_agent

    def test_client_error_not_retried(self, loader):
        loader._session.get.return_value = _response(404)

        page = loader.load("https://shop.example.com/missing")

        assert not page.ok
        assert page.error is FailureReason.INVALID_RESPONSE
        assert page.status_code == 404
        assert loader._session.get.call_count == 1

    @patch("src.price_engine.page_loader.time.sleep")
    def test_server_error_retried(self, mock_sleep, loader):
        loader._session.get.side_effect = [_response(503), _response()]

        page = loader.load("https://shop.example.com/p/1")

        assert page.ok
        assert loader._session.get.call_count == 2
        mock_sleep.assert_any_call(1.0)

    @patch("src.price_engine.page_loader.time.sleep")
    def test_too_many_requests_retried(self, mock_sleep, loader):
        loader._session.get.return_value = _response(429)

        page = loader.load("https://shop.example.com/p/1")

        assert page.error is FailureReason.INVALID_RESPONSE
        assert page.status_code == 429
        assert loader._session.get.call_count == 2

    @patch("src.price_engine.page_loader.time.sleep")
    def test_no_response(self, mock_sleep, loader):
        loader._session.get.side_effect = requests.ConnectionError("connection refused")

        page = loader.load("https://shop.example.com/p/1")

        assert page.error is FailureReason.NO_RESPONSE
        assert page.status_code is None
        assert page.tree is None

    def test_empty_body(self, loader):
        loader._session.get.return_value = _response(content=b"  ")
        assert loader.load("https://shop.example.com/p/1").error is FailureReason.INVALID_RESPONSE

    def test_caches_raw_html(self, loader, tmp_path):
        loader.config.cache_raw_html = True
        loader._session.get.return_value = _response()

        loader.load("https://shop.example.com/p/1")

        cached = list(tmp_path.glob("shop_example_com_*.html"))
        assert len(cached) == 1
        assert cached[0].read_text(encoding="utf-8") == PAGE.decode()


class TestLoadHtml:
    def test_parses_markup(self, loader):
        page = loader.load_html("<html><body><p>hi</p></body></html>", url="file:///p.html")
        assert page.ok
        assert page.url == "file:///p.html"

    @pytest.mark.parametrize(
        ("html", "status"),
        [("<html></html>", 500), ("<html></html>", 302), ("", 200), ("\n\t", 200)],
    )
    def test_invalid_response(self, loader, html, status):
        page = loader.load_html(html, status_code=status)
        assert page.error is FailureReason.INVALID_RESPONSE
        assert not page.ok
