"""Product page loader.

Fetches a product page and hands back a :class:`DocumentTree`, or the
reason why there is none. Transport problems never escape as exceptions:
they become ``NO_RESPONSE`` (nothing came back) or ``INVALID_RESPONSE``
(a non-2xx status or an unusable body).
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

import requests
from fake_useragent import UserAgent

from ..common.config import LoaderSettings, settings
from .document import DocumentTree
from .models import FailureReason
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@dataclass
class PageLoadResult:
    """Outcome of loading one product page."""

    url: str
    tree: DocumentTree | None = None
    status_code: int | None = None
    error: FailureReason | None = None

    @property
    def ok(self) -> bool:
        return self.tree is not None and self.error is None


class PageLoader:
    """HTTP page loader with rate limiting, retries and User-Agent rotation.

    Usage:
        with PageLoader() as loader:
            page = loader.load("https://shop.example.com/product/1")
            if page.ok:
                result = extract_auto(page.tree)
    """

    def __init__(self, config: LoaderSettings | None = None) -> None:
        self.config = config or settings.loader
        self._rate_limiter = RateLimiter(self.config.rate_limit_rpm)
        self._session = requests.Session()
        self._ua = UserAgent(fallback=self.config.user_agent)

        if self.config.cache_raw_html:
            Path(self.config.raw_html_cache_dir).mkdir(parents=True, exist_ok=True)

    def load(self, url: str) -> PageLoadResult:
        """Fetch ``url`` and parse it.

        4xx responses (other than 429) are not retried, everything else is
        retried with exponential backoff.
        """
        headers = {
            "User-Agent": self._ua.random if self.config.random_user_agent else self.config.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        host = urlparse(url).netloc

        last_response: requests.Response | None = None
        for attempt in range(self.config.max_retries):
            self._rate_limiter.wait(host)
            try:
                resp = self._session.get(
                    url, headers=headers, timeout=self.config.request_timeout
                )
                resp.raise_for_status()
                return self._parse_response(url, resp)

            except requests.RequestException as exc:
                response = getattr(exc, "response", None)
                if response is not None:
                    last_response = response

                if (
                    response is not None
                    and 400 <= response.status_code < 500
                    and response.status_code != 429
                ):
                    logger.warning("Request failed (4xx, no retry): %s", exc)
                    break

                wait_time = self.config.backoff_base ** attempt
                logger.warning(
                    "Request failed (attempt %d/%d): %s, retrying in %.1fs",
                    attempt + 1,
                    self.config.max_retries,
                    exc,
                    wait_time,
                )
                if attempt + 1 < self.config.max_retries:
                    time.sleep(wait_time)

        if last_response is None:
            return PageLoadResult(url=url, error=FailureReason.NO_RESPONSE)
        return PageLoadResult(
            url=url,
            status_code=last_response.status_code,
            error=FailureReason.INVALID_RESPONSE,
        )

    def load_html(
        self, html: str | bytes, status_code: int = 200, url: str = ""
    ) -> PageLoadResult:
        """Build a load result from markup already in hand."""
        if not 200 <= status_code <= 299 or not html or not html.strip():
            return PageLoadResult(
                url=url, status_code=status_code, error=FailureReason.INVALID_RESPONSE
            )
        return PageLoadResult(url=url, tree=DocumentTree(html), status_code=status_code)

    def _parse_response(self, url: str, resp: requests.Response) -> PageLoadResult:
        if self.config.cache_raw_html:
            self._cache_response(url, resp.text)
        # Pass bytes so the parser can honour <meta charset>
        return self.load_html(resp.content, status_code=resp.status_code, url=url)

    def _cache_response(self, url: str, html: str) -> Path:
        """Save raw HTML to the cache directory for debugging heuristics.

        File naming: {host}_{date}_{hash}.html
        """
        date_str = datetime.now().strftime("%Y%m%d")
        content_hash = hashlib.md5(html.encode()).hexdigest()[:8]
        host = urlparse(url).netloc or "page"
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in host)
        path = Path(self.config.raw_html_cache_dir) / f"{safe_key}_{date_str}_{content_hash}.html"
        path.write_text(html, encoding="utf-8")
        logger.debug("Cached HTML: %s", path)
        return path

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> PageLoader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
