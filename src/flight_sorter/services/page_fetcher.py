# src/flight_sorter/services/page_fetcher.py

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

INITIAL_STATE_RE = re.compile(
    r"window\.__INITIAL_STATE__\s*=\s*(\{.*\})\s*;?\s*$", re.DOTALL)


class ProviderError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


def extract_documents(html: str, next_data_only: bool = False) -> List[Any]:
    """
    JSON documents embedded in a results page, in page order:
      - <script id="__NEXT_DATA__">
      - <script type="application/json"> (unless next_data_only)
      - window.__INITIAL_STATE__ = {...} assignments
    Scripts that are not valid JSON are skipped.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    documents: List[Any] = []

    if next_data_only:
        scripts = soup.select("script#__NEXT_DATA__")
    else:
        scripts = soup.select(
            'script#__NEXT_DATA__, script[type="application/json"]')
    for el in scripts:
        text = el.string or el.get_text() or ""
        if not text.strip():
            continue
        try:
            documents.append(json.loads(text))
        except ValueError:
            logger.debug("Skipping non-JSON script block")

    for el in soup.find_all("script"):
        text = el.string or ""
        m = INITIAL_STATE_RE.search(text.strip())
        if not m:
            continue
        try:
            documents.append(json.loads(m.group(1)))
        except ValueError:
            logger.debug("Skipping unparseable __INITIAL_STATE__")

    return documents


class PageFetcher:
    """
    Plain HTTP fetch of a provider results page.
    No browser: pages that only render client-side yield no documents.
    """

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout_seconds = timeout_seconds or float(
            os.getenv("FLIGHT_SORTER_HTTP_TIMEOUT", "60"))
        self.headers = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)

    def get_html(self, url: str) -> str:
        try:
            resp = requests.get(url, headers=self.headers,
                                timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise ProviderError(f"Request to {url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise ProviderError(
                f"Request to {url} failed: {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp.text

    def fetch_documents(self, url: str, next_data_only: bool = False) -> List[Any]:
        return extract_documents(self.get_html(url), next_data_only=next_data_only)
