"""
SURVEY DATA SOURCES
Reads raw survey text from local files or HTTP(S) URLs
No retries: a failed read surfaces as SourceUnavailable
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Optional, Union
import logging

import requests

from geosite_core.config.settings import (
    HTTP_TIMEOUT_SECONDS, SOURCE_ENCODING, SOURCE_FETCH_WORKERS
)
from geosite_core.exceptions import SourceUnavailable

logger = logging.getLogger(__name__)

SourceLocator = Union[str, Path]


def is_remote(locator: SourceLocator) -> bool:
    return isinstance(locator, str) and locator.lower().startswith(('http://', 'https://'))


class SurveyDataSource:
    """
    Reads one survey source as text

    Local paths are read from disk; http(s) URLs are fetched with requests.
    Any I/O error or non-success HTTP status raises SourceUnavailable.
    """

    def __init__(self,
                 timeout=HTTP_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None,
                 encoding: str = SOURCE_ENCODING):
        self.timeout = timeout
        self.session = session
        self.encoding = encoding

    def read(self, locator: SourceLocator) -> str:
        if is_remote(locator):
            return self._fetch(str(locator))
        return self._read_file(Path(locator))

    def _read_file(self, path: Path) -> str:
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(str(path), f"Failed to read {path}: {e}", original_error=e)
        logger.info(f"Read {len(text)} characters from {path}")
        return text

    def _fetch(self, url: str) -> str:
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SourceUnavailable(url, f"Failed to fetch {url}: {e}", original_error=e)

        if not response.ok:
            raise SourceUnavailable(
                url,
                f"Failed to fetch {url}: HTTP {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        if self.encoding:
            response.encoding = self.encoding
        text = response.text
        logger.info(f"Fetched {len(text)} characters from {url}")
        return text


def read_sources(locators: Dict[str, SourceLocator],
                 source: Optional[SurveyDataSource] = None,
                 max_workers: int = SOURCE_FETCH_WORKERS) -> Dict[str, str]:
    """
    Read several sources concurrently and return {name: text}

    Every source must succeed; the first failure cancels reads that have not
    started yet and is re-raised.
    """
    source = source or SurveyDataSource()
    results: Dict[str, str] = {}

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(locators) or 1))) as ex:
        futs = {ex.submit(source.read, locator): name for name, locator in locators.items()}
        for fut in as_completed(futs):
            name = futs[fut]
            try:
                results[name] = fut.result()
            except SourceUnavailable:
                for pending in futs:
                    pending.cancel()
                logger.error(f"Source '{name}' unavailable, aborting load")
                raise

    return {name: results[name] for name in locators}
