"""
tracker.py - data loading and the in-memory expense snapshot

Responsibilities:
 - fetch the primary and secondary ("cc") pages from the data endpoint
 - degrade gracefully: a failing secondary page contributes nothing, a failing
   primary page switches to the local fallback JSON, a failing fallback yields
   an empty snapshot
 - keep the fetched records for the session and expose the view helpers
   consumed by the UI (compute, categories, breakdown)
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from src.config import Settings
from src.errors import DataSourceError
from src.logging_setup import get_logger
from src.models import ExpenseRecord
from src import normalizer
from src import view

logger = get_logger(__name__)

SECONDARY_PARAMS = {"type": "cc"}

ORIGIN_REMOTE = "remote"
ORIGIN_FALLBACK = "fallback"
ORIGIN_EMPTY = "empty"


@dataclass(frozen=True)
class FetchResult:
    records: Tuple[ExpenseRecord, ...]
    origin: str


class ExpenseSource:
    """
    Reads raw pages from the data endpoint and the local fallback file.

    Authorization uses the static bearer placeholder from Settings; there is
    no per-user token.
    """

    def __init__(self, settings: Settings, http=None):
        self.settings = settings
        self._http = http if http is not None else requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.api_token}"}

    def fetch_page(self, params: Optional[Dict[str, str]] = None) -> Any:
        """GET one raw page. Transport, HTTP and JSON errors raise DataSourceError."""
        try:
            response = self._http.get(
                self.settings.data_url,
                params=params,
                headers=self.headers,
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise DataSourceError(f"fetching {self.settings.data_url} params={params!r} failed: {exc}") from exc

    def fetch_records(self, params: Optional[Dict[str, str]] = None) -> List[ExpenseRecord]:
        return normalizer.normalize(self.fetch_page(params))

    def _fetch_secondary(self) -> List[ExpenseRecord]:
        try:
            return self.fetch_records(SECONDARY_PARAMS)
        except DataSourceError as exc:
            logger.warning("Secondary source unavailable, using empty page: %s", exc)
            return []

    def load_fallback(self) -> List[ExpenseRecord]:
        """Normalize the local fallback payload. Raises DataSourceError."""
        path = os.path.abspath(self.settings.fallback_file)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            raise DataSourceError(f"reading fallback {path} failed: {exc}") from exc
        return normalizer.normalize(raw)

    def fetch_all(self) -> FetchResult:
        """
        Fetch both remote pages concurrently and concatenate them.

        Never raises: see the module docstring for the degradation order.
        """
        try:
            with ThreadPoolExecutor(max_workers=2) as pool:
                primary = pool.submit(self.fetch_records)
                secondary = pool.submit(self._fetch_secondary)
                # wait for both before touching either result
                secondary_records = secondary.result()
                primary_records = primary.result()
            records = normalizer.combine([primary_records, secondary_records])
            logger.info(
                "Loaded %d expenses from remote (primary=%d, secondary=%d)",
                len(records), len(primary_records), len(secondary_records),
            )
            return FetchResult(tuple(records), ORIGIN_REMOTE)
        except DataSourceError as exc:
            logger.warning("Remote fetch failed, trying local fallback: %s", exc)

        try:
            records = self.load_fallback()
            logger.info("Loaded %d expenses from local fallback", len(records))
            return FetchResult(tuple(records), ORIGIN_FALLBACK)
        except DataSourceError:
            logger.exception("Local fallback failed, showing no data")
            return FetchResult((), ORIGIN_EMPTY)


class ExpenseTracker:
    """
    Session-scoped holder of the fetched records. The UI keeps one instance
    per browser session and reads everything through it.
    """

    def __init__(self, source: ExpenseSource):
        self.source = source
        self.original_data: Tuple[ExpenseRecord, ...] = ()
        self.origin: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.origin is not None

    def ensure_loaded(self) -> Tuple[ExpenseRecord, ...]:
        """Fetch once; later calls return the cached snapshot."""
        if not self.loaded:
            self.reload()
        return self.original_data

    def reload(self) -> Tuple[ExpenseRecord, ...]:
        result = self.source.fetch_all()
        self.original_data = result.records
        self.origin = result.origin
        return self.original_data

    def compute(self, state: view.ViewState) -> List[ExpenseRecord]:
        return view.compute_view(self.original_data, state)

    def categories(self) -> List[str]:
        return view.distinct_categories(self.original_data)

    def breakdown(self) -> Dict[str, view.CategoryTotal]:
        """Per-category totals over the whole snapshot, not the filtered view."""
        return view.aggregate_by_category(self.original_data)
