"""
iNaturalist API client.

Low-level HTTP client for the iNaturalist API v1: request building, rate
limiting and ``id_above`` pagination.  All transport and HTTP-status failures
are raised as ``RemoteQueryFailure``.

API docs: https://api.inaturalist.org/v1/docs/
Rate limits: ~1 req/sec, 10k/day
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from carcass_watch.errors import RemoteQueryFailure
from carcass_watch.services.http import session

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
API_BASE = "https://api.inaturalist.org/v1"
OBSERVATION_URL = "https://www.inaturalist.org/observations"
MAX_PER_PAGE = 200  # API maximum for /observations
MAX_RESULTS = 10_000  # API hard ceiling per query

# ---------------------------------------------------------------------------
# Rate limiting (module-level state)
# ---------------------------------------------------------------------------
_last_request_time: float = 0.0
MIN_REQUEST_INTERVAL: float = 1.1  # seconds, stays under 1 req/s


def _rate_limit() -> None:
    """Sleep if needed to honour the ~1 req/s rate limit."""
    global _last_request_time  # noqa: PLW0603
    now = time.monotonic()
    elapsed = now - _last_request_time
    if elapsed < MIN_REQUEST_INTERVAL:
        time.sleep(MIN_REQUEST_INTERVAL - elapsed)
    _last_request_time = time.monotonic()


def _get(endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """Make a rate-limited GET request to the iNaturalist API v1."""
    _rate_limit()
    url = f"{API_BASE}/{endpoint}"
    try:
        resp = session.get(url, params=params or {})
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
    except requests.RequestException as exc:
        msg = f"iNaturalist query to {url} failed: {exc}"
        raise RemoteQueryFailure(msg) from exc
    except ValueError as exc:
        msg = f"iNaturalist returned a non-JSON response from {url}"
        raise RemoteQueryFailure(msg) from exc
    return data


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def get_observations(params: dict[str, Any]) -> dict[str, Any]:
    """GET /observations: search observations."""
    return _get("observations", params)


def get_observations_paginated(
    params: dict[str, Any],
    *,
    max_results: int = MAX_RESULTS,
) -> list[dict[str, Any]]:
    """
    Fetch up to ``max_results`` observations, paging via ``id_above``.

    Uses the recommended ``id_above`` + ``order_by=id`` + ``order=asc``
    strategy so result order is stable between runs.

    Returns a flat list of observation dicts (``results`` concatenated).
    """
    max_results = min(max_results, MAX_RESULTS)
    page_params = {
        **params,
        "order_by": "id",
        "order": "asc",
        "per_page": min(MAX_PER_PAGE, max_results),
    }
    all_results: list[dict[str, Any]] = []
    while len(all_results) < max_results:
        data = get_observations(page_params)
        results: list[dict[str, Any]] = data.get("results", [])
        if not results:
            break
        all_results.extend(results)
        logger.debug("Fetched %d observations (total %d)", len(results), len(all_results))
        if len(results) < page_params["per_page"]:
            break
        page_params["id_above"] = results[-1]["id"]
    return all_results[:max_results]
