"""
Shared HTTP client.

Provides a pre-configured ``requests.Session`` with a project User-Agent and
a default timeout.  Failed requests are not retried: a network or service
failure surfaces immediately and aborts the run.

Usage::

    from carcass_watch.services.http import session

    resp = session.get("https://api.example.com/v1/data")
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: No retries, and HTTP error statuses are left to ``resp.raise_for_status()``.
NO_RETRY = Retry(total=0, raise_on_status=False)

DEFAULT_TIMEOUT = 60  # seconds

USER_AGENT = "carcass-watch/0.1 (biodiversity carcass-report mapping)"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Inject a default timeout so callers don't need to pass ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session, import and use directly.
session: requests.Session = create_session()
