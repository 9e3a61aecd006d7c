"""Shared HTTP client with automatic retry and exponential backoff."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session with retry on 502/503/504 errors.

    Retries up to 2 times with exponential backoff (0.5s, 1s). Connection
    errors are not retried so an unreachable service is detected quickly.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        retry = Retry(
            total=2,
            connect=0,
            backoff_factor=0.5,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET", "PUT", "DELETE"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
        _session.headers.update({"Content-Type": "application/json"})
    return _session

