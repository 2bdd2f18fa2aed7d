import time
from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STRATEGY = Retry(
    total=5,  # Total number of retries
    backoff_factor=2,  # The backoff factor (2 seconds, then 4, 8...)
    status_forcelist=[429, 500, 502, 503, 504],  # HTTP status codes to retry on
)


def new_session() -> requests.Session:
    """Create a new requests session with retry strategy"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=DEFAULT_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update(
        {"User-Agent": "carsales-story/1.0", "Accept": "text/csv, text/plain, */*"}
    )

    return session


def get_text(
    session: requests.Session,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 30,
) -> str:
    """Fetch a text body (e.g. a CSV file) from a URL.

    Retries are handled by the session's adapter; anything still failing
    after that is raised to the caller.

    Args:
        session: HTTP session to use
        url: URL to fetch
        headers: Optional extra headers
        timeout: Request timeout in seconds

    Returns:
        Decoded response body

    Raises:
        requests.RequestException: On HTTP errors
    """
    start = time.time()
    try:
        response = session.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise requests.RequestException(
            f"HTTP request failed for {url}: {str(e)}"
        ) from e

    logger.info(f"Fetched from {url}: {time.time() - start:.2f} seconds")
    return response.text
