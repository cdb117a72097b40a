"""
REST probe: one GET against the project's REST surface, reporting the status code.
"""
import httpx

REST_PREFIX = "/rest/v1"
DEFAULT_TIMEOUT = 10.0


def probe_url(url: str, path: str) -> str:
    return url.rstrip("/") + REST_PREFIX + path


def probe_endpoint(
    url: str,
    path: str,
    api_key: str = "",
    transport: httpx.BaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """
    GET <url>/rest/v1<path> and return the HTTP status, whatever it is.

    Args:
        url: Project base URL
        path: Endpoint path, e.g. "/todos"
        api_key: Public (anon) key sent as the apikey header when set

    Raises:
        httpx.HTTPError, httpx.InvalidURL: When no response was received
    """
    headers = {"apikey": api_key} if api_key else {}
    with httpx.Client(transport=transport, timeout=timeout) as http:
        response = http.get(probe_url(url, path), headers=headers)
    return response.status_code
