"""HTTP transport built on a requests session.

Every error is converted to a :mod:`cloudfiles_storage.exceptions` type here,
so callers never see a ``requests`` exception.
"""

import logging
from typing import Any, Dict, Optional, Union

import requests

from .exceptions import NotFoundError, TransportError

logger = logging.getLogger(__name__)

Body = Union[bytes, str, None]


class HttpTransport:
    """
    Issue single, synchronous HTTP requests.

    Parameters
    ----------
    timeout : float, optional
        Request timeout in seconds. Default is 30.
    session : requests.Session, optional
        Session to send requests through. A new one is created if omitted;
        tests pass a session with an in-memory adapter mounted.
    """

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Body = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Send one request and return the response if its status is below 400.

        Raises
        ------
        NotFoundError
            If the server answers 404.
        TransportError
            For any other error status or when the request cannot be sent.
        """
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=headers or None,
                data=body if body else None,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {url}: 404 Not Found")

        if response.status_code >= 400:
            raise TransportError(
                f"{method} {url}: {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )

        return response

    def close(self):
        self.session.close()
