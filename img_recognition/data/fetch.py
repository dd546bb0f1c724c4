"""Image download over HTTP."""

from __future__ import annotations

import logging

import requests

from img_recognition.errors import NetworkError

logger = logging.getLogger(__name__)


def fetch_image(url: str, timeout: float | None = None) -> bytes:
    """Download the response body for ``url``.

    Error status codes are not rejected: whatever body the server sends is
    returned and left for the decoder to accept or refuse.
    """
    try:
        with requests.get(url, timeout=timeout) as response:
            if not response.ok:
                logger.warning("GET %s returned status %s", url, response.status_code)
            content = response.content
    except requests.RequestException as error:
        raise NetworkError(f"Unable to get an image: {error}") from error
    logger.debug("Fetched %d bytes from %s", len(content), url)
    return content
