"""Findr HTTP utilities.

Example:
    >>> from findr.http import HttpClient
    >>>
    >>> async with HttpClient("https://example.com") as client:
    ...     photo = await client.get_bytes("/photo.jpg")
"""

from findr.http.client import HttpClient, HttpClientError, HttpStatusError

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpStatusError",
]
