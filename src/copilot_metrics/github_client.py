"""GitHub REST API client for Copilot metrics retrieval."""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests
import urllib3

from .config import DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT_SECONDS, ConfigStore
from .errors import (
    InvalidResponseError,
    NetworkError,
    NotConfiguredError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .models import Credential

logger = logging.getLogger(__name__)


class GitHubMetricsClient:
    """Fetches the organization Copilot metrics feed with the stored credential.

    The token never leaves this client: it is read from the ``ConfigStore`` on
    every call and only sent upstream in the ``Authorization`` header.

    ``timeout_seconds`` caps the whole exchange (connect, headers and body),
    not just each socket read.
    """

    _API_VERSION = "2022-11-28"
    _ACCEPT = "application/vnd.github.v3+json"
    _READ_CHUNK_BYTES = 64 * 1024

    def __init__(
        self,
        store: ConfigStore,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize a GitHub metrics client.

        Args:
            store: Config store holding the organization and bearer token.
            base_url: GitHub REST API base URL.
            timeout_seconds: Upper bound for the upstream request in seconds.
        """
        self._store = store
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": self._ACCEPT,
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )
        self._executor = ThreadPoolExecutor(thread_name_prefix="github-metrics")

    def _build_url(self, credential: Credential) -> str:
        """Build the metrics URL for the credential's organization."""
        return f"{self._base_url}/orgs/{quote(credential.org, safe='')}/copilot/metrics"

    def _auth_headers(self, credential: Credential) -> Dict[str, str]:
        return {"Authorization": f"Bearer {credential.token}"}

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read the streamed body, giving up once ``deadline`` has passed.

        ``read1`` returns as soon as any bytes arrive, so a server dripping the
        body slowly cannot hold the read past the deadline.
        """
        chunks: List[bytes] = []
        while True:
            if time.monotonic() >= deadline:
                raise requests.ReadTimeout("Deadline exceeded while reading GitHub API response.")
            chunk = response.raw.read1(self._READ_CHUNK_BYTES, decode_content=True)
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)

    def _exchange(
        self,
        url: str,
        headers: Dict[str, str],
        deadline: float,
    ) -> Tuple[int, Optional[str], bytes]:
        """Issue the request and read the full body before ``deadline``.

        Returns:
            ``(status_code, encoding, body)``.

        Raises:
            requests.Timeout: If the deadline or a socket timeout is hit.
            requests.RequestException: On any other transport failure.
        """
        response = self._session.get(
            url,
            headers=headers,
            stream=True,
            timeout=self._timeout_seconds,
        )
        try:
            body = self._read_body(response, deadline)
        except urllib3.exceptions.ReadTimeoutError as exc:
            raise requests.ReadTimeout(str(exc)) from exc
        except (urllib3.exceptions.HTTPError, OSError) as exc:
            raise requests.ConnectionError(str(exc)) from exc
        finally:
            response.close()

        return response.status_code, response.encoding, body

    @staticmethod
    def _decode_text(body: bytes, encoding: Optional[str]) -> str:
        try:
            return body.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    def fetch_metrics(self) -> Any:
        """Fetch the raw Copilot metrics feed for the configured organization.

        One request is issued per call; nothing is retried or cached. The call
        returns or raises within ``timeout_seconds`` even when GitHub stalls
        or sends its answer slowly.

        Returns:
            The decoded JSON payload, normally a list of daily records.

        Raises:
            NotConfiguredError: If no credential has been stored. No request is made.
            UpstreamTimeoutError: If GitHub does not answer within the timeout.
            UpstreamError: If GitHub answers with a non-2xx status.
            NetworkError: On any other transport failure.
            InvalidResponseError: If a 2xx response body is not valid JSON.
        """
        credential = self._store.current_credential()
        if credential is None:
            raise NotConfiguredError(
                "GitHub Token or Organization Name not set. Please configure the app first."
            )

        url = self._build_url(credential)
        deadline = time.monotonic() + self._timeout_seconds
        future = self._executor.submit(self._exchange, url, self._auth_headers(credential), deadline)

        try:
            status_code, encoding, body = future.result(timeout=max(0.0, deadline - time.monotonic()))
        except (FutureTimeoutError, requests.Timeout) as exc:
            # the worker stops reading at the deadline and closes the response
            future.cancel()
            logger.error(
                "GitHub API request timed out",
                extra={"url": url, "timeout_seconds": self._timeout_seconds},
            )
            raise UpstreamTimeoutError("Gateway Timeout: Request to GitHub API timed out.") from exc
        except requests.RequestException as exc:
            logger.error("GitHub API request failed: %s", exc, extra={"url": url})
            raise NetworkError("Bad Gateway: Could not reach GitHub API.") from exc

        if not 200 <= status_code < 300:
            text = self._decode_text(body, encoding)
            logger.error(
                "GitHub API error (%s): %s",
                status_code,
                text,
                extra={"url": url},
            )
            raise UpstreamError(status_code, text)

        try:
            payload = json.loads(body)
        except ValueError as exc:
            logger.error("GitHub API returned invalid JSON", extra={"url": url})
            raise InvalidResponseError("Bad Gateway: GitHub API returned invalid JSON.") from exc

        logger.debug(
            "Fetched Copilot metrics",
            extra={"org": credential.org, "days": len(payload) if isinstance(payload, list) else None},
        )
        return payload

    def close(self) -> None:
        """Stop the worker pool and close the underlying HTTP session."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._session.close()
