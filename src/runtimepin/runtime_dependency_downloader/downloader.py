"""
Secure artifact downloader.

Downloads the artifact described by an ArtifactDescriptor into the workspace
and verifies its SHA-256 digest before returning the path. Nothing that fails
verification is ever returned.
"""

import hmac
import logging
import os
import pathlib
import time
from typing import Optional

import requests

from runtimepin.runtime_dependency_models import ArtifactDescriptor
from runtimepin.runtimepin_exceptions import DownloadFailed, IntegrityMismatch
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimepin_utils import CHUNK_SIZE, FileUtils

RETRYABLE_STATUS = 429


class _RetryableError(Exception):
    pass


class SecureFetcher:
    """
    Downloads artifacts over HTTPS and verifies them against their expected digest.
    """

    def __init__(
        self,
        logger: RuntimePinLogger,
        dist_host: str = "nodejs.org",
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
        max_attempts: int = 1,
        backoff_seconds: float = 1.0,
        max_backoff_seconds: float = 30.0,
    ):
        """
        Initialize the fetcher.

        Args:
            logger: Logger for progress and error messages
            dist_host: Host serving the /dist/v<version>/ tree
            session: HTTP session to use, a new one per fetch if None
            timeout: Connect/read timeout in seconds for each request
            max_attempts: Total attempts for transient failures (1 means no retry)
            backoff_seconds: Delay before the second attempt, doubled for each further attempt
            max_backoff_seconds: Upper bound for a single delay
        """
        self.logger = logger
        self.dist_host = dist_host
        self.session = session
        self.timeout = timeout
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_seconds = backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds

    def url_for(self, descriptor: ArtifactDescriptor) -> str:
        return f"https://{self.dist_host}/dist/v{descriptor.pinned_version}/{descriptor.file_name}"

    def fetch(
        self,
        descriptor: ArtifactDescriptor,
        workspace: pathlib.Path,
        trust_anchor: Optional[pathlib.Path] = None,
    ) -> pathlib.Path:
        """
        Download the artifact into the workspace and verify it.

        Args:
            descriptor: The artifact to download
            workspace: Directory that receives the download
            trust_anchor: CA bundle that replaces the system trust store for this request

        Returns:
            Path of the verified artifact

        Raises:
            DownloadFailed: If the artifact could not be retrieved
            IntegrityMismatch: If the downloaded bytes do not match the expected digest
        """
        verify = self._verify_argument(trust_anchor)
        url = self.url_for(descriptor)
        target_path = workspace / descriptor.file_name

        actual_digest = self._download_with_retry(url, target_path, verify)

        if not hmac.compare_digest(actual_digest, descriptor.expected_digest.lower()):
            target_path.unlink(missing_ok=True)
            self.logger.log(
                f"Integrity check failed for {descriptor.file_name}, download discarded",
                logging.ERROR,
            )
            raise IntegrityMismatch(descriptor.file_name, descriptor.expected_digest, actual_digest)

        self.logger.log(f"Verified {descriptor.file_name} (sha256 {actual_digest})", logging.INFO)
        return target_path

    def _verify_argument(self, trust_anchor: Optional[pathlib.Path]):
        if trust_anchor is None:
            return True
        if not trust_anchor.is_file() or not os.access(trust_anchor, os.R_OK):
            raise DownloadFailed(f"Trust anchor {trust_anchor} is not a readable file")
        return str(trust_anchor)

    def _download_with_retry(self, url: str, target_path: pathlib.Path, verify) -> str:
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._download_once(url, target_path, verify)
            except _RetryableError as e:
                last_error = e
            except requests.RequestException as e:
                last_error = e
            except OSError as e:
                raise DownloadFailed(f"Failed to download {url} to {target_path}: {e}") from e

            if attempt >= self.max_attempts:
                break
            delay = min(self.max_backoff_seconds, self.backoff_seconds * (2 ** (attempt - 1)))
            self.logger.log(
                f"Download of {url} failed (attempt {attempt}/{self.max_attempts}): {last_error}. "
                f"Retrying in {delay:.2f}s",
                logging.WARNING,
            )
            time.sleep(delay)

        raise DownloadFailed(f"Failed to download {url}: {last_error}") from last_error

    def _download_once(self, url: str, target_path: pathlib.Path, verify) -> str:
        self.logger.log(f"Downloading {url}", logging.INFO)
        session = self.session or requests.Session()
        try:
            with session.get(url, stream=True, timeout=self.timeout, verify=verify) as response:
                status = int(response.status_code)
                if status == RETRYABLE_STATUS or status >= 500:
                    raise _RetryableError(f"HTTP {status} for {url}")
                if status >= 400:
                    raise DownloadFailed(f"HTTP {status} for {url}")
                return FileUtils.write_chunks(target_path, response.iter_content(chunk_size=CHUNK_SIZE))
        finally:
            if self.session is None:
                session.close()
