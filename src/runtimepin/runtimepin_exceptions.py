"""
This file contains the exceptions raised by runtimepin.
"""

from typing import Optional


class RuntimePinException(Exception):
    """
    Base exception for all runtimepin failures. Every subclass is fatal to the run.
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConfigurationError(RuntimePinException):
    """Raised when a configuration file or the artifact table is invalid."""

    pass


class UnsupportedArchitecture(RuntimePinException):
    """Raised when the host architecture has no artifact descriptor."""

    def __init__(self, architecture_key: str, supported: Optional[list] = None):
        self.architecture_key = architecture_key
        self.supported = sorted(supported or [])
        super().__init__(
            f"Unsupported architecture '{architecture_key}'. "
            f"Supported architectures: {', '.join(self.supported) or 'none'}"
        )


class DownloadFailed(RuntimePinException):
    """Raised when the artifact could not be retrieved."""

    pass


class IntegrityMismatch(RuntimePinException):
    """
    Raised when the digest of the downloaded artifact does not match the expected digest.
    The downloaded bytes are never handed to extraction after this is raised.
    """

    def __init__(self, file_name: str, expected_digest: str, actual_digest: str):
        self.file_name = file_name
        self.expected_digest = expected_digest
        self.actual_digest = actual_digest
        super().__init__(
            f"Integrity check failed for {file_name}: "
            f"expected sha256 {expected_digest}, got {actual_digest}"
        )


class ExtractionFailed(RuntimePinException):
    """Raised when the verified artifact could not be extracted or committed."""

    pass


class RelinkFailed(RuntimePinException):
    """Raised when launcher symlinks or the legacy installation could not be repaired."""

    pass


class PostInstallCheckFailed(RuntimePinException):
    """Raised when the installed runtime does not report the pinned version after installation."""

    pass


class InstallInterrupted(RuntimePinException):
    """Raised from a signal handler so that scoped resources are released."""

    pass


class WorkspaceUnavailable(RuntimePinException):
    """Raised when the per-run workspace directory could not be created."""

    pass
