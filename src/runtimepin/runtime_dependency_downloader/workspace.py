"""
Scoped ephemeral directory for a single run.
"""

import logging
import pathlib
import shutil
import tempfile
from typing import Optional

from runtimepin.runtimepin_exceptions import WorkspaceUnavailable
from runtimepin.runtimepin_logger import RuntimePinLogger


class Workspace:
    """
    A uniquely named temporary directory that is removed exactly once, whatever the outcome of the run.

    Use as a context manager:

        with Workspace(parent, logger) as workspace_path:
            ...
    """

    PREFIX = "runtimepin-"

    def __init__(self, parent: pathlib.Path, logger: RuntimePinLogger):
        self.parent = parent
        self.logger = logger
        self.path: Optional[pathlib.Path] = None
        self._released = False

    def acquire(self) -> pathlib.Path:
        if self.path is not None:
            raise RuntimeError("Workspace already acquired")
        try:
            self.parent.mkdir(parents=True, exist_ok=True)
            self.path = pathlib.Path(tempfile.mkdtemp(prefix=self.PREFIX, dir=self.parent))
        except OSError as e:
            raise WorkspaceUnavailable(f"Could not create a workspace in {self.parent}: {e}") from e
        self.logger.log(f"Acquired workspace {self.path}", logging.DEBUG)
        return self.path

    def release(self) -> None:
        if self.path is None or self._released:
            return
        self._released = True
        shutil.rmtree(self.path, ignore_errors=True)
        if self.path.exists():
            self.logger.log(f"Workspace {self.path} could not be fully removed", logging.WARNING)
        else:
            self.logger.log(f"Released workspace {self.path}", logging.DEBUG)

    def __enter__(self) -> pathlib.Path:
        return self.acquire()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()
