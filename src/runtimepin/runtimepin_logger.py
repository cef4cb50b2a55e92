"""
Logger for runtimepin. Every log line is emitted as a JSON document.
"""

import inspect
import logging
from typing import Optional

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the runtimepin log
    """

    caller_file: str
    caller_name: str
    caller_line: int
    level: str
    message: str


class RuntimePinLogger:
    """
    Logger class
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("runtimepin")

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the debug message with the caller's location attached
        """
        debug_message = debug_message.replace("'", '"').replace("\n", " ")

        caller_frame = inspect.currentframe().f_back
        caller_file = caller_frame.f_code.co_filename
        caller_name = caller_frame.f_code.co_name
        caller_line = caller_frame.f_lineno
        del caller_frame

        self.logger.log(
            level=level,
            msg=LogLine(
                caller_file=caller_file,
                caller_name=caller_name,
                caller_line=caller_line,
                level=logging.getLevelName(level),
                message=debug_message,
            ).model_dump_json(),
        )
