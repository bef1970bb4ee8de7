import sys
import traceback
from typing import Any


class CustomException(Exception):
    def __init__(self, error_message: Exception | str, error_detail: Any):
        super().__init__(str(error_message))
        self.error_message = error_message
        _, _, exc_tb = error_detail.exc_info()

        if exc_tb is not None:
            self.lineno = exc_tb.tb_lineno
            self.file_name = exc_tb.tb_frame.f_code.co_filename
        else:
            tb = traceback.extract_tb(sys.exc_info()[2])
            if tb:
                self.lineno = tb[-1].lineno
                self.file_name = tb[-1].filename
            else:
                frame = sys._getframe(1)
                self.lineno = frame.f_lineno
                self.file_name = frame.f_code.co_filename

    def __str__(self) -> str:
        return (
            f"Error occurred in python script name [{self.file_name}] "
            f"line number [{self.lineno}] error message [{self.error_message}]"
        )

    def __repr__(self) -> str:
        return self.__class__.__name__


class ToolMissingError(CustomException):
    """A required external command is not on PATH."""


class ServiceUnavailableError(CustomException):
    """The local inference service did not answer the liveness probe."""


class ServiceError(CustomException):
    """The inference service answered a generation request with an error."""


class StagedContentError(CustomException):
    """The staged blob for a path could not be read as text."""


class HookInstallError(CustomException):
    """The pre-commit hook could not be written."""
