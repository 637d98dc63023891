"""
Caller location capture for guard errors.
"""

import inspect
from dataclasses import dataclass


@dataclass(frozen=True)
class CallerInfo:
    """
    Where a guard was invoked from.

    Attributes:
        member_name (str): Name of the calling function
        source_file_path (str): File containing the call
        source_line_number (int): Line of the call
    """

    member_name: str = ""
    source_file_path: str = ""
    source_line_number: int = 0


def capture_caller(depth: int = 1) -> CallerInfo:
    """
    Describe the frame ``depth`` levels above the function calling this one.

    ``depth=1`` is the caller of the function that calls capture_caller. An
    empty CallerInfo is returned when the stack is not that deep.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return CallerInfo()
        return CallerInfo(
            member_name=frame.f_code.co_name,
            source_file_path=frame.f_code.co_filename,
            source_line_number=frame.f_lineno,
        )
    finally:
        # Break the reference cycle between this frame and the captured one.
        del frame
