"""
Working Directory Scope
Switches the process working directory for the duration of a with-block
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from src.utils.logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """
    Enters path and restores the previous working directory on every exit,
    including exceptions raised inside the block.

    Args:
        path: Directory to switch into

    Yields:
        The directory that is now current
    """
    previous = os.getcwd()
    target = Path(path)
    os.chdir(target)
    logger.debug(f"Entered working directory: {target}")
    try:
        yield target
    finally:
        os.chdir(previous)
        logger.debug(f"Restored working directory: {previous}")
