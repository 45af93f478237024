"""
Progress and notice reporting.

The merge code talks to a Reporter instead of the console, so it can run
silently in tests or under another front end.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import ContextManager, Optional, TextIO

from tqdm import tqdm

from .constants import PROGRESS_BAR_FILL, PROGRESS_BAR_WIDTH

logger = logging.getLogger(__name__)


class Progress(ABC):
    """Handle for one running progress indicator."""

    @abstractmethod
    def update(self, n: int = 1) -> None:
        pass

    def __enter__(self) -> 'Progress':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        pass


class Reporter(ABC):
    """Receives progress ticks and user-facing notices from the merger."""

    @abstractmethod
    def track(self, title: str, total: int) -> ContextManager:
        """
        Start a progress indicator.

        Args:
            title: Text shown before the bar
            total: Number of steps expected

        Returns:
            Context manager yielding an object with update(n=1)
        """
        pass

    @abstractmethod
    def message(self, level: int, text: str) -> None:
        """Report a notice at the given logging level."""
        pass


class _NullProgress(Progress):
    def update(self, n: int = 1) -> None:
        pass


class NullReporter(Reporter):
    """Reporter that discards everything."""

    def track(self, title: str, total: int) -> ContextManager:
        return _NullProgress()

    def message(self, level: int, text: str) -> None:
        pass


class TqdmReporter(Reporter):
    """
    Console reporter.

    Bars render as 'title [=====     ] (count/total)', redrawn in place and
    finished with a newline. Notices go to the package logger.
    """

    def __init__(self, width: int = PROGRESS_BAR_WIDTH, file: Optional[TextIO] = None):
        self.width = width
        self.file = file

    @property
    def bar_format(self) -> str:
        return '{desc} [{bar:%d}] ({n_fmt}/{total_fmt})' % self.width

    def track(self, title: str, total: int) -> ContextManager:
        return tqdm(
            total=total,
            desc=title,
            bar_format=self.bar_format,
            ascii=PROGRESS_BAR_FILL,
            file=self.file or sys.stdout,
            leave=True,
        )

    def message(self, level: int, text: str) -> None:
        logger.log(level, text)
