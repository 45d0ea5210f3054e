from __future__ import annotations

import abc
from typing import Optional

from ..progress import ProgressLogger, TerminationFlag


class Algorithm(abc.ABC):
    """Common lifecycle of graph algorithms.

    ``compute()`` runs the algorithm and returns ``self``; ``release()`` frees
    working memory that is no longer needed once results are available. Used
    as a context manager, the algorithm is released on exit.
    """

    def __init__(
        self,
        progress_logger: Optional[ProgressLogger] = None,
        termination_flag: Optional[TerminationFlag] = None,
    ):
        self.progress_logger = progress_logger or ProgressLogger.NULL
        self.termination_flag = termination_flag or TerminationFlag()

    @abc.abstractmethod
    def compute(self) -> "Algorithm":
        ...

    @abc.abstractmethod
    def release(self) -> None:
        ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
