# lambda_prune/utils/prune_logger.py
"""
Severity-aware logging for the pruner.

Callers only ever see a PruneLogger with info/warning/success/debug. Whether
messages land in the `logging` module or in a host's single log function is
decided once, in make_logger().
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

PREFIX = "Prune: "


class PruneLogger(ABC):
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @abstractmethod
    def info(self, message: str) -> None:
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def debug(self, message: str) -> None:
        ...


class LoggingAdapter(PruneLogger):
    """Routes each severity to the matching level of a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, verbose: bool = False):
        super().__init__(verbose)
        self._logger = logger or logging.getLogger("lambda_prune")

    def info(self, message):
        self._logger.info(PREFIX + message)

    def warning(self, message):
        self._logger.warning(PREFIX + message)

    def success(self, message):
        self._logger.log(SUCCESS, PREFIX + message)

    def debug(self, message):
        if self.verbose:
            # verbose output is promoted so it shows without a DEBUG root logger
            self._logger.info(PREFIX + message)
        else:
            self._logger.debug(PREFIX + message)


class CallbackAdapter(PruneLogger):
    """Routes everything to one generic log(message) function, e.g. a host CLI."""

    def __init__(self, log_fn: Callable[[str], None], verbose: bool = False):
        super().__init__(verbose)
        self._log = log_fn

    def info(self, message):
        self._log(PREFIX + message)

    def warning(self, message):
        self._log(PREFIX + "WARNING: " + message)

    def success(self, message):
        self._log(PREFIX + message)

    def debug(self, message):
        if self.verbose:
            self._log(PREFIX + message)


def make_logger(log_fn: Optional[Callable[[str], None]] = None, verbose: bool = False) -> PruneLogger:
    if log_fn is not None:
        return CallbackAdapter(log_fn, verbose=verbose)
    return LoggingAdapter(verbose=verbose)
