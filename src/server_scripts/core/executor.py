"""Terminal dispatch of execution plans.

Dispatch replaces the current process image; control never comes back to the
caller on success. Whatever the dispatched program exits with becomes the exit
code of the ssc invocation.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import NoReturn

from server_scripts.core.errors import DispatchFailed
from server_scripts.core.resolver import ExecutionPlan

logger = logging.getLogger(__name__)


class Executor(ABC):
    """Abstract terminal dispatch for dependency injection."""

    @abstractmethod
    def exec_plan(self, plan: ExecutionPlan) -> NoReturn:
        """Replace the current process with the plan's program.

        Raises:
            DispatchFailed: If the program could not be executed at all
        """
        ...


class RealExecutor(Executor):
    """Production implementation using os.execvp."""

    def exec_plan(self, plan: ExecutionPlan) -> NoReturn:
        argv = plan.argv
        logger.debug("Dispatching: %s", argv)

        # Buffered output would be lost once the process image is replaced
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            os.execvp(argv[0], argv)
        except OSError as e:
            raise DispatchFailed(argv[0], e.strerror or str(e)) from e
