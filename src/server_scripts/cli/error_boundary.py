"""Error boundary handling for CLI commands.

This module provides a decorator to catch well-known exceptions at CLI entry
points and display clean error messages without stack traces. With debug
logging enabled the traceback is logged as well.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from server_scripts.cli.output import print_error
from server_scripts.core.errors import SscError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Decorator that catches SscError and displays a clean error message.

    Catches:
        - SscError and every subclass: printed as a red `Error:` line plus the
          remediation hint, exit code 1

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @click.pass_obj
        @cli_error_boundary
        def my_command(ctx: SscContext):
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SscError as e:
            logger.debug("%s failed", func.__name__, exc_info=True)
            print_error(e.message, e.hint)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
