import functools
import logging

from gamerscove.core.exceptions import FriendshipError

# Operation boundary records go here so they can be routed separately from module logs.
operations_logger = logging.getLogger("gamerscove.operations")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configures the root logger once. Safe to call again (e.g. on app reload)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())


def log_operation(operation: str):
    """
    Decorator emitting entry / success / failure records around a manager operation.
    Every record carries `operation` and `outcome` in `extra`; failures also carry
    `error_kind` (the FriendshipError code, or "internal" for anything unexpected).
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            # args[0] is the manager instance
            call_args = args[1:]
            operations_logger.debug(
                f"{operation} called with {call_args} {kwargs or ''}".rstrip(),
                extra={"operation": operation, "outcome": "entry"},
            )
            try:
                result = func(*args, **kwargs)
            except FriendshipError as e:
                operations_logger.warning(
                    f"{operation} rejected ({e.code}): {e.message}",
                    extra={"operation": operation, "outcome": "failure", "error_kind": e.code},
                )
                raise
            except Exception:
                operations_logger.exception(
                    f"{operation} failed unexpectedly",
                    extra={"operation": operation, "outcome": "failure", "error_kind": "internal"},
                )
                raise
            operations_logger.info(
                f"{operation} succeeded",
                extra={"operation": operation, "outcome": "success"},
            )
            return result
        return wrapper
    return decorator
