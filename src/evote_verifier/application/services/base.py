"""Base service logging mixin.

Provides the LoggingMixin class for standardized structured logging across
services, adapters and the runner.

Usage:
    from evote_verifier.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self) -> None:
            self._init_logger(component="verification")

        def do_something(self) -> None:
            log = self._log_operation("do_something", verification_id="03.09")
            log.info("operation_started")
"""

import structlog

from evote_verifier.infrastructure.observability.run_context import get_run_id


class LoggingMixin:
    """Mixin providing structured logging.

    The logger is bound with:
    - service: The class name
    - component: The component type (default: "verifier")

    Each operation gets:
    - operation: The name of the operation being performed
    - run_id: The id of the current verification run
    - Any additional context passed to _log_operation()

    Attributes:
        _log: The structlog BoundLogger for this instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "verifier") -> None:
        """Initialize the logger with service name binding.

        Should be called in __init__ after setting up dependencies.

        Args:
            component: The component type for log categorization.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and run context.
        """
        return self._log.bind(
            operation=operation,
            run_id=get_run_id(),
            **context,
        )
