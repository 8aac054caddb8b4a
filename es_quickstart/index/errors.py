from typing import Optional


class ElasticDemoError(Exception):
    """
    Base class for every failure raised by the quickstart operations.
    """

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class ConfigError(ElasticDemoError):
    pass


class ConnectionFailed(ElasticDemoError):
    pass


class ErrorResponse(ElasticDemoError):
    """
    The cluster answered with a non-2xx status.
    """

    def __init__(
        self,
        status: int,
        error_type: Optional[str],
        reason: Optional[str],
        operation: Optional[str] = None,
    ) -> None:
        self.status = status
        self.error_type = error_type
        self.reason = reason
        super().__init__(f"[{status}] {error_type}: {reason}", operation)


class MalformedResponse(ElasticDemoError):
    pass
