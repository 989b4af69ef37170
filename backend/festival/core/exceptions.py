class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class InstanceFormatError(AppError):
    """Raised when a festival instance cannot be parsed or is inconsistent."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class UnknownItemError(InstanceFormatError):
    """Raised when an incompatibility references a film that was never declared."""
    def __init__(self, name: str):
        super().__init__(f"Film '{name}' is not declared in the instance", details={"film": name})
        self.name = name

class CapacityExceededError(AppError):
    """Raised when a film is placed on a day whose rooms are all taken."""
    def __init__(self, day_index: int, capacity: int):
        super().__init__(
            f"Day {day_index + 1} already uses all {capacity} rooms",
            status_code=409,
            details={"day": day_index + 1, "capacity": capacity},
        )

class InstanceTooLargeError(AppError):
    """Raised when an instance is too large for the requested strategy."""
    def __init__(self, strategy: str, films: int, limit: int):
        super().__init__(
            f"Strategy '{strategy}' accepts at most {limit} films, got {films}",
            status_code=422,
            details={"strategy": strategy, "films": films, "limit": limit},
        )

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)
