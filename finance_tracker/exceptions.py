class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class DatabaseUnavailableError(AppError):
    def __init__(self, message: str = "Database not initialized"):
        super().__init__(message, code="DATABASE_UNAVAILABLE")
