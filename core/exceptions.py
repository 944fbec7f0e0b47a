class UserServiceError(Exception):
    def __init__(self, message: str, code: int = 500, details: str = ""):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        return f"Error {self.code}: {self.message} - {self.details}"


class StorageError(UserServiceError):
    def __init__(self, operation: str, key: str, details: str = ""):
        super().__init__(f"Storage {operation} failed for key {key}", code=500, details=details)
        self.operation = operation
        self.key = key


class NoSessionError(UserServiceError):
    def __init__(self, url: str = ""):
        super().__init__("No authentication token found", code=401, details=url)
        self.url = url


class AuthenticationExpiredError(UserServiceError):
    def __init__(self, status: int, url: str = ""):
        super().__init__("Authentication failed - token expired", code=status, details=url)
        self.status = status
        self.url = url


class NetworkError(UserServiceError):
    def __init__(self, message: str, details: str = ""):
        super().__init__(message, code=503, details=details)


class MalformedResponseError(UserServiceError):
    def __init__(self, message: str, details: str = ""):
        super().__init__(message, code=502, details=details)


class PhotoAnalysisError(UserServiceError):
    def __init__(self, details: str = ""):
        super().__init__("Could not analyze the workout photo, please try again", code=502, details=details)


class WorkoutValidationError(UserServiceError):
    def __init__(self, field: str, message: str):
        super().__init__(message, code=400, details=field)
        self.field = field
