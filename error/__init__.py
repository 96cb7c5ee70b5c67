
class ServerError(Exception):
    """Base class for server-related errors"""

    def __init__(self, msg="Server error occurred", status_code=500):
        self.msg = msg
        self.status_code = status_code
        super().__init__(self.msg)


class InvalidRequestError(ServerError):
    """Raised when request is invalid"""

    def __init__(self, msg="Invalid request", status_code=400):
        super().__init__(msg=msg, status_code=status_code)


class AuthenticationError(ServerError):
    """Raised when authentication fails"""

    def __init__(self, msg="Authentication failed", status_code=401):
        super().__init__(msg=msg, status_code=status_code)


class ResourceNotFoundError(ServerError):
    """Raised when requested resource is not found"""

    def __init__(self, msg="Resource not found", status_code=404):
        super().__init__(msg=msg, status_code=status_code)


class ConflictError(ServerError):
    """Raised when a request clashes with existing state

    Examples are generating a plan for a week that already has one
    or completing a session that already reached a terminal status.
    """

    def __init__(self, msg="Request conflicts with existing state", status_code=409):
        super().__init__(msg=msg, status_code=status_code)

