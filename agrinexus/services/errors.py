class ServiceError(Exception):
    """The AI service call failed outright (network, auth, quota, not configured)"""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} failed{detail}")
