"""
Service-level errors. Causes are logged where they happen; callers only see a fixed message per operation.
"""


class NewsServiceError(Exception):
    """Generic internal failure of a news operation. Mapped to HTTP 500 by the app."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class JobAlreadyRunningError(Exception):
    """Another run of the same bulk job holds the advisory lock."""

    def __init__(self, job: str):
        super().__init__(f"{job} is already running")
        self.job = job
