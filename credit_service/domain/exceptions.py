"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFound(DomainException):
    """Referenced credit, customer or account does not exist"""

    pass


class ValidationError(DomainException):
    """Business rule violation"""

    pass


class InvalidState(DomainException):
    """Operation attempted against a credit that is not ACTIVE"""

    pass


class ConflictError(DomainException):
    """Credit changed between read and write (optimistic concurrency)"""

    def __init__(self, credit_id: str, expected_version: int):
        super().__init__(f"Credit {credit_id} was modified concurrently (expected version {expected_version})")
        self.credit_id = credit_id
        self.expected_version = expected_version


class UpstreamUnavailable(DomainException):
    """Collaborator service failed, timed out or returned a 5xx"""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} unavailable: {message}")
        self.service = service
