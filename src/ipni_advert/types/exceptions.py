"""Exception hierarchy for advertisement construction and signing."""

from __future__ import annotations

from typing import Any


class IpniError(Exception):
    """
    Base exception for all advertisement-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ValidationError(IpniError):
    """
    Raised when a record is constructed from inputs that break an invariant.

    Never retried: the caller must fix its inputs.

    Attributes:
        rule: Short name of the violated rule (e.g. "context_length").
        detail: Description of the violation.
    """

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"{rule}: {detail}")


class ConfigurationError(IpniError):
    """
    Raised when protocol configuration needed for encoding is missing or unknown.

    Attributes:
        protocol: The protocol being configured, if known.
    """

    def __init__(self, message: str, *, protocol: Any = None) -> None:
        self.protocol = protocol
        super().__init__(message)


class SigningError(IpniError):
    """
    Raised by a signing collaborator that cannot produce a signature.

    Attributes:
        peer_id: String form of the peer whose key was requested.
    """

    def __init__(self, message: str, *, peer_id: str | None = None) -> None:
        self.peer_id = peer_id
        if peer_id is not None:
            message = f"{message} (peer {peer_id})"
        super().__init__(message)
