# gnode/nucleus/errors.py
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes carried by `error` bodies on the wire."""

    TIMEOUT = 0
    NODE_NOT_FOUND = 1
    NOT_SUPPORTED = 10
    TEMPORARILY_UNAVAILABLE = 11
    MALFORMED_REQUEST = 12
    CRASH = 13
    ABORT = 14


class NodeError(Exception):
    """Base class for every error raised by the node runtime."""


class FatalNodeError(NodeError):
    """
    The run cannot continue. Raised out of the run loop and turned into a
    non-zero exit by the entry point.
    """


class MalformedMessageError(FatalNodeError):
    """An input line could not be decoded into an envelope."""


class TransportError(FatalNodeError):
    """The input stream could not be attached to the run loop."""


class UnsupportedMessageError(FatalNodeError):
    """The dispatcher received a tag outside the active variant's schema."""

    def __init__(self, variant: str, message_type: str):
        super().__init__(f"Node variant '{variant}' has no handler for message type '{message_type}'.")
        self.variant = variant
        self.message_type = message_type


class ReportableError(NodeError):
    """A request failed, but the node can answer it with an `error` body and keep going."""

    code: ErrorCode = ErrorCode.CRASH


class NodeNotInitializedError(ReportableError):
    code = ErrorCode.TEMPORARILY_UNAVAILABLE

    def __init__(self, message_type: str):
        super().__init__(f"Cannot handle '{message_type}' before 'init' has assigned a node id.")
        self.message_type = message_type
