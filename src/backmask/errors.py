"""Exceptions raised by backmask."""


class BackmaskError(Exception):
    """Base exception for backmask errors."""


class EmptyStackError(BackmaskError, IndexError):
    """Raised by pop() or peek() on an empty stack."""


class ConcurrentModificationError(BackmaskError, RuntimeError):
    """Raised when a stack is mutated while a traversal over it is live."""


class FormatError(BackmaskError, ValueError):
    """Raised for malformed sample-record text or unsupported WAV data."""


class ReversalError(BackmaskError):
    """Raised when a reversal run finds the stack out of step with its input."""
