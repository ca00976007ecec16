"""
quorumsig/errors.py

Exception types raised by the multisig core.

Every operation in quorumsig is a pure transformation, so these errors are
terminal for the call that raised them. Nothing here is retried or
downgraded; callers surface them unchanged.
"""


class MultiSigError(Exception):
    """Base class for all quorumsig errors."""
    pass


class UnknownSchemeError(MultiSigError):
    """Raised when a signature scheme (or scheme name) is not registered."""
    pass


class UnknownSchemeFlagError(UnknownSchemeError):
    """Raised when a one-byte scheme flag has no registered scheme."""

    def __init__(self, flag: int):
        self.flag = flag
        shown = f"{flag:#04x}" if isinstance(flag, int) else repr(flag)
        super().__init__(f"Unknown signature scheme flag: {shown}")


class CapacityExceededError(MultiSigError):
    """Raised when a committee or key exceeds a configured ceiling."""
    pass


class UnknownSignerError(MultiSigError):
    """Raised when a partial signature's signer is not in the committee."""
    pass


class DuplicateSignerError(MultiSigError):
    """Raised when two partial signatures resolve to the same committee member."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Committee member at index {index} already signed")


class InvalidEncodingError(MultiSigError):
    """Raised when an aggregate is not base64 or lacks the multisig flag."""
    pass


class MalformedAggregateError(MultiSigError):
    """Raised when canonical bytes do not match the expected structure."""
    pass


class BitmapIndexOutOfRangeError(MultiSigError):
    """Raised when a bitmap entry points past the end of pk_map."""

    def __init__(self, index: int, pk_map_length: int):
        self.index = index
        self.pk_map_length = pk_map_length
        super().__init__(
            f"Bitmap index {index} out of range for pk_map of length {pk_map_length}"
        )
