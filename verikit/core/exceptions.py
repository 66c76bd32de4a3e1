_PAYLOAD_PREVIEW_BYTES = 200


class VerificationError(AssertionError):
    """Base for all verification failures.

    Derives from ``AssertionError`` so a failed verification is reported as a
    test failure rather than a test error.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TimedOut(VerificationError):
    """Operation did not complete before its deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__("Unable to complete within timeout")


class StatusMismatch(VerificationError):
    """Observed HTTP status differs from the expected one."""

    def __init__(self, expected: int, actual: int, url: str) -> None:
        self.expected = expected
        self.actual = actual
        self.url = url
        super().__init__(
            f"Expected response code does not match with actual response: "
            f"expected {expected}, got {actual} for GET {url}"
        )


class MalformedBody(VerificationError):
    """Response body that must be JSON could not be parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Response body from {url} is not valid JSON: {reason}")


class MalformedEvent(VerificationError):
    """Bus payload carries neither a structured key nor readable text."""

    def __init__(self, reason: str, payload: bytes) -> None:
        self.reason = reason
        self.payload = payload
        preview = payload[:_PAYLOAD_PREVIEW_BYTES]
        super().__init__(f"Malformed event ({reason}): {preview!r}")


class UrlResolutionError(VerificationError):
    """A path could not be joined onto a base URL."""

    def __init__(self, base: str, path: str, reason: str) -> None:
        self.base = base
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve '{path}' against '{base}': {reason}")


class HarnessError(Exception):
    """Base for infrastructure faults of the harness itself (not verdicts)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BusError(HarnessError):
    """Event bus unreachable or misconfigured."""

    pass


class AuthenticationError(HarnessError):
    """Token acquisition failed."""

    pass
