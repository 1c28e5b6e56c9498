"""Exceptions raised during SASL authentication."""

from __future__ import annotations

__all__ = ["SaslException", "AuthenticationException"]


def _describe(exc: BaseException) -> str:
    """Render an exception as its class name followed by its message, if any."""
    name = type(exc).__name__
    text = str(exc)
    return f"{name}: {text}" if text else name


class SaslException(OSError):
    """An error that occurred while using SASL.

    The optional *cause* is kept as ``__cause__``, so ``raise ... from err``
    and passing the cause explicitly are equivalent.
    """

    def __init__(self, detail: str | None = None, cause: BaseException | None = None) -> None:
        if detail is None:
            super().__init__()
        else:
            super().__init__(detail)
        self.detail = detail
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        """The exception that caused this one, if known."""
        return self.__cause__

    def __str__(self) -> str:
        answer = "" if self.detail is None else str(self.detail)
        cause = self.__cause__
        if cause is not None and cause is not self:
            answer += f" [Caused by {_describe(cause)}]"
        return answer


class AuthenticationException(SaslException):
    """Authentication failed, for example because of invalid credentials."""