"""Abstract interfaces for SASL clients, servers and their factories."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from types import TracebackType
from typing import Any

__all__ = [
    "CallbackHandler",
    "SaslClient",
    "SaslServer",
    "SaslClientFactory",
    "SaslServerFactory",
]

CallbackHandler = Callable[[Sequence[Any]], None]
"""A callable that receives the callbacks a mechanism needs answered."""


class _Disposable:
    """Context-manager support for objects that release state in ``dispose``."""

    def dispose(self) -> None:  # pragma: no cover - overridden
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


class SaslClient(_Disposable, ABC):
    """The client side of a SASL authentication exchange."""

    @property
    @abstractmethod
    def mechanism_name(self) -> str:
        """The IANA-registered name of this client's mechanism."""

    @abstractmethod
    def has_initial_response(self) -> bool:
        """Whether the mechanism sends data before receiving a challenge."""

    @abstractmethod
    def evaluate_challenge(self, challenge: bytes) -> bytes | None:
        """Process a challenge from the server and return the response, if any."""

    @abstractmethod
    def is_complete(self) -> bool:
        """Whether the authentication exchange has finished."""

    @abstractmethod
    def unwrap(self, incoming: bytes, offset: int = 0, length: int | None = None) -> bytes:
        """Unwrap bytes received from the server under the negotiated protection."""

    @abstractmethod
    def wrap(self, outgoing: bytes, offset: int = 0, length: int | None = None) -> bytes:
        """Wrap bytes to send to the server under the negotiated protection."""

    @abstractmethod
    def get_negotiated_property(self, prop_name: str) -> Any:
        """Return a negotiated property once authentication has completed."""

    @abstractmethod
    def dispose(self) -> None:
        """Release any state held by this client."""


class SaslServer(_Disposable, ABC):
    """The server side of a SASL authentication exchange."""

    @property
    @abstractmethod
    def mechanism_name(self) -> str:
        """The IANA-registered name of this server's mechanism."""

    @abstractmethod
    def evaluate_response(self, response: bytes) -> bytes | None:
        """Process a response from the client and return the next challenge, if any."""

    @abstractmethod
    def is_complete(self) -> bool:
        """Whether the authentication exchange has finished."""

    @property
    @abstractmethod
    def authorization_id(self) -> str | None:
        """The authorization id of the client once authentication has completed."""

    @abstractmethod
    def unwrap(self, incoming: bytes, offset: int = 0, length: int | None = None) -> bytes:
        """Unwrap bytes received from the client under the negotiated protection."""

    @abstractmethod
    def wrap(self, outgoing: bytes, offset: int = 0, length: int | None = None) -> bytes:
        """Wrap bytes to send to the client under the negotiated protection."""

    @abstractmethod
    def get_negotiated_property(self, prop_name: str) -> Any:
        """Return a negotiated property once authentication has completed."""

    @abstractmethod
    def dispose(self) -> None:
        """Release any state held by this server."""


class SaslClientFactory(ABC):
    """Creates SASL clients for the mechanisms it supports."""

    @abstractmethod
    def create_sasl_client(
        self,
        mechanisms: Sequence[str],
        authorization_id: str | None,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        cbh: CallbackHandler | None,
    ) -> SaslClient | None:
        """Return a client for the first usable mechanism, or None."""

    @abstractmethod
    def get_mechanism_names(self, props: Mapping[str, Any] | None) -> list[str]:
        """Return the mechanism names that satisfy the given policy properties."""


class SaslServerFactory(ABC):
    """Creates SASL servers for the mechanisms it supports."""

    @abstractmethod
    def create_sasl_server(
        self,
        mechanism: str,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        cbh: CallbackHandler | None,
    ) -> SaslServer | None:
        """Return a server for the mechanism, or None when it cannot make one."""

    @abstractmethod
    def get_mechanism_names(self, props: Mapping[str, Any] | None) -> list[str]:
        """Return the mechanism names that satisfy the given policy properties."""