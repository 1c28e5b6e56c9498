"""Provider registry and the entry points for creating SASL clients and servers."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from saslkit.abstract_impl import MAX_BUFFER, QOP, RAW_SEND_SIZE, SASL_LOGGER_NAME, STRENGTH
from saslkit.exceptions import SaslException
from saslkit.interfaces import (
    CallbackHandler,
    SaslClient,
    SaslClientFactory,
    SaslServer,
    SaslServerFactory,
)
from saslkit.policy import (
    POLICY_FORWARD_SECRECY,
    POLICY_NOACTIVE,
    POLICY_NOANONYMOUS,
    POLICY_NODICTIONARY,
    POLICY_NOPLAINTEXT,
    POLICY_PASS_CREDENTIALS,
)

__all__ = [
    "QOP",
    "STRENGTH",
    "SERVER_AUTH",
    "BOUND_SERVER_NAME",
    "MAX_BUFFER",
    "RAW_SEND_SIZE",
    "REUSE",
    "POLICY_NOPLAINTEXT",
    "POLICY_NOACTIVE",
    "POLICY_NODICTIONARY",
    "POLICY_NOANONYMOUS",
    "POLICY_FORWARD_SECRECY",
    "POLICY_PASS_CREDENTIALS",
    "CREDENTIALS",
    "CLIENT_FACTORY_TYPE",
    "SERVER_FACTORY_TYPE",
    "Service",
    "Provider",
    "SaslRegistry",
    "parse_disabled_mechanisms",
]

SERVER_AUTH = "javax.security.sasl.server.authentication"
BOUND_SERVER_NAME = "javax.security.sasl.bound.server.name"
REUSE = "javax.security.sasl.reuse"
CREDENTIALS = "javax.security.sasl.credentials"

CLIENT_FACTORY_TYPE = "SaslClientFactory"
SERVER_FACTORY_TYPE = "SaslServerFactory"

_DISABLED_SEPARATOR = re.compile(r"\s*,\s*")

logger = logging.getLogger(SASL_LOGGER_NAME)


def parse_disabled_mechanisms(prop: str | None) -> list[str]:
    """Split a comma-separated list of disabled mechanism names, dropping empty entries."""
    if prop is None:
        return []
    return [name for name in _DISABLED_SEPARATOR.split(prop) if name]


@dataclass
class Service:
    """A factory implementation registered by a provider for one type and algorithm."""

    type: str
    algorithm: str
    factory: Callable[[], Any]
    provider: str | None = field(default=None, compare=False)

    def new_instance(self) -> Any:
        """Create a new factory object; raises LookupError if construction fails."""
        try:
            return self.factory()
        except Exception as exc:
            raise LookupError(
                f"Error constructing implementation (algorithm: {self.algorithm}, "
                f"provider: {self.provider}, factory: {self._factory_name()})"
            ) from exc

    def _factory_name(self) -> str:
        return getattr(self.factory, "__qualname__", repr(self.factory))

    def __str__(self) -> str:
        return f"{self.provider}: {self.type}.{self.algorithm} -> {self._factory_name()}"


class Provider:
    """A named collection of services."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._services: dict[tuple[str, str], Service] = {}

    def add_service(self, service: Service) -> None:
        """Register *service*, replacing any service with the same type and algorithm."""
        service.provider = self.name
        self._services[(service.type, service.algorithm.upper())] = service

    def get_service(self, type: str, algorithm: str) -> Service | None:
        """Return the service for *type* and *algorithm* (case-insensitive), or None."""
        return self._services.get((type, algorithm.upper()))

    def services(self) -> list[Service]:
        """Return all services in registration order."""
        return list(self._services.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SaslRegistry:
    """Looks up SASL client and server factories among installed providers."""

    def __init__(
        self,
        providers: Iterable[Provider] | None = None,
        disabled_mechanisms: str | Iterable[str] | None = None,
    ) -> None:
        self._providers: list[Provider] = []
        for provider in providers or ():
            self.add_provider(provider)
        if disabled_mechanisms is None or isinstance(disabled_mechanisms, str):
            self.disabled_mechanisms = parse_disabled_mechanisms(disabled_mechanisms)
        else:
            self.disabled_mechanisms = [name for name in disabled_mechanisms if name]

    def add_provider(self, provider: Provider) -> int:
        """Append *provider*; return its 1-based position, or -1 if one of that name exists."""
        if any(p.name == provider.name for p in self._providers):
            return -1
        self._providers.append(provider)
        return len(self._providers)

    def remove_provider(self, name: str) -> None:
        """Remove the provider called *name*; do nothing if there is none."""
        self._providers = [p for p in self._providers if p.name != name]

    def get_providers(self, filter: str | None = None) -> list[Provider]:
        """Return all providers, or those offering the service named ``"type.algorithm"``."""
        if filter is None:
            return list(self._providers)
        service_type, dot, algorithm = filter.partition(".")
        if not dot or not service_type or not algorithm:
            raise ValueError(f"Invalid filter: {filter!r}")
        return [p for p in self._providers if p.get_service(service_type, algorithm) is not None]

    def is_disabled(self, name: str) -> bool:
        """Whether mechanism *name* is disabled."""
        return name in self.disabled_mechanisms

    def create_sasl_client(
        self,
        mechanisms: Sequence[str | None],
        authorization_id: str | None,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        cbh: CallbackHandler | None,
    ) -> SaslClient | None:
        """Return a client for the first listed mechanism any provider can serve, or None."""
        if mechanisms is None:
            raise TypeError("mechanisms must not be None")
        for mech_name in mechanisms:
            if mech_name is None:
                raise TypeError("Mechanism name cannot be null")
            if not mech_name:
                continue
            if self.is_disabled(mech_name):
                logger.debug("Disabled %s mechanism ignored", mech_name)
                continue
            for provider in self.get_providers(f"{CLIENT_FACTORY_TYPE}.{mech_name}"):
                service = provider.get_service(CLIENT_FACTORY_TYPE, mech_name)
                if service is None:
                    continue
                factory = _load_factory(service)
                if factory is not None:
                    client = factory.create_sasl_client(
                        [mech_name], authorization_id, protocol, server_name, props, cbh
                    )
                    if client is not None:
                        return client
        return None

    def create_sasl_server(
        self,
        mechanism: str | None,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        cbh: CallbackHandler | None,
    ) -> SaslServer | None:
        """Return a server for *mechanism*, or None when no provider can make one."""
        if mechanism is None:
            raise TypeError("Mechanism name cannot be null")
        if not mechanism:
            return None
        if self.is_disabled(mechanism):
            logger.debug("Disabled %s mechanism ignored", mechanism)
            return None
        for provider in self.get_providers(f"{SERVER_FACTORY_TYPE}.{mechanism}"):
            service = provider.get_service(SERVER_FACTORY_TYPE, mechanism)
            if service is None:
                raise SaslException(
                    f"Provider does not support {mechanism} {SERVER_FACTORY_TYPE}"
                )
            factory = _load_factory(service)
            if factory is not None:
                server = factory.create_sasl_server(
                    mechanism, protocol, server_name, props, cbh
                )
                if server is not None:
                    return server
        return None

    def get_sasl_client_factories(self) -> Iterator[SaslClientFactory]:
        """Iterate over the distinct client factories that can be loaded."""
        return iter(self._factories(CLIENT_FACTORY_TYPE))

    def get_sasl_server_factories(self) -> Iterator[SaslServerFactory]:
        """Iterate over the distinct server factories that can be loaded."""
        return iter(self._factories(SERVER_FACTORY_TYPE))

    def _factories(self, service_name: str) -> list[Any]:
        if not service_name or service_name.endswith("."):
            return []
        result: dict[Any, None] = {}
        for provider in self._providers:
            for service in provider.services():
                if service.type != service_name:
                    continue
                try:
                    factory = _load_factory(service)
                except Exception:
                    continue
                if factory is not None:
                    result.setdefault(factory)
        return list(result)


def _load_factory(service: Service) -> Any:
    try:
        return service.new_instance()
    except (LookupError, ValueError) as exc:
        raise SaslException(f"Cannot instantiate service {service}", exc) from exc