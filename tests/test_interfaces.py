import pytest

from saslkit.interfaces import (
    SaslClient,
    SaslClientFactory,
    SaslServer,
    SaslServerFactory,
)


class EchoClient(SaslClient):
    def __init__(self):
        self.disposed = False
        self.done = False

    @property
    def mechanism_name(self):
        return "ECHO"

    def has_initial_response(self):
        return True

    def evaluate_challenge(self, challenge):
        self.done = True
        return challenge

    def is_complete(self):
        return self.done

    def unwrap(self, incoming, offset=0, length=None):
        end = len(incoming) if length is None else offset + length
        return incoming[offset:end]

    def wrap(self, outgoing, offset=0, length=None):
        end = len(outgoing) if length is None else offset + length
        return outgoing[offset:end]

    def get_negotiated_property(self, prop_name):
        return None

    def dispose(self):
        self.disposed = True


class EchoServer(SaslServer):
    def __init__(self):
        self.disposed = False

    @property
    def mechanism_name(self):
        return "ECHO"

    def evaluate_response(self, response):
        return response

    def is_complete(self):
        return True

    @property
    def authorization_id(self):
        return "user"

    def unwrap(self, incoming, offset=0, length=None):
        return incoming

    def wrap(self, outgoing, offset=0, length=None):
        return outgoing

    def get_negotiated_property(self, prop_name):
        return None

    def dispose(self):
        self.disposed = True


class EchoClientFactory(SaslClientFactory):
    def create_sasl_client(self, mechanisms, authorization_id, protocol, server_name, props, cbh):
        return EchoClient() if "ECHO" in mechanisms else None

    def get_mechanism_names(self, props):
        return ["ECHO"]


class EchoServerFactory(SaslServerFactory):
    def create_sasl_server(self, mechanism, protocol, server_name, props, cbh):
        return EchoServer() if mechanism == "ECHO" else None

    def get_mechanism_names(self, props):
        return ["ECHO"]


@pytest.mark.parametrize(
    "cls", [SaslClient, SaslServer, SaslClientFactory, SaslServerFactory]
)
def test_interfaces_cannot_be_instantiated(cls):
    with pytest.raises(TypeError):
        cls()


def test_client_context_manager_disposes():
    client = EchoClient()
    entered = SaslClient.__enter__(client)
    assert entered is client
    assert client.disposed is False
    SaslClient.__exit__(client, None, None, None)
    assert client.disposed is True


def test_client_context_manager_disposes_on_error():
    client = EchoClient()
    SaslClient.__enter__(client)
    error = RuntimeError("boom")
    suppressed = SaslClient.__exit__(client, RuntimeError, error, None)
    assert not suppressed
    assert client.disposed is True


def test_server_context_manager_disposes():
    server = EchoServer()
    entered = SaslServer.__enter__(server)
    assert entered is server
    SaslServer.__exit__(server, None, None, None)
    assert server.disposed is True


def test_client_factory_selects_supported_mechanism():
    factory = EchoClientFactory()
    client = factory.create_sasl_client(["PLAIN", "ECHO"], None, "ldap", "host", None, None)
    entered = SaslClient.__enter__(client)
    assert entered.mechanism_name == "ECHO"
    SaslClient.__exit__(client, None, None, None)
    assert client.disposed is True
    assert factory.create_sasl_client(["PLAIN"], None, "ldap", "host", None, None) is None


def test_server_factory_selects_supported_mechanism():
    factory = EchoServerFactory()
    server = factory.create_sasl_server("ECHO", "ldap", "host", None, None)
    entered = SaslServer.__enter__(server)
    assert entered.evaluate_response(b"abc") == b"abc"
    SaslServer.__exit__(server, None, None, None)
    assert server.disposed is True
    assert factory.create_sasl_server("PLAIN", "ldap", "host", None, None) is None