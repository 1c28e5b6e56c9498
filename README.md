# saslkit

A small SASL framework for Python with no dependencies. It supplies the
pieces that SASL mechanism implementations and the applications using them
share. It does not supply any mechanisms of its own.

## What is in it

- `saslkit.interfaces` has the abstract base classes `SaslClient`,
  `SaslServer`, `SaslClientFactory` and `SaslServerFactory`, along with the
  `CallbackHandler` type: a callable that receives a sequence of callbacks.
  Clients and servers are context managers, and `dispose()` is called when
  the `with` block exits.
- `saslkit.sasl` has `Service`, `Provider` and `SaslRegistry`.
  - A `Service` ties a type (`"SaslClientFactory"` or `"SaslServerFactory"`)
    and a mechanism name to a zero-argument factory callable.
  - A `Provider` holds services and looks them up by type and
    case-insensitive algorithm name.
  - `SaslRegistry.create_sasl_client` tries each listed mechanism in order,
    and `create_sasl_server` tries a single mechanism. Empty mechanism names
    are skipped. A `None` mechanism name raises `TypeError`.
  - Mechanisms can be disabled by passing a list or a comma-separated string
    to the registry. `parse_disabled_mechanisms("PLAIN, CRAM-MD5")` returns
    `["PLAIN", "CRAM-MD5"]`.
  - `get_sasl_client_factories()` and `get_sasl_server_factories()` iterate
    over the distinct factories that can be loaded.
  - A factory that fails to construct is reported as a `SaslException`.
  - The module also defines the standard property names: `QOP`, `STRENGTH`,
    `SERVER_AUTH`, `MAX_BUFFER`, `REUSE`, the `POLICY_*` names, and others.
- `saslkit.policy` has `PolicyFlag`, `check_policy(flags, props)` and
  `filter_mechs(mechs, policies, props)`. Together they decide which
  mechanisms meet every policy property set to `"true"`.
- `saslkit.abstract_impl` has `AbstractSaslImpl`, a base class that reads the
  QOP, strength and buffer-size properties, plus these helpers:
  - `parse_qop`, `parse_strength` and `parse_prop`
  - `combine_masks` and `find_preferred_mask`
  - `network_byte_order_to_int` and `int_to_network_byte_order`
  - `hex_dump` and `trace_output`

  `trace_output` logs to the `"saslkit"` logger. At level 5 it dumps the
  whole buffer; at level 7 it dumps the first 16 bytes.

  `get_negotiated_property` raises `RuntimeError` until the exchange is
  complete.
- `saslkit.callbacks` has `AuthorizeCallback`, `RealmCallback` and
  `RealmChoiceCallback`.
- `saslkit.exceptions` has `SaslException`, a subclass of `OSError` whose
  string form appends `[Caused by ...]` when it has a cause, and
  `AuthenticationException`.

## Install

```
pip install .
```

## Example

```python
from saslkit.exceptions import SaslException
from saslkit.interfaces import SaslClient, SaslClientFactory
from saslkit.sasl import Provider, SaslRegistry, Service


class AnonymousClient(SaslClient):
    def __init__(self):
        self._done = False

    @property
    def mechanism_name(self):
        return "ANONYMOUS"

    def has_initial_response(self):
        return True

    def evaluate_challenge(self, challenge):
        self._done = True
        return b"trace"

    def is_complete(self):
        return self._done

    def unwrap(self, incoming, offset=0, length=None):
        raise SaslException("No security layer")

    def wrap(self, outgoing, offset=0, length=None):
        raise SaslException("No security layer")

    def get_negotiated_property(self, prop_name):
        return None

    def dispose(self):
        pass


class AnonymousFactory(SaslClientFactory):
    def create_sasl_client(self, mechanisms, authorization_id, protocol,
                           server_name, props, cbh):
        return AnonymousClient() if "ANONYMOUS" in mechanisms else None

    def get_mechanism_names(self, props):
        return ["ANONYMOUS"]


provider = Provider("Example")
provider.add_service(Service("SaslClientFactory", "ANONYMOUS", AnonymousFactory))

registry = SaslRegistry([provider], disabled_mechanisms="PLAIN")
with registry.create_sasl_client(["PLAIN", "ANONYMOUS"], None, "ldap",
                                 "host.example.com", {}, None) as client:
    response = client.evaluate_challenge(b"")
```

## What it does not do

- saslkit ships no concrete mechanisms, such as PLAIN, EXTERNAL, CRAM-MD5,
  DIGEST-MD5 or NTLM.
- It comes with no providers. A registry starts empty and knows only the
  providers you give it.
- There is no command-line tool.

## Tests

```
pip install .[test]
pytest
```