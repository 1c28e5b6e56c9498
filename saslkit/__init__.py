"""SASL framework: mechanism interfaces, provider registry, policies, QOP helpers and callbacks."""

__version__ = "0.1.0"

__all__ = ["abstract_impl", "callbacks", "exceptions", "interfaces", "policy", "sasl"]