"""Checks of mechanism security characteristics against SASL policy properties."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import IntFlag
from typing import Any

__all__ = [
    "POLICY_NOPLAINTEXT",
    "POLICY_NOACTIVE",
    "POLICY_NODICTIONARY",
    "POLICY_NOANONYMOUS",
    "POLICY_FORWARD_SECRECY",
    "POLICY_PASS_CREDENTIALS",
    "PolicyFlag",
    "check_policy",
    "filter_mechs",
]

POLICY_NOPLAINTEXT = "javax.security.sasl.policy.noplaintext"
POLICY_NOACTIVE = "javax.security.sasl.policy.noactive"
POLICY_NODICTIONARY = "javax.security.sasl.policy.nodictionary"
POLICY_NOANONYMOUS = "javax.security.sasl.policy.noanonymous"
POLICY_FORWARD_SECRECY = "javax.security.sasl.policy.forward"
POLICY_PASS_CREDENTIALS = "javax.security.sasl.policy.credentials"


class PolicyFlag(IntFlag):
    """Security characteristics that a mechanism provides."""

    NOPLAINTEXT = 1
    NOACTIVE = 2
    NODICTIONARY = 4
    FORWARD_SECRECY = 8
    NOANONYMOUS = 16
    PASS_CREDENTIALS = 512


_POLICY_REQUIREMENTS = (
    (POLICY_NOPLAINTEXT, PolicyFlag.NOPLAINTEXT),
    (POLICY_NOACTIVE, PolicyFlag.NOACTIVE),
    (POLICY_NODICTIONARY, PolicyFlag.NODICTIONARY),
    (POLICY_NOANONYMOUS, PolicyFlag.NOANONYMOUS),
    (POLICY_FORWARD_SECRECY, PolicyFlag.FORWARD_SECRECY),
    (POLICY_PASS_CREDENTIALS, PolicyFlag.PASS_CREDENTIALS),
)


def _is_true(props: Mapping[str, Any], key: str) -> bool:
    value = props.get(key)
    if value is None:
        return False
    if not isinstance(value, str):
        raise TypeError(f"policy property {key} must be a string, got {type(value).__name__}")
    return value.lower() == "true"


def check_policy(flags: int, props: Mapping[str, Any] | None) -> bool:
    """Return whether a mechanism with *flags* meets every policy set to "true" in *props*."""
    if props is None:
        return True
    return all(
        not _is_true(props, key) or (flags & flag) != 0
        for key, flag in _POLICY_REQUIREMENTS
    )


def filter_mechs(
    mechs: Sequence[str],
    policies: Sequence[int],
    props: Mapping[str, Any] | None,
) -> list[str]:
    """Return the mechanisms whose policy flags satisfy *props*, in their original order.

    ``policies[i]`` holds the flags of ``mechs[i]``.
    """
    if props is None:
        return list(mechs)
    if len(policies) < len(mechs):
        raise IndexError("each mechanism needs a policy entry")
    return [mech for mech, flags in zip(mechs, policies) if check_policy(flags, props)]