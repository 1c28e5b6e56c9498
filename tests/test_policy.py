import pytest

from saslkit.policy import (
    POLICY_FORWARD_SECRECY,
    POLICY_NOACTIVE,
    POLICY_NOANONYMOUS,
    POLICY_NODICTIONARY,
    POLICY_NOPLAINTEXT,
    POLICY_PASS_CREDENTIALS,
    PolicyFlag,
    check_policy,
    filter_mechs,
)

ALL_KEYS = [
    (POLICY_NOPLAINTEXT, PolicyFlag.NOPLAINTEXT),
    (POLICY_NOACTIVE, PolicyFlag.NOACTIVE),
    (POLICY_NODICTIONARY, PolicyFlag.NODICTIONARY),
    (POLICY_NOANONYMOUS, PolicyFlag.NOANONYMOUS),
    (POLICY_FORWARD_SECRECY, PolicyFlag.FORWARD_SECRECY),
    (POLICY_PASS_CREDENTIALS, PolicyFlag.PASS_CREDENTIALS),
]


def test_no_props_always_passes():
    assert check_policy(0, None) is True


def test_empty_props_passes():
    assert check_policy(0, {}) is True


@pytest.mark.parametrize("key,flag", ALL_KEYS)
def test_required_policy_needs_flag(key, flag):
    props = {key: "true"}
    assert check_policy(0, props) is False
    assert check_policy(flag, props) is True


@pytest.mark.parametrize("key,flag", ALL_KEYS)
def test_policy_value_is_case_insensitive(key, flag):
    assert check_policy(0, {key: "TRUE"}) is False


@pytest.mark.parametrize("key,flag", ALL_KEYS)
def test_non_true_value_does_not_require_flag(key, flag):
    assert check_policy(0, {key: "false"}) is True
    assert check_policy(0, {key: "yes"}) is True


def test_all_policies_require_all_flags():
    props = {key: "true" for key, _ in ALL_KEYS}
    every = PolicyFlag(0)
    for _, flag in ALL_KEYS:
        every |= flag
    assert check_policy(every, props) is True
    assert check_policy(every & ~PolicyFlag.NOANONYMOUS, props) is False


def test_non_string_value_raises():
    with pytest.raises(TypeError):
        check_policy(0, {POLICY_NOPLAINTEXT: True})


def test_filter_mechs_without_props_copies():
    mechs = ["PLAIN", "CRAM-MD5"]
    result = filter_mechs(mechs, [0, PolicyFlag.NOPLAINTEXT], None)
    assert result == mechs
    assert result is not mechs


def test_filter_mechs_keeps_order_of_passing():
    mechs = ["DIGEST-MD5", "PLAIN", "CRAM-MD5"]
    policies = [
        PolicyFlag.NOPLAINTEXT | PolicyFlag.NOANONYMOUS,
        PolicyFlag.NOANONYMOUS,
        PolicyFlag.NOPLAINTEXT | PolicyFlag.NOANONYMOUS,
    ]
    props = {POLICY_NOPLAINTEXT: "true"}
    assert filter_mechs(mechs, policies, props) == ["DIGEST-MD5", "CRAM-MD5"]


def test_filter_mechs_with_empty_props_keeps_all():
    mechs = ["A", "B"]
    assert filter_mechs(mechs, [0, 0], {}) == mechs


def test_filter_mechs_missing_policy_raises():
    with pytest.raises(IndexError):
        filter_mechs(["A", "B"], [0], {})