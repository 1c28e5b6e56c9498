"""Shared state and helpers for SASL client and server mechanism implementations."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any

from saslkit.exceptions import SaslException

__all__ = [
    "SASL_LOGGER_NAME",
    "QOP",
    "STRENGTH",
    "MAX_BUFFER",
    "RAW_SEND_SIZE",
    "MAX_SEND_BUF",
    "FINE",
    "FINER",
    "FINEST",
    "NO_PROTECTION",
    "INTEGRITY_ONLY_PROTECTION",
    "PRIVACY_PROTECTION",
    "LOW_STRENGTH",
    "MEDIUM_STRENGTH",
    "HIGH_STRENGTH",
    "DEFAULT_QOP",
    "QOP_TOKENS",
    "QOP_MASKS",
    "DEFAULT_STRENGTH",
    "STRENGTH_TOKENS",
    "STRENGTH_MASKS",
    "AbstractSaslImpl",
    "combine_masks",
    "find_preferred_mask",
    "parse_qop",
    "parse_strength",
    "parse_prop",
    "hex_dump",
    "trace_output",
    "network_byte_order_to_int",
    "int_to_network_byte_order",
]

SASL_LOGGER_NAME = "saslkit"

QOP = "javax.security.sasl.qop"
STRENGTH = "javax.security.sasl.strength"
MAX_BUFFER = "javax.security.sasl.maxbuffer"
RAW_SEND_SIZE = "javax.security.sasl.rawsendsize"
MAX_SEND_BUF = "javax.security.sasl.sendmaxbuffer"

# Fine-grained trace levels below DEBUG.
FINE = logging.DEBUG
FINER = 7
FINEST = 5

NO_PROTECTION = 1
INTEGRITY_ONLY_PROTECTION = 2
PRIVACY_PROTECTION = 4

LOW_STRENGTH = 1
MEDIUM_STRENGTH = 2
HIGH_STRENGTH = 4

DEFAULT_QOP = bytes([NO_PROTECTION])
QOP_TOKENS = ("auth-conf", "auth-int", "auth")
QOP_MASKS = bytes([PRIVACY_PROTECTION, INTEGRITY_ONLY_PROTECTION, NO_PROTECTION])

DEFAULT_STRENGTH = bytes([HIGH_STRENGTH, MEDIUM_STRENGTH, LOW_STRENGTH])
STRENGTH_TOKENS = ("low", "medium", "high")
STRENGTH_MASKS = bytes([LOW_STRENGTH, MEDIUM_STRENGTH, HIGH_STRENGTH])

_DEFAULT_RECV_MAX_BUF_SIZE = 0x00010000
_TOKEN_SEPARATORS = re.compile(r"[, \t\n]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

logger = logging.getLogger(SASL_LOGGER_NAME)


def _string_prop(props: Mapping[str, Any], key: str) -> str | None:
    value = props.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"property {key} must be a string, got {type(value).__name__}")
    return value


def _parse_int32(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    number = int(text)
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return number


def _int_prop(props: Mapping[str, Any], key: str, class_name: str | None, tag: str) -> int | None:
    prop = _string_prop(props, key)
    if prop is None:
        return None
    logger.log(FINE, "%s:%s: %s", class_name, tag, prop)
    try:
        return _parse_int32(prop)
    except ValueError:
        raise SaslException(
            f"Property must be string representation of integer: {key}"
        ) from None


class AbstractSaslImpl:
    """State common to SASL mechanism implementations: QOP, strength and buffer sizes."""

    def __init__(self, props: Mapping[str, Any] | None, class_name: str | None) -> None:
        self.completed = False
        self.privacy = False
        self.integrity = False
        self.send_max_buf_size = 0
        self.recv_max_buf_size = _DEFAULT_RECV_MAX_BUF_SIZE
        self.raw_send_size = 0
        self.my_class_name = class_name

        if props is None:
            self.qop = DEFAULT_QOP
            self.all_qop = NO_PROTECTION
            self.strength = STRENGTH_MASKS
            return

        prop = _string_prop(props, QOP)
        self.qop = parse_qop(prop)
        logger.log(FINE, "%s:SASLIMPL01:Preferred qop property: %s", class_name, prop)
        self.all_qop = combine_masks(self.qop)
        if logger.isEnabledFor(FINE):
            logger.log(FINE, "%s:SASLIMPL02:Preferred qop mask: %s", class_name, self.all_qop)
            if self.qop:
                logger.log(
                    FINE,
                    "%s:SASLIMPL03:Preferred qops : %s",
                    class_name,
                    "".join(f"{b} " for b in self.qop),
                )

        prop = _string_prop(props, STRENGTH)
        self.strength = parse_strength(prop)
        logger.log(FINE, "%s:SASLIMPL04:Preferred strength property: %s", class_name, prop)
        if logger.isEnabledFor(FINE) and self.strength:
            logger.log(
                FINE,
                "%s:SASLIMPL05:Cipher strengths: %s",
                class_name,
                "".join(f"{b} " for b in self.strength),
            )

        recv = _int_prop(props, MAX_BUFFER, class_name, "SASLIMPL06:Max receive buffer size")
        if recv is not None:
            self.recv_max_buf_size = recv
        send = _int_prop(props, MAX_SEND_BUF, class_name, "SASLIMPL07:Max send buffer size")
        if send is not None:
            self.send_max_buf_size = send

    def is_complete(self) -> bool:
        """Whether the authentication exchange has completed."""
        return self.completed

    def get_negotiated_property(self, prop_name: str) -> str | None:
        """Return a negotiated property as a string, or None for an unknown name.

        Raises RuntimeError if authentication has not completed.
        """
        if not self.completed:
            raise RuntimeError("SASL authentication not completed")
        if prop_name is None:
            raise TypeError("property name must not be None")
        if prop_name == QOP:
            if self.privacy:
                return "auth-conf"
            if self.integrity:
                return "auth-int"
            return "auth"
        if prop_name == MAX_BUFFER:
            return str(self.recv_max_buf_size)
        if prop_name == RAW_SEND_SIZE:
            return str(self.raw_send_size)
        if prop_name == MAX_SEND_BUF:
            return str(self.send_max_buf_size)
        return None


def combine_masks(masks: Sequence[int]) -> int:
    """Return the bitwise OR of all masks."""
    answer = 0
    for mask in masks:
        answer |= mask
    return answer


def find_preferred_mask(pref: int, masks: Sequence[int]) -> int:
    """Return the first mask that shares a bit with *pref*, or 0 if none does."""
    return next((mask for mask in masks if mask & pref), 0)


def parse_qop(
    qop: str | None,
    save_tokens: MutableSequence[str | None] | None = None,
    ignore: bool = False,
) -> bytes:
    """Parse a quality-of-protection list into masks in order of preference.

    When *save_tokens* is given, the token matching ``QOP_TOKENS[j]`` is stored
    at index ``j``.
    """
    if qop is None:
        return DEFAULT_QOP
    return parse_prop(QOP, qop, QOP_TOKENS, QOP_MASKS, save_tokens, ignore)


def parse_strength(strength: str | None) -> bytes:
    """Parse a cipher strength list into masks in order of preference."""
    if strength is None:
        return DEFAULT_STRENGTH
    return parse_prop(STRENGTH, strength, STRENGTH_TOKENS, STRENGTH_MASKS, None, False)


def parse_prop(
    prop_name: str,
    prop_val: str,
    vals: Sequence[str],
    masks: Sequence[int],
    tokens: MutableSequence[str | None] | None = None,
    ignore: bool = False,
) -> bytes:
    """Map the tokens of *prop_val* to masks, case-insensitively.

    At most ``len(vals)`` tokens are read; unused positions are zero. An
    unknown token raises SaslException unless *ignore* is set.
    """
    answer = bytearray(len(vals))
    lowered = [val.lower() for val in vals]
    i = 0
    for token in (t for t in _TOKEN_SEPARATORS.split(prop_val) if t):
        if i >= len(answer):
            break
        key = token.lower()
        j = next((j for j, val in enumerate(lowered) if val == key), None)
        if j is None:
            if not ignore:
                raise SaslException(f"Invalid token in {prop_name}: {prop_val}")
            continue
        answer[i] = masks[j]
        i += 1
        if tokens is not None:
            tokens[j] = token
    return bytes(answer)


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7A else "."


def hex_dump(data: bytes) -> str:
    """Render bytes as offset-prefixed lines of 16 hex bytes with an ASCII column."""
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset:offset + 16]
        parts = [f"{offset & 0xFFFF:04X}: "]
        for index in range(16):
            parts.append(f"{chunk[index]:02X} " if index < len(chunk) else "   ")
            if index == 7:
                parts.append("  ")
        parts.append(" ")
        parts.append("".join(_printable(b) for b in chunk))
        parts.append("\n")
        lines.append("".join(parts))
    return "".join(lines)


def trace_output(
    src_class: str,
    src_method: str,
    trace_tag: str,
    output: bytes | None,
    offset: int = 0,
    length: int | None = None,
) -> None:
    """Log a hex dump of *output*.

    At FINEST the whole buffer is dumped at FINEST; otherwise only the first
    16 bytes are dumped at FINER. The logged length is always the full length.
    """
    try:
        if length is None:
            length = 0 if output is None else len(output) - offset
        original_length = length
        if logger.isEnabledFor(FINEST):
            level = FINEST
        else:
            length = min(16, length)
            level = FINER
        if not logger.isEnabledFor(level):
            return
        if output is None:
            content = "NULL"
        else:
            content = hex_dump(bytes(output[offset:offset + max(length, 0)]))
        logger.log(
            level,
            "%s ( %d ): %s",
            trace_tag,
            original_length,
            content,
            extra={"sasl_source_class": src_class, "sasl_source_method": src_method},
        )
    except Exception as exc:
        logger.warning(
            "SASLIMPL09:Error generating trace output: %s",
            exc,
            extra={"sasl_source_class": src_class, "sasl_source_method": src_method},
        )


def network_byte_order_to_int(buf: bytes, start: int, count: int) -> int:
    """Read up to 4 big-endian bytes from *buf* at *start* as a signed 32-bit int."""
    if count > 4:
        raise ValueError("Cannot handle more than 4 bytes")
    if count <= 0:
        return 0
    if start < 0 or start + count > len(buf):
        raise IndexError("byte range is outside the buffer")
    answer = int.from_bytes(bytes(buf[start:start + count]), "big")
    if answer > _INT32_MAX:
        answer -= 2**32
    return answer


def int_to_network_byte_order(num: int, count: int) -> bytes:
    """Encode the low *count* bytes (at most 4) of *num* in big-endian order."""
    if count > 4:
        raise ValueError("Cannot handle more than 4 bytes")
    if count < 0:
        raise ValueError("count must not be negative")
    return (num & ((1 << (8 * count)) - 1)).to_bytes(count, "big")