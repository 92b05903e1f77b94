"""Tests for instruction decoding."""

import jax.numpy as jnp
from chip8vm import decode


def test_decode_fields():
    """All operand fields are extracted from the instruction word."""
    decoded = decode(0xD12F)
    assert decoded.word == 0xD12F
    assert decoded.group == 0xD
    assert decoded.x == 0x1
    assert decoded.y == 0x2
    assert decoded.n == 0xF
    assert decoded.nn == 0x2F
    assert decoded.nnn == 0x12F


def test_decode_zero():
    decoded = decode(0x0000)
    assert (decoded.group, decoded.x, decoded.y, decoded.n, decoded.nn, decoded.nnn) == (0, 0, 0, 0, 0, 0)


def test_decode_array():
    decoded = decode(jnp.astype(0x8AB4, jnp.uint16))
    assert decoded.group == 0x8
    assert decoded.x == 0xA
    assert decoded.y == 0xB
    assert decoded.n == 0x4
