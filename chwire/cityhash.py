"""CityHash128 (version 1.0.2), the checksum used by compressed frames."""

from __future__ import annotations

_MASK = 0xFFFFFFFFFFFFFFFF

_K0 = 0xC3A5C85C97CB3127
_K1 = 0xB492B66FBE98F273
_K2 = 0x9AE16A3B2F90404F
_K3 = 0xC949D7C7509E6557
_KMUL = 0x9DDFEA08EB382D69


def _fetch64(data: bytes, pos: int) -> int:
    return int.from_bytes(data[pos:pos + 8], "little")


def _fetch32(data: bytes, pos: int) -> int:
    return int.from_bytes(data[pos:pos + 4], "little")


def _rotate(value: int, shift: int) -> int:
    if shift == 0:
        return value
    return ((value >> shift) | (value << (64 - shift))) & _MASK


def _shift_mix(value: int) -> int:
    return value ^ (value >> 47)


def _hash_len16(low: int, high: int) -> int:
    a = ((low ^ high) * _KMUL) & _MASK
    a ^= a >> 47
    b = ((high ^ a) * _KMUL) & _MASK
    b ^= b >> 47
    return (b * _KMUL) & _MASK


def _hash_len0to16(data: bytes, pos: int, length: int) -> int:
    if length > 8:
        a = _fetch64(data, pos)
        b = _fetch64(data, pos + length - 8)
        return _hash_len16(a, _rotate((b + length) & _MASK, length)) ^ b
    if length >= 4:
        a = _fetch32(data, pos)
        return _hash_len16((length + (a << 3)) & _MASK, _fetch32(data, pos + length - 4))
    if length > 0:
        a = data[pos]
        b = data[pos + (length >> 1)]
        c = data[pos + length - 1]
        y = a + (b << 8)
        z = length + (c << 2)
        mixed = ((y * _K2) & _MASK) ^ ((z * _K3) & _MASK)
        return (_shift_mix(mixed) * _K2) & _MASK
    return _K2


def _city_murmur(data: bytes, pos: int, length: int, a: int, b: int) -> tuple[int, int]:
    remaining = length - 16
    if remaining <= 0:
        a = (_shift_mix((a * _K1) & _MASK) * _K1) & _MASK
        c = (b * _K1 + _hash_len0to16(data, pos, length)) & _MASK
        d = _shift_mix((a + (_fetch64(data, pos) if length >= 8 else c)) & _MASK)
    else:
        c = _hash_len16((_fetch64(data, pos + length - 8) + _K1) & _MASK, a)
        d = _hash_len16((b + length) & _MASK, (c + _fetch64(data, pos + length - 16)) & _MASK)
        a = (a + d) & _MASK
        while True:
            a ^= (_shift_mix((_fetch64(data, pos) * _K1) & _MASK) * _K1) & _MASK
            a = (a * _K1) & _MASK
            b ^= a
            c ^= (_shift_mix((_fetch64(data, pos + 8) * _K1) & _MASK) * _K1) & _MASK
            c = (c * _K1) & _MASK
            d ^= c
            pos += 16
            remaining -= 16
            if remaining <= 0:
                break
    a = _hash_len16(a, c)
    b = _hash_len16(d, b)
    return a ^ b, _hash_len16(b, a)


def _weak_hash32(data: bytes, pos: int, a: int, b: int) -> tuple[int, int]:
    w = _fetch64(data, pos)
    x = _fetch64(data, pos + 8)
    y = _fetch64(data, pos + 16)
    z = _fetch64(data, pos + 24)
    a = (a + w) & _MASK
    b = _rotate((b + a + z) & _MASK, 21)
    c = a
    a = (a + x + y) & _MASK
    b = (b + _rotate(a, 44)) & _MASK
    return (a + z) & _MASK, (b + c) & _MASK


def _hash_with_seed(data: bytes, pos: int, length: int, x: int, y: int) -> tuple[int, int]:
    if length < 128:
        return _city_murmur(data, pos, length, x, y)

    z = (length * _K1) & _MASK
    v0 = (_rotate(y ^ _K1, 49) * _K1 + _fetch64(data, pos)) & _MASK
    v1 = (_rotate(v0, 42) * _K1 + _fetch64(data, pos + 8)) & _MASK
    w0 = (_rotate((y + z) & _MASK, 35) * _K1 + x) & _MASK
    w1 = (_rotate((x + _fetch64(data, pos + 88)) & _MASK, 53) * _K1) & _MASK

    while True:
        for _ in range(2):
            x = (_rotate((x + y + v0 + _fetch64(data, pos + 16)) & _MASK, 37) * _K1) & _MASK
            y = (_rotate((y + v1 + _fetch64(data, pos + 48)) & _MASK, 42) * _K1) & _MASK
            x ^= w1
            y ^= v0
            z = _rotate(z ^ w0, 33)
            v0, v1 = _weak_hash32(data, pos, (v1 * _K1) & _MASK, (x + w0) & _MASK)
            w0, w1 = _weak_hash32(data, pos + 32, (z + w1) & _MASK, y)
            z, x = x, z
            pos += 64
        length -= 128
        if length < 128:
            break

    y = (y + _rotate(w0, 37) * _K0 + z) & _MASK
    x = (x + _rotate((v0 + z) & _MASK, 49) * _K0) & _MASK

    tail_done = 0
    while tail_done < length:
        tail_done += 32
        y = (_rotate((y - x) & _MASK, 42) * _K0 + v1) & _MASK
        w0 = (w0 + _fetch64(data, pos + length - tail_done + 16)) & _MASK
        x = (_rotate(x, 49) * _K0 + w0) & _MASK
        w0 = (w0 + v0) & _MASK
        v0, v1 = _weak_hash32(data, pos + length - tail_done, v0, v1)

    x = _hash_len16(x, v0)
    y = _hash_len16(y, w0)
    return (
        (_hash_len16((x + v1) & _MASK, w1) + y) & _MASK,
        _hash_len16((x + w1) & _MASK, (y + v1) & _MASK),
    )


def city_hash128(data: bytes) -> tuple[int, int]:
    """Hash bytes to 128 bits, returned as (low, high) 64-bit halves."""
    data = bytes(data)
    size = len(data)
    if size >= 16:
        return _hash_with_seed(data, 16, size - 16, _fetch64(data, 0) ^ _K3, _fetch64(data, 8))
    if size >= 8:
        return _hash_with_seed(
            data, 0, 0,
            _fetch64(data, 0) ^ ((size * _K0) & _MASK),
            _fetch64(data, size - 8) ^ _K1,
        )
    return _hash_with_seed(data, 0, size, _K0, _K1)