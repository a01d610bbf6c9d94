"""Dot products over 8-bit quantised blocks and half-precision vectors."""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from itertools import islice

import numpy as np

QK8_0 = 32
"""Number of quantised values held by one block."""

F16_STEP = 64
F16_EPR = 16
F16_ARR = F16_STEP // F16_EPR

_LANES = 8


@dataclass(frozen=True)
class BlockQ8_0:
    """A block of 32 signed 8-bit quants sharing one half-precision scale."""

    d: float
    qs: tuple[int, ...]

    def __post_init__(self) -> None:
        qs = tuple(int(q) for q in self.qs)
        if len(qs) != QK8_0:
            raise ValueError(f"a block holds {QK8_0} quants, got {len(qs)}")
        if any(not -128 <= q <= 127 for q in qs):
            raise ValueError("quants must lie in the signed 8-bit range")
        object.__setattr__(self, "qs", qs)
        object.__setattr__(self, "d", float(np.float16(self.d)))

    @property
    def _quants(self) -> np.ndarray:
        return np.array(self.qs, dtype=np.int32)

    @property
    def _scale(self) -> np.float32:
        return np.float32(self.d)


def _leading_blocks(
    n: int, x: Sequence[BlockQ8_0], y: Sequence[BlockQ8_0]
) -> Iterator[tuple[BlockQ8_0, BlockQ8_0]]:
    count = n // QK8_0
    if count > len(x) or count > len(y):
        raise ValueError(f"{n} elements need {count} blocks in each vector")
    return islice(zip(x, y), count)


def vec_dot_q8_naive(n: int, x: Sequence[BlockQ8_0], y: Sequence[BlockQ8_0]) -> float:
    """Dot product of the first ``n`` quantised elements, block by block."""
    result = np.float32(0.0)
    for a, b in _leading_blocks(n, x, y):
        tmp = np.float32(0.0)
        for qa, qb in zip(a.qs, b.qs):
            tmp += np.float32(qa * qb)
        result += tmp * a._scale * b._scale
    return float(result)


def vec_dot_q8_stdsimd(n: int, x: Sequence[BlockQ8_0], y: Sequence[BlockQ8_0]) -> float:
    """Dot product of the first ``n`` elements, summing quants four lanes at a time."""
    sumf = np.float32(0.0)
    for a, b in _leading_blocks(n, x, y):
        lanes = (a._quants * b._quants).reshape(QK8_0 // 4, 4)
        sumi = int(lanes.sum(axis=1).sum())
        sumf += np.float32(sumi) * a._scale * b._scale
    return float(sumf)


def _as_quants(values: Sequence[int], name: str) -> np.ndarray:
    quants = np.asarray(values, dtype=np.int32)
    if quants.shape != (QK8_0,):
        raise ValueError(f"{name} must hold {QK8_0} values")
    return quants


def mul_sum_i8_pairs(x: Sequence[int], y: Sequence[int]) -> np.ndarray:
    """Multiply 32 signed byte pairs and sum each run of four into 8 float lanes."""
    qx = _as_quants(x, "x")
    qy = _as_quants(y, "y")
    ax = np.abs(qx)
    sy = np.sign(qx) * qy
    return (ax * sy).reshape(_LANES, 4).sum(axis=1).astype(np.float32)


def hsum_float_8(x: Sequence[float]) -> float:
    """Horizontally add 8 floats, pairing lanes the way a 256-bit register does."""
    lanes = np.asarray(x, dtype=np.float32)
    if lanes.shape != (_LANES,):
        raise ValueError("expected exactly 8 lanes")
    res = lanes[4:] + lanes[:4]
    res = res[:2] + res[2:]
    return float(res[0] + res[1])


def bytes_from_nibbles_32(data: bytes) -> bytes:
    """Unpack 16 bytes into 32 values in 0..15: low nibbles first, then high nibbles."""
    packed = bytes(data[:16])
    if len(packed) < 16:
        raise ValueError("need at least 16 bytes of packed nibbles")
    return bytes(b & 0x0F for b in packed) + bytes(b >> 4 for b in packed)


def _block_product(a: BlockQ8_0, b: BlockQ8_0) -> tuple[np.float32, np.ndarray]:
    return a._scale * b._scale, mul_sum_i8_pairs(a.qs, b.qs)


def vec_dot_q8_paired(a: Sequence[BlockQ8_0], b: Sequence[BlockQ8_0]) -> float:
    """Dot product over whole block vectors, accumulating blocks two at a time."""
    if len(a) != len(b):
        raise ValueError("both vectors must hold the same number of blocks")
    acc0 = np.zeros(_LANES, dtype=np.float32)
    acc1 = np.zeros(_LANES, dtype=np.float32)
    pairs = list(zip(a, b))
    for (a0, b0), (a1, b1) in zip(pairs[0::2], pairs[1::2]):
        d0, q0 = _block_product(a0, b0)
        d1, q1 = _block_product(a1, b1)
        acc0 = d0 * q0 + acc0
        acc1 = d1 * q1 + acc1
    if len(pairs) % 2 == 1:
        d, q = _block_product(*pairs[-1])
        acc0 = d * q + acc0
    return hsum_float_8(acc0 + acc1)


def vec_dot_q8(x: Sequence[BlockQ8_0], y: Sequence[BlockQ8_0]) -> float:
    """Dot product over every block of ``x`` with a single lane accumulator."""
    if len(y) < len(x):
        raise ValueError("y holds fewer blocks than x")
    acc = np.zeros(_LANES, dtype=np.float32)
    for a, b in zip(x, y):
        d, q = _block_product(a, b)
        acc = d * q + acc
    return hsum_float_8(acc)


def vec_dot_f16(x: Sequence[float], y: Sequence[float]) -> float:
    """Dot product of two half-precision vectors, accumulated in single precision."""
    vx = np.asarray(x, dtype=np.float16).astype(np.float32)
    vy = np.asarray(y, dtype=np.float16).astype(np.float32)
    n = len(vx)
    if len(vy) < n:
        raise ValueError("y is shorter than x")
    vy = vy[:n]
    main = n & ~(F16_STEP - 1)

    sums = np.zeros((F16_ARR, F16_EPR), dtype=np.float32)
    chunks_x = vx[:main].reshape(-1, F16_ARR, F16_EPR)
    chunks_y = vy[:main].reshape(-1, F16_ARR, F16_EPR)
    for cx, cy in zip(chunks_x, chunks_y):
        sums = cx * cy + sums

    offset = F16_ARR >> 1
    while offset > 0:
        sums[:offset] = sums[:offset] + sums[offset : 2 * offset]
        offset >>= 1

    sumf = np.float32(sums[0].sum(dtype=np.float32))
    for a, b in zip(vx[main:], vy[main:]):
        sumf += a * b
    return float(sumf)


def gen_rand_block_q8_0() -> BlockQ8_0:
    """A block with a scale in [0, 2) and uniformly random quants."""
    d = random.uniform(0.0, 2.0)
    if d >= 2.0:
        d = 0.0
    qs = tuple(random.randint(-128, 127) for _ in range(QK8_0))
    return BlockQ8_0(d=d, qs=qs)


def gen_rand_block_f16(n: int) -> np.ndarray:
    """``n`` random half-precision values in [0, 1)."""
    return np.array([random.random() for _ in range(n)], dtype=np.float32).astype(np.float16)


def gen_rand_block_q8_0_vec(n: int) -> list[BlockQ8_0]:
    """A list of ``n`` random blocks."""
    return [gen_rand_block_q8_0() for _ in range(n)]