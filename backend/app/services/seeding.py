"""Deterministic seeding and shuffling.

A class identity always hashes to the same 32-bit seed, so every section gets
its own day and subject ordering and re-generating a section reproduces it.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
HASH_BASIS = 2166136261
HASH_MULTIPLIER = 31

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2**32


def _utf16_code_units(value: str) -> list[int]:
    data = value.encode("utf-16-le")
    return [int.from_bytes(data[index : index + 2], "little") for index in range(0, len(data), 2)]


def seed_for(class_info: str) -> int:
    seed = HASH_BASIS
    for unit in _utf16_code_units(class_info):
        seed = (seed * HASH_MULTIPLIER + unit) & UINT32_MASK
        seed ^= seed >> 15
    return seed


class SeededRandom:
    def __init__(self, seed: int) -> None:
        self.state = seed & UINT32_MASK

    def next(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    def shuffle(self, items: Sequence[T]) -> list[T]:
        result = list(items)
        for index in range(len(result) - 1, 0, -1):
            swap_index = int(self.next() * (index + 1))
            result[index], result[swap_index] = result[swap_index], result[index]
        return result


def permute(seed: int, items: Sequence[T]) -> list[T]:
    return SeededRandom(seed).shuffle(items)
