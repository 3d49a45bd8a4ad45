# runtime/rng.py
from functools import cache
from zlib import crc32

import numpy as np


def _tag(s: str) -> int:
    return crc32(s.encode("utf-8")) & 0xFFFFFFFF


class RNGRegistry:
    """
    Named numpy Generators seeded from (seed, dataset, stream name).

    The network only draws from "index_order", the k-d tree insertion
    permutation, so a seed and dataset name pin down the tree shape.
    """

    def __init__(self, seed: int, *, dataset: str | int = 0):
        self.seed = seed & 0xFFFFFFFF
        self.dataset_tag = _tag(str(dataset))

    @cache
    def stream(self, name: str) -> np.random.Generator:
        ss = np.random.SeedSequence(entropy=[self.seed, self.dataset_tag, _tag(name)])
        return np.random.Generator(np.random.PCG64(ss))
