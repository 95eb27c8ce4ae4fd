#!/usr/bin/python3

import numpy as np

from datakiste.utils import random


def test_seeds():
    seed = random.seeds()
    assert isinstance(seed, int)
    assert 1 <= seed < 2_000_000_000

    seed_list = random.seeds(n_seeds=5, min_seed=10, max_seed=20)
    assert len(seed_list) == 5
    assert all(10 <= s < 20 for s in seed_list)

    assert random.seeds(n_seeds=3, fixed_seed=42) == random.seeds(n_seeds=3, fixed_seed=42)


def test_get_rng():
    rng, seed = random.get_rng(1234)
    assert seed == 1234
    assert isinstance(rng, np.random.Generator)
    assert rng.random() == np.random.default_rng(1234).random()

    rng, seed = random.get_rng()
    assert isinstance(seed, int)
    assert rng.random() == np.random.default_rng(seed).random()
