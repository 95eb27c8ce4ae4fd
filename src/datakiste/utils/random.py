"""Random seeds and generators for fuzzy re-binning."""

import secrets

import numpy as np

# Seeds are drawn from [_MIN_SEED, _MAX_SEED)
_MIN_SEED = 1
_MAX_SEED = 2_000_000_000


def seeds(n_seeds=1, min_seed=_MIN_SEED, max_seed=_MAX_SEED, fixed_seed=None):
    """
    Draw random seeds.

    The seeds are derived from a numpy SeedSequence initialized with 128 bits of
    system entropy, or with fixed_seed for reproducible seeds.

    Parameters
    ----------
    n_seeds : int
        Number of seeds.
    min_seed : int
        Smallest possible seed.
    max_seed : int
        Upper limit (exclusive).
    fixed_seed : int or None
        Entropy for reproducible seeds.

    Returns
    -------
    int or list of int
        One seed for n_seeds=1, a list of seeds otherwise.
    """
    sequence = np.random.SeedSequence(secrets.randbits(128) if fixed_seed is None else fixed_seed)
    drawn = [
        int(seed)
        for seed in np.random.default_rng(sequence).integers(min_seed, max_seed, size=n_seeds)
    ]
    return drawn[0] if n_seeds == 1 else drawn


def get_rng(seed=None):
    """
    Return a numpy random generator and the seed used to create it.

    Parameters
    ----------
    seed : int or None
        Seed. A new seed is drawn if not given.

    Returns
    -------
    numpy.random.Generator, int
        Random generator and seed.
    """
    seed = seeds() if seed is None else int(seed)
    return np.random.default_rng(seed), seed
