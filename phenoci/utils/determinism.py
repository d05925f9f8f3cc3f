from __future__ import annotations

from typing import List, Optional, Union

import numpy as np

RandomSource = Union[None, int, np.random.SeedSequence, np.random.Generator]


def make_rng(random_source: RandomSource = None) -> np.random.Generator:
    """Return a NumPy Generator for the given random source.

    - A Generator is returned unchanged, so the caller keeps ownership of
      its stream.
    - An int or SeedSequence seeds a fresh PCG64 generator.
    - None draws fresh OS entropy.

    Global NumPy/Python random state is never read or modified.
    """
    if isinstance(random_source, np.random.Generator):
        return random_source
    if isinstance(random_source, (bool, np.bool_)):
        raise TypeError("random source must be a Generator, an int seed or None, not bool")
    return np.random.default_rng(random_source)


def spawn_streams(rng: np.random.Generator, count: int) -> List[np.random.Generator]:
    """Derive `count` independent child generators from `rng`.

    Entropy for the children is drawn from `rng` itself, so the children are
    reproducible whenever the parent is seeded, and consuming them in any
    order (or on any thread) gives the same per-child streams.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    entropy = rng.integers(0, 2**63 - 1, size=4, dtype=np.int64).tolist()
    children = np.random.SeedSequence(entropy).spawn(count)
    return [np.random.default_rng(child) for child in children]


def describe_source(random_source: RandomSource) -> Optional[str]:
    """Short label of a random source for debug logs."""
    if random_source is None:
        return None
    if isinstance(random_source, np.random.Generator):
        return type(random_source.bit_generator).__name__
    return repr(random_source)
