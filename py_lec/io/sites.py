"""Random site generation."""

from typing import List, Optional

import numpy as np


def random_sites(count: int, seed: Optional[int] = None,
                 low: float = -1.0, high: float = 1.0) -> List[tuple]:
    """
    Uniformly distributed sites in the square [low, high] x [low, high].

    Args:
        count: Number of sites
        seed: Seed for reproducible output
        low, high: Square bounds

    Returns:
        List of (x, y) sites
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if not low < high:
        raise ValueError("low must be smaller than high")

    rng = np.random.default_rng(seed)
    coords = rng.uniform(low, high, size=(count, 2))
    return [(x, y) for x, y in coords.tolist()]
