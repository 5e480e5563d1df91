"""Statistics over the history of a simulation run.

A history is a (frames, height, width) stack of 0/1 arrays, as returned by
``World.run(steps, record_history=True)`` once stacked.
"""

import zlib
from dataclasses import asdict, dataclass
from typing import Dict, Optional

import numpy as np
from scipy import ndimage

from .automaton import Rule
from .config import DEFAULT_DENSITY
from .world import World

# A step counts as active when more than this fraction of cells flips
ACTIVITY_THRESHOLD = 0.001


@dataclass
class RunMetrics:
    """Averages over the trials of one rule."""
    lambda_param: float  # Fraction of live table entries
    spatial_entropy: float  # Binary entropy of the final live fraction
    temporal_change: float  # Mean fraction of cells flipping per step
    compression_ratio: float  # zlib size / raw size of the final frame
    population_variation: float  # Coefficient of variation of population
    activity_persistence: float  # Fraction of steps counted as active
    cluster_count: float  # 8-connected live components in the final frame
    final_density: float

    def to_dict(self) -> Dict:
        return asdict(self)


def live_entropy(frame: np.ndarray) -> float:
    """Entropy in bits of a cell picked at random being alive."""
    if frame.size == 0:
        return 0.0
    p = float(frame.mean())
    if p == 0.0 or p == 1.0:
        return 0.0
    return float(-(p * np.log2(p) + (1 - p) * np.log2(1 - p)))


def compressed_fraction(frame: np.ndarray) -> float:
    raw = np.ascontiguousarray(frame, dtype=np.uint8).tobytes()
    if not raw:
        return 0.0
    return len(zlib.compress(raw, 9)) / len(raw)


def flip_fractions(history) -> np.ndarray:
    """Fraction of cells that changed at each step; one value per transition."""
    history = np.asarray(history)
    if len(history) < 2 or history[0].size == 0:
        return np.zeros(0)
    return (history[1:] != history[:-1]).mean(axis=(1, 2))


def population_cv(history) -> float:
    """Standard deviation of the population over its mean (0 for dead runs)."""
    history = np.asarray(history)
    if len(history) < 2:
        return 0.0
    populations = history.reshape(len(history), -1).sum(axis=1)
    mean = populations.mean()
    if mean == 0:
        return 0.0
    return float(populations.std() / mean)


def active_fraction(history, threshold: float = ACTIVITY_THRESHOLD) -> float:
    flips = flip_fractions(history)
    if flips.size == 0:
        return 0.0
    return float((flips > threshold).mean())


def cluster_count(frame: np.ndarray) -> int:
    """Number of 8-connected live components."""
    _, num_clusters = ndimage.label(frame, structure=np.ones((3, 3), dtype=int))
    return int(num_clusters)


def summarize(history, rule: Rule) -> RunMetrics:
    """Statistics of a single run."""
    history = np.asarray(history)
    final = history[-1]
    flips = flip_fractions(history)
    return RunMetrics(
        lambda_param=rule.lambda_parameter(),
        spatial_entropy=live_entropy(final),
        temporal_change=float(flips.mean()) if flips.size else 0.0,
        compression_ratio=compressed_fraction(final),
        population_variation=population_cv(history),
        activity_persistence=active_fraction(history),
        cluster_count=cluster_count(final),
        final_density=float(final.mean()) if final.size else 0.0,
    )


def evaluate_rule(
    rule: Rule,
    width: int = 64,
    height: int = 64,
    steps: int = 100,
    density: float = DEFAULT_DENSITY,
    num_trials: int = 3,
    rng: Optional[np.random.Generator] = None,
) -> RunMetrics:
    """Run ``num_trials`` randomized worlds under ``rule`` and average their statistics."""
    if num_trials < 1:
        raise ValueError("num_trials must be at least 1")
    if rng is None:
        rng = np.random.default_rng()

    runs = []
    for _ in range(num_trials):
        world = World(width, height, rule)
        world.randomize(rng=rng, density=density)
        runs.append(summarize(world.run(steps, record_history=True), rule).to_dict())

    return RunMetrics(**{key: float(np.mean([run[key] for run in runs])) for key in runs[0]})
