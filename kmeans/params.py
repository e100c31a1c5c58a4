"""
Run configuration shared by the sequential and parallel engines.
"""

from dataclasses import dataclass
from typing import Optional

from .seeding import RandomState

DEFAULT_MAX_ITERATIONS = 300
DEFAULT_TOLERANCE = 1e-4


@dataclass
class ClusteringParameters:
    """Parameters for a single k-means run."""
    k: int
    max_iterations: int = DEFAULT_MAX_ITERATIONS  # hard cap on Lloyd iterations
    tolerance: float = DEFAULT_TOLERANCE  # max centroid movement still counted as converged
    random_seed: RandomState = None  # int seed or numpy Generator
    n_jobs: Optional[int] = None  # parallel engine only; None means os.cpu_count()

    def __post_init__(self):
        """Reject settings that would make the run meaningless."""
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.n_jobs is not None and self.n_jobs < 1:
            raise ValueError(f"n_jobs must be >= 1, got {self.n_jobs}")
