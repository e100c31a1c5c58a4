"""
Lloyd's k-means clustering with k-means++ seeding, sequential and multi-threaded.
"""

from .exceptions import InvalidClusterCount
from .kmeans import KMeans
from .lloyd import kmeans as sequential_kmeans
from .parallel import kmeans as parallel_kmeans
from .params import ClusteringParameters
from .points import PointSet
from .seeding import kmeans_plus_plus
from .version import __version__

__all__ = [
    "KMeans",
    "PointSet",
    "ClusteringParameters",
    "InvalidClusterCount",
    "sequential_kmeans",
    "parallel_kmeans",
    "kmeans_plus_plus",
    "__version__",
]
