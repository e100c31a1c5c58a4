"""
Exceptions raised by the k-means engines.
"""


class InvalidClusterCount(ValueError):
    """Raised when the requested cluster count cannot be satisfied.

    This happens when k is not a positive integer, when k exceeds the
    number of points, or when the point set is empty.
    """

    def __init__(self, k, n_points: int):
        self.k = k
        self.n_points = n_points
        if n_points == 0:
            msg = f"Cannot form {k} clusters from an empty point set"
        else:
            msg = f"Invalid cluster count {k!r}: expected 1 <= k <= {n_points}"
        super().__init__(msg)
