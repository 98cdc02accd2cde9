import numpy as np

from .errors import InsufficientDataError


def check_k(k):
    """Return `k` as an int; anything but a positive integer is a ValueError."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")
    return int(k)


class KNNRegressor:
    """Mean-of-neighbours regressor with a deterministic tie-break.

    Neighbours are ranked by Euclidean distance; equal distances keep the
    order of the training rows (the earlier row wins).
    """

    def __init__(self, k=5, distance="euclidean"):
        k = check_k(k)
        if distance != "euclidean":
            raise ValueError("Only euclidean distance implemented in this simple version.")
        self.k = k
        self.distance = distance
        self.X = None
        self.y = None

    def fit(self, X, y):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if len(X) != len(y):
            raise ValueError(f"X has {len(X)} rows but y has {len(y)}")
        if len(X) < self.k:
            raise InsufficientDataError(
                f"need at least k={self.k} training rows, got {len(X)}"
            )
        self.X = X
        self.y = y
        return self

    def _pairwise_dist(self, A, B):
        # explicit differences keep symmetric ties exact
        diff = A[:, None, :] - B[None, :, :]             # [nA, nB, d]
        return np.sqrt(np.sum(diff * diff, axis=2))      # [nA, nB]

    def kneighbors(self, X):
        if self.X is None:
            raise RuntimeError("KNNRegressor.predict called before fit")
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        if X.shape[1] != self.X.shape[1]:
            raise ValueError(
                f"expected {self.X.shape[1]} features, got {X.shape[1]}"
            )
        D = self._pairwise_dist(X, self.X)               # [n_samples, n_train]
        # stable sort: equal distances resolve to the lower training index
        nn_idx = np.argsort(D, axis=1, kind="stable")[:, :self.k]
        nn_dist = np.take_along_axis(D, nn_idx, axis=1)
        return nn_dist, nn_idx

    def predict(self, X):
        _, nn_idx = self.kneighbors(X)
        return np.mean(self.y[nn_idx], axis=1)
