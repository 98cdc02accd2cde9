"""Exceptions raised by the salary analysis."""


class InsufficientDataError(ValueError):
    """Fewer rows than a leave-one-out k-NN fit needs (n must exceed k)."""


class InvalidFeatureError(ValueError):
    """A feature or target value is missing, non-numeric or not a known column."""


class DataFormatError(ValueError):
    """An input table lacks a column the join or the salary parsing relies on."""
