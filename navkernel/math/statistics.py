"""
Batch and incremental Gaussian statistics.

Batch helpers take any iterable of elements plus an optional ``getter`` that
extracts the vector of interest from each element, e.g.::

    mean, cov = compute_mean_and_cov(imu_samples, lambda imu: imu.acce)

The incremental helpers merge two summaries (count, mean, covariance) into
the summary of the union of their samples without revisiting raw data.
"""

import math
from typing import Any, Callable, Iterable, Optional, Tuple

import numpy as np

from ..errors import InvalidArgument

Getter = Optional[Callable[[Any], Any]]


def _collect(data: Iterable, getter: Getter, min_len: int = 2) -> np.ndarray:
    values = [getter(d) for d in data] if getter is not None else list(data)
    if len(values) < min_len:
        raise InvalidArgument(
            f"need at least {min_len} samples, got {len(values)}")
    return np.asarray(values, dtype=float).reshape(len(values), -1)


def compute_mean_and_cov_diag(data: Iterable,
                              getter: Getter = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Mean and per-component variance of the samples.

    Args:
        data: Iterable of samples
        getter: Extracts a vector from each sample (identity if None)

    Returns:
        (mean, cov_diag), variance uses the n-1 denominator

    Raises:
        InvalidArgument: fewer than 2 samples
    """
    values = _collect(data, getter)
    mean = values.mean(axis=0)
    cov_diag = ((values - mean) ** 2).sum(axis=0) / (len(values) - 1)
    return mean, cov_diag


def compute_mean_and_cov(data: Iterable,
                         getter: Getter = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Mean and full covariance matrix of the samples.

    Args:
        data: Iterable of samples
        getter: Extracts a vector from each sample (identity if None)

    Returns:
        (mean, cov), covariance uses the n-1 denominator

    Raises:
        InvalidArgument: fewer than 2 samples
    """
    values = _collect(data, getter)
    mean = values.mean(axis=0)
    centered = values - mean
    cov = centered.T @ centered / (len(values) - 1)
    return mean, cov


def compute_median(data: Iterable, getter: Getter = None) -> float:
    """Upper median of scalar samples (element n // 2 in sorted order)."""
    values = _collect(data, getter).reshape(-1)
    return float(np.partition(values, len(values) // 2)[len(values) // 2])


def update_mean_and_cov(hist_m: int, hist_mean, hist_var,
                        curr_n: int, curr_mean, curr_var,
                        unbiased: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Merge two Gaussian summaries with the pooled-variance law.

        mean = (m * mean_h + n * mean_c) / (m + n)
        var  = (m * (var_h + d_h d_h^T) + n * (var_c + d_c d_c^T)) / (m + n)

    where d_h, d_c are the offsets of each mean from the merged mean.

    Args:
        hist_m: Number of historical samples
        hist_mean: Historical mean
        hist_var: Historical covariance
        curr_n: Number of current samples
        curr_mean: Current mean
        curr_var: Current covariance
        unbiased: Covariances in and out use the n-1 denominator (as returned
            by ``compute_mean_and_cov``) instead of 1/n

    Returns:
        (new_mean, new_var)

    Raises:
        InvalidArgument: a count is not positive
    """
    if hist_m <= 0 or curr_n <= 0:
        raise InvalidArgument(f"counts must be positive, got {hist_m} and {curr_n}")

    hist_mean = np.asarray(hist_mean, dtype=float).reshape(-1)
    curr_mean = np.asarray(curr_mean, dtype=float).reshape(-1)
    hist_var = np.asarray(hist_var, dtype=float)
    curr_var = np.asarray(curr_var, dtype=float)
    if unbiased:
        hist_var = hist_var * (hist_m - 1) / hist_m
        curr_var = curr_var * (curr_n - 1) / curr_n

    total = hist_m + curr_n
    new_mean = (hist_m * hist_mean + curr_n * curr_mean) / total
    d_hist = hist_mean - new_mean
    d_curr = curr_mean - new_mean
    new_var = (hist_m * (hist_var + np.outer(d_hist, d_hist)) +
               curr_n * (curr_var + np.outer(d_curr, d_curr))) / total

    if unbiased:
        new_var = new_var * total / (total - 1)
    return new_mean, new_var


def history_mean_and_var(hist_n: int, hist_mean: float, hist_var2: float,
                         curr_n: int, curr_mean: float,
                         curr_var2: float) -> Tuple[float, float]:
    """
    Scalar form of the pooled-variance merge, for running statistics.

    Returns:
        (new_mean, new_var2)
    """
    if hist_n + curr_n <= 0:
        raise InvalidArgument("at least one sample is required")
    new_mean = (hist_n * hist_mean + curr_n * curr_mean) / (hist_n + curr_n)
    new_var2 = (hist_n * (hist_var2 + (new_mean - hist_mean) ** 2) +
                curr_n * (curr_var2 + (new_mean - curr_mean) ** 2)) / (hist_n + curr_n)
    return new_mean, new_var2


def gaussian_pdf(mean, cov, x) -> float:
    """
    Multivariate normal density at ``x``.

    The covariance must be non-singular; a near-zero determinant is not
    guarded against and yields an unbounded density.
    """
    mean = np.asarray(mean, dtype=float).reshape(-1)
    x = np.asarray(x, dtype=float).reshape(-1)
    cov = np.asarray(cov, dtype=float)
    dim = mean.shape[0]

    det = abs(np.linalg.det(cov))
    diff = x - mean
    exp_part = float(diff @ np.linalg.inv(cov) @ diff)
    return math.exp(-0.5 * exp_part) / ((2 * math.pi) ** (dim / 2) * math.sqrt(det))
