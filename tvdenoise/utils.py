# -*- coding: utf-8 -*-
"""Helper functions for tvdenoise.

Created on October 16, 2026
@author: tvdenoise developers

"""

import numpy as np

# the error classes live in _validation to avoid circular imports
from ._validation import (  # noqa: F401
    InvalidArgumentError, SizeLimitExceededError, _check_array, _check_lam
)


class ParameterWarning(UserWarning):
    """
    Warning issued when a parameter value is outside of the recommended range.

    For cases where a parameter value is valid and will not cause errors, but is
    outside of the recommended range of values and as a result may give results
    that would otherwise be hard to diagnose.
    """


class SortingWarning(UserWarning):
    """Warning issued when the input x-values are not sorted even though `assume_sorted` is True."""


def total_variation(data):
    """
    Calculates the total variation, ``sum(abs(data[i + 1] - data[i]))``, of the input.

    Parameters
    ----------
    data : array-like, shape (N,)
        The sequential values.

    Returns
    -------
    float
        The total variation. Is 0 for inputs with less than two values.

    """
    y = _check_array(data, dtype=float)
    return float(np.abs(np.diff(y)).sum())


def tvd_objective(denoised, data, lam):
    """
    Calculates the objective function minimized by total variation denoising.

    The objective is ``sum((denoised - data)**2) + lam * total_variation(denoised)``.

    Parameters
    ----------
    denoised : array-like, shape (N,)
        The candidate solution.
    data : array-like, shape (N,)
        The measured data.
    lam : float
        The total variation penalty. Must be greater than or equal to 0.

    Returns
    -------
    float
        The value of the objective function.

    Raises
    ------
    InvalidArgumentError
        Raised if `denoised` and `data` have different lengths.

    """
    x = _check_array(denoised, dtype=float)
    y = _check_array(data, dtype=float)
    if x.shape != y.shape:
        raise InvalidArgumentError(
            f'length mismatch; denoised has length {x.shape[0]} but data has length {y.shape[0]}'
        )
    lam = _check_lam(lam)
    return float(np.sum((x - y)**2) + lam * np.abs(np.diff(x)).sum())


def segment_bounds(data):
    """
    Finds the boundaries of the constant segments within the input.

    A segment is a maximal run of consecutive, exactly equal values.

    Parameters
    ----------
    data : array-like, shape (N,)
        The sequential values, typically the output of :func:`tvdenoise.denoise.tvd`.

    Returns
    -------
    numpy.ndarray, shape (M + 1,)
        The indices bounding the M segments, such that segment ``i`` covers
        ``data[bounds[i]:bounds[i + 1]]``. Starts with 0 and ends with N. Is
        just ``[0]`` for empty inputs.

    """
    y = _check_array(data)
    jumps = np.flatnonzero(y[1:] != y[:-1]) + 1
    if y.shape[0]:
        bounds = np.concatenate(([0], jumps, [y.shape[0]]))
    else:
        bounds = np.array([0])

    return bounds.astype(np.intp, copy=False)


def num_segments(data):
    """
    Counts the number of constant segments within the input.

    Parameters
    ----------
    data : array-like, shape (N,)
        The sequential values.

    Returns
    -------
    int
        The number of maximal runs of equal values. Is 0 for empty inputs.

    """
    return len(segment_bounds(data)) - 1


def lam_max(data):
    """
    Calculates the smallest penalty for which the denoised output is constant.

    For any ``lam >= lam_max(data)``, total variation denoising outputs
    ``mean(data)`` at every point.

    Parameters
    ----------
    data : array-like, shape (N,)
        The measured data.

    Returns
    -------
    float
        The critical penalty value. Is 0 for inputs with less than two values.

    Notes
    -----
    The constant solution is optimal if and only if the dual variables,
    ``-2 * cumsum(data - mean(data))``, all lie within ``[-lam, lam]``, which
    gives ``lam_max = 2 * max(abs(cumsum(data - mean(data))[:-1]))``.

    """
    y = _check_array(data, dtype=float, check_finite=True)
    if y.shape[0] < 2:
        return 0.
    pull = np.cumsum(y - y.mean())[:-1]
    return float(2 * np.abs(pull).max())


def log_lam_grid(min_exp=-2, max_exp=3, step=0.1):
    """
    Creates a logarithmically spaced grid of penalty values.

    Parameters
    ----------
    min_exp : float, optional
        The exponent of the smallest penalty, such that the first value is
        ``10**min_exp``. Default is -2.
    max_exp : float, optional
        The exponent of the largest penalty. Default is 3.
    step : float, optional
        The spacing between consecutive exponents. Default is 0.1.

    Returns
    -------
    numpy.ndarray
        The penalty values, ``10**min_exp, 10**(min_exp + step), ..., 10**max_exp``.
        Using the defaults gives 51 values from 0.01 to 1000.

    Raises
    ------
    InvalidArgumentError
        Raised if `step` is not positive or if `max_exp` is less than `min_exp`.

    """
    if not step > 0:
        raise InvalidArgumentError('step must be greater than 0')
    elif max_exp < min_exp:
        raise InvalidArgumentError('max_exp must be greater than or equal to min_exp')
    # round to avoid arange's floating point issues with the endpoint
    num_values = int(round((max_exp - min_exp) / step)) + 1
    return 10.0**np.linspace(min_exp, min_exp + (num_values - 1) * step, num_values)


def _inverted_sort(sort_order):
    """
    Finds the indices that invert a sorting.

    Given an array `a`, and the indices that sort the array, `sort_order`, the
    inverted sort is defined such that it gives the original index order of `a`,
    ie. ``a == a[sort_order][inverted_order]``.

    Parameters
    ----------
    sort_order : numpy.ndarray, shape (N,)
        The original index array for sorting.

    Returns
    -------
    inverted_order : numpy.ndarray, shape (N,)
        The array that inverts the sort given by `sort_order`.

    """
    num_points = len(sort_order)
    inverted_order = np.empty(num_points, dtype=np.intp)
    inverted_order[sort_order] = np.arange(num_points, dtype=np.intp)

    return inverted_order


def _determine_sorts(data):
    """
    Provides the arrays for sorting and inverting sorting, if needed.

    Parameters
    ----------
    data : numpy.ndarray, shape (N,)
        The array to potentially sort.

    Returns
    -------
    output : tuple(numpy.ndarray, numpy.ndarray) or tuple(None, None)
        A tuple of the index array for sorting the input array and the array
        that inverts that sorting. If the input array is already sorted, then
        the output will be (None, None).

    """
    # mergesort is stable, so samples sharing an x-value keep their input order
    sort_order = data.argsort(kind='mergesort')
    if (sort_order[1:] > sort_order[:-1]).all():
        output = (None, None)
    else:
        output = (sort_order, _inverted_sort(sort_order))

    return output


def _sort_array(array, sort_order=None):
    """
    Sorts the one dimensional input array only if given a non-None sorting order.

    Parameters
    ----------
    array : numpy.ndarray, shape (N,)
        The array to sort.
    sort_order : numpy.ndarray, optional
        The array defining the sort order for the input array. Default is None, which
        will not sort the input.

    Returns
    -------
    numpy.ndarray, shape (N,)
        The input array after optionally sorting.

    """
    if sort_order is None:
        return array
    return array[sort_order]
