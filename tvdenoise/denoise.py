# -*- coding: utf-8 -*-
"""Exact total variation denoising of one dimensional signals.

Created on October 16, 2026
@author: tvdenoise developers


The function _condat_tvd was adapted from the C implementation of the direct algorithm
described in:

Condat, L. A Direct Algorithm for 1-D Total Variation Denoising. IEEE Signal
Processing Letters, 2013, 20(11), 1054-1057.

"""

import numpy as np
from numba import jit

from ._algorithm_setup import _Algorithm, _class_wrapper
from ._validation import _check_lam, _check_option
from .utils import num_segments, tvd_objective


class _Denoise(_Algorithm):
    """A base class for total variation denoising."""

    @_Algorithm._register
    def tvd(self, data, lam=1.0, method='condat'):
        r"""
        Total variation denoising (TVD) with a squared error loss.

        Finds the piecewise constant signal, `x`, that exactly minimizes

        .. math::

            \sum\limits_{i}^N (x_i - y_i)^2 + \lambda \sum\limits_{i}^{N - 1} |x_{i + 1} - x_i|

        where `y` is the input data ordered by its x-values.

        Parameters
        ----------
        data : array-like, shape (N,)
            The y-values of the measured data, with N data points. Must not
            contain missing data (NaN) or Inf.
        lam : float, optional
            The penalty for the total variation of the output. Must be greater than or
            equal to 0. A value of 0 returns the input data, and larger values give
            fewer, longer constant segments. Default is 1.0.
        method : {'condat'}, optional
            The algorithm used to solve the problem. Only 'condat' (default), the direct
            algorithm from [1]_, is currently available.

        Returns
        -------
        denoised : numpy.ndarray, shape (N,)
            The denoised data.
        params : dict
            A dictionary with the following items:

            * 'objective': float
                The value of the minimized objective function.
            * 'num_segments': int
                The number of constant segments within `denoised`.

        Raises
        ------
        InvalidArgumentError
            Raised if `lam` is negative or not finite, or if `method` is unknown.

        Notes
        -----
        Any `lam` greater than or equal to :func:`tvdenoise.utils.lam_max` gives a constant
        output equal to the mean of the data.

        References
        ----------
        .. [1] Condat, L. A Direct Algorithm for 1-D Total Variation Denoising. IEEE Signal
               Processing Letters, 2013, 20(11), 1054-1057.

        """
        lam = _check_lam(lam)
        denoised = _solve(data, lam, method)
        params = {
            'objective': tvd_objective(denoised, data, lam),
            'num_segments': num_segments(denoised)
        }

        return denoised, params


_denoise_wrapper = _class_wrapper(_Denoise)


@_denoise_wrapper
def tvd(data, lam=1.0, method='condat', x_data=None):
    r"""
    Total variation denoising (TVD) with a squared error loss.

    Finds the piecewise constant signal, `x`, that exactly minimizes

    .. math::

        \sum\limits_{i}^N (x_i - y_i)^2 + \lambda \sum\limits_{i}^{N - 1} |x_{i + 1} - x_i|

    where `y` is the input data ordered by its x-values.

    Parameters
    ----------
    data : array-like, shape (N,)
        The y-values of the measured data, with N data points. Must not
        contain missing data (NaN) or Inf.
    lam : float, optional
        The penalty for the total variation of the output. Must be greater than or
        equal to 0. A value of 0 returns the input data, and larger values give
        fewer, longer constant segments. Default is 1.0.
    method : {'condat'}, optional
        The algorithm used to solve the problem. Only 'condat' (default), the direct
        algorithm from [1]_, is currently available.
    x_data : array-like, shape (N,), optional
        The x-values of the measured data, used to order the data. Default is None,
        which will assume `data` is already in sequential order.

    Returns
    -------
    denoised : numpy.ndarray, shape (N,)
        The denoised data.
    params : dict
        A dictionary with the following items:

        * 'objective': float
            The value of the minimized objective function.
        * 'num_segments': int
            The number of constant segments within `denoised`.

    Raises
    ------
    InvalidArgumentError
        Raised if `lam` is negative or not finite, if `method` is unknown, or if `data`
        contains non-finite values.
    SizeLimitExceededError
        Raised if `data` has more than :data:`tvdenoise.config.MAX_DATA_SIZE` points.

    References
    ----------
    .. [1] Condat, L. A Direct Algorithm for 1-D Total Variation Denoising. IEEE Signal
           Processing Letters, 2013, 20(11), 1054-1057.

    """


def _solve(y, lam, method='condat'):
    """
    Dispatches the validated data to the selected denoising algorithm.

    Parameters
    ----------
    y : numpy.ndarray, shape (N,)
        The sequential float data.
    lam : float
        The validated total variation penalty.
    method : {'condat'}, optional
        The algorithm to use. Default is 'condat'.

    Returns
    -------
    numpy.ndarray, shape (N,)
        A new array with the denoised data.

    """
    method = _check_option(method, _METHODS, 'method')
    if lam == 0 or y.shape[0] < 2:
        return y.copy()
    # the kernels minimize 0.5 * ||x - y||**2 + penalty * TV(x)
    return _METHODS[method](y, 0.5 * lam)


@jit(nopython=True, cache=True, nogil=True)
def _condat_tvd(y, lam):
    """
    Solves total variation denoising using Condat's direct algorithm.

    Minimizes ``0.5 * sum((x - y)**2) + lam * sum(abs(diff(x)))`` in a single
    forward scan. The value of the open segment is bracketed by `lower` and `upper`,
    whose dual slacks must stay within ``[-lam, lam]``; when a slack leaves that box,
    the segment is closed at the position where the violated bound was last tightened
    and the scan restarts just after it.

    Parameters
    ----------
    y : numpy.ndarray, shape (N,)
        The data. Must have at least two points.
    lam : float
        The total variation penalty, greater than 0.

    Returns
    -------
    output : numpy.ndarray, shape (N,)
        The denoised data.

    Notes
    -----
    Ties are resolved by always testing for a negative jump before a positive jump,
    only jumping when a slack strictly leaves ``[-lam, lam]``, and tightening a bound
    whenever its slack reaches the box edge. The output is thus a deterministic
    function of the input.

    The output is written in place over a copy of `y`; values at or after the
    start of the open segment are still the input values.

    """
    output = y.copy()
    num_points = output.shape[0]
    two_lam = 2.0 * lam
    minus_lam = -lam

    k = 0  # current index
    start = 0  # first index of the open segment
    lower_slack = lam
    upper_slack = minus_lam
    lower = output[0] - lam
    upper = output[0] + lam
    upper_end = 0  # last index at which the upper bound was tightened
    lower_end = 0
    while True:
        while k >= num_points - 1:
            # the final segment must end with zero slack
            if lower_slack < 0.0:
                while True:
                    output[start] = lower
                    start += 1
                    if start > lower_end:
                        break
                k = start
                lower_end = k
                lower = output[lower_end]
                lower_slack = lam
                upper_slack = lower + lower_slack - upper
            elif upper_slack > 0.0:
                while True:
                    output[start] = upper
                    start += 1
                    if start > upper_end:
                        break
                k = start
                upper_end = k
                upper = output[upper_end]
                upper_slack = minus_lam
                lower_slack = upper + upper_slack - lower
            else:
                lower += lower_slack / (k - start + 1)
                while True:
                    output[start] = lower
                    start += 1
                    if start > k:
                        break
                return output
        lower_slack += output[k + 1] - lower
        if lower_slack < minus_lam:
            # negative jump after lower_end
            while True:
                output[start] = lower
                start += 1
                if start > lower_end:
                    break
            k = start
            lower_end = k
            upper_end = lower_end
            lower = output[upper_end]
            upper = lower + two_lam
            lower_slack = lam
            upper_slack = minus_lam
        else:
            upper_slack += output[k + 1] - upper
            if upper_slack > lam:
                # positive jump after upper_end
                while True:
                    output[start] = upper
                    start += 1
                    if start > upper_end:
                        break
                k = start
                lower_end = k
                upper_end = lower_end
                upper = output[upper_end]
                lower = upper - two_lam
                lower_slack = lam
                upper_slack = minus_lam
            else:
                k += 1
                if lower_slack >= lam:
                    lower_end = k
                    lower += (lower_slack - lam) / (lower_end - start + 1)
                    lower_slack = lam
                if upper_slack <= minus_lam:
                    upper_end = k
                    upper += (upper_slack + lam) / (upper_end - start + 1)
                    upper_slack = minus_lam


_METHODS = {'condat': _condat_tvd}
