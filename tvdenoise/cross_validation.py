# -*- coding: utf-8 -*-
"""Selection of the total variation penalty by k-fold cross validation.

Created on October 16, 2026
@author: tvdenoise developers

"""

from concurrent.futures import ThreadPoolExecutor
from functools import partial
import warnings

import numpy as np

from . import config
from ._algorithm_setup import _Algorithm, _class_wrapper
from ._validation import (
    InvalidArgumentError, _check_lam_grid, _check_num_folds, _check_option, _yx_arrays
)
from .denoise import _METHODS, _solve
from .utils import ParameterWarning, _determine_sorts, _sort_array, log_lam_grid


class _CrossValidation(_Algorithm):
    """A base class for selecting parameters by cross validation."""

    @_Algorithm._register
    def cv_tvd(self, data, lam_grid=None, num_folds=10, loss=None, method='condat',
               selection='1se', max_workers=None):
        """
        Total variation denoising with the penalty selected by k-fold cross validation.

        Parameters
        ----------
        data : array-like, shape (N,)
            The y-values of the measured data, with N data points. Must not
            contain missing data (NaN) or Inf.
        lam_grid : array-like, shape (L,), optional
            The penalty values to evaluate. Default is None, which uses 51 logarithmically
            spaced values from 0.01 to 1000 (see :func:`tvdenoise.utils.log_lam_grid`).
        num_folds : int, optional
            The number of cross validation folds. Must be at least 2 and no more than N.
            Default is 10.
        loss : {None, 'squared_error'}, optional
            The loss used to score the held-out predictions. Default is None, which
            uses the loss matching `method`.
        method : {'condat'}, optional
            The denoising algorithm. Default is 'condat'.
        selection : {'1se', 'min'}, optional
            Which penalty to use for the final denoising. '1se' (default) uses the
            largest penalty whose mean loss is within one standard error of the minimum,
            and 'min' uses the penalty with the minimum mean loss.
        max_workers : int, optional
            The number of threads used to evaluate the (penalty, fold) pairs. Default
            is None, which uses :data:`tvdenoise.config.CV_MAX_WORKERS`. A value of 1
            evaluates all pairs serially in the calling thread.

        Returns
        -------
        denoised : numpy.ndarray, shape (N,)
            The data denoised using the selected penalty.
        params : dict
            A dictionary with the following items:

            * 'lam': float
                The penalty used to compute `denoised`.
            * 'lam_grid': numpy.ndarray, shape (L,)
                The evaluated penalty values.
            * 'fold_losses': numpy.ndarray, shape (L, `num_folds`)
                The loss of each fold for each penalty.
            * 'mean_losses': numpy.ndarray, shape (L,)
                The mean loss across all folds for each penalty.
            * 'standard_errors': numpy.ndarray, shape (L,)
                The standard error of the mean loss for each penalty.
            * 'lam_min': float
                The penalty with the minimum mean loss.
            * 'lam_1se': float
                The largest penalty whose mean loss minus its standard error is
                no greater than the minimum mean loss.

        Raises
        ------
        InvalidArgumentError
            Raised if `lam_grid` is empty or contains negative or non-finite values, if
            `num_folds` is invalid for the data size, or if `loss`, `method`, or `selection`
            is unknown.

        See Also
        --------
        select_lam

        """
        selection = _check_option(selection, ('1se', 'min'), 'selection')
        params = _cross_validate(
            data, self.x, lam_grid, num_folds, loss, method, max_workers
        )
        params['lam'] = params['lam_min'] if selection == 'min' else params['lam_1se']

        return _solve(data, params['lam'], method), params


_cv_wrapper = _class_wrapper(_CrossValidation)


@_cv_wrapper
def cv_tvd(data, lam_grid=None, num_folds=10, loss=None, method='condat', selection='1se',
           max_workers=None, x_data=None):
    """
    Total variation denoising with the penalty selected by k-fold cross validation.

    Parameters
    ----------
    data : array-like, shape (N,)
        The y-values of the measured data, with N data points. Must not
        contain missing data (NaN) or Inf.
    lam_grid : array-like, shape (L,), optional
        The penalty values to evaluate. Default is None, which uses 51 logarithmically
        spaced values from 0.01 to 1000 (see :func:`tvdenoise.utils.log_lam_grid`).
    num_folds : int, optional
        The number of cross validation folds. Must be at least 2 and no more than N.
        Default is 10.
    loss : {None, 'squared_error'}, optional
        The loss used to score the held-out predictions. Default is None, which
        uses the loss matching `method`.
    method : {'condat'}, optional
        The denoising algorithm. Default is 'condat'.
    selection : {'1se', 'min'}, optional
        Which penalty to use for the final denoising. '1se' (default) uses the
        largest penalty whose mean loss is within one standard error of the minimum,
        and 'min' uses the penalty with the minimum mean loss.
    max_workers : int, optional
        The number of threads used to evaluate the (penalty, fold) pairs. Default
        is None, which uses :data:`tvdenoise.config.CV_MAX_WORKERS`. A value of 1
        evaluates all pairs serially in the calling thread.
    x_data : array-like, shape (N,), optional
        The x-values of the measured data. Used to order the data and as the positions
        for interpolating held-out points. Default is None, which uses evenly spaced
        positions in the input order.

    Returns
    -------
    denoised : numpy.ndarray, shape (N,)
        The data denoised using the selected penalty.
    params : dict
        A dictionary with the following items:

        * 'lam': float
            The penalty used to compute `denoised`.
        * 'lam_grid': numpy.ndarray, shape (L,)
            The evaluated penalty values.
        * 'fold_losses': numpy.ndarray, shape (L, `num_folds`)
            The loss of each fold for each penalty.
        * 'mean_losses': numpy.ndarray, shape (L,)
            The mean loss across all folds for each penalty.
        * 'standard_errors': numpy.ndarray, shape (L,)
            The standard error of the mean loss for each penalty.
        * 'lam_min': float
            The penalty with the minimum mean loss.
        * 'lam_1se': float
            The largest penalty whose mean loss minus its standard error is
            no greater than the minimum mean loss.

    Raises
    ------
    InvalidArgumentError
        Raised if `lam_grid` is empty or contains negative or non-finite values, if
        `num_folds` is invalid for the data size, or if `loss`, `method`, or `selection`
        is unknown.

    """


def select_lam(data, lam_grid=None, num_folds=10, loss=None, method='condat',
               max_workers=None, x_data=None):
    """
    Scores penalty values for total variation denoising by k-fold cross validation.

    The data points are assigned to folds in a round-robin fashion, so that point
    ``i`` belongs to fold ``i % num_folds``. For each penalty and fold, the points
    outside of the fold are denoised as their own sequential signal, the denoised
    values are linearly interpolated at the positions of the held-out points (using
    the nearest denoised value beyond the ends), and the loss between the predictions
    and the held-out data is recorded.

    Parameters
    ----------
    data : array-like, shape (N,)
        The y-values of the measured data, with N data points. Must not
        contain missing data (NaN) or Inf.
    lam_grid : array-like, shape (L,), optional
        The penalty values to evaluate. Default is None, which uses 51 logarithmically
        spaced values from 0.01 to 1000.
    num_folds : int, optional
        The number of cross validation folds. Must be at least 2 and no more than N.
        Default is 10.
    loss : {None, 'squared_error'}, optional
        The loss used to score the held-out predictions. Default is None, which
        uses the loss matching `method`.
    method : {'condat'}, optional
        The denoising algorithm. Default is 'condat'.
    max_workers : int, optional
        The number of threads used to evaluate the (penalty, fold) pairs. Default
        is None, which uses :data:`tvdenoise.config.CV_MAX_WORKERS`.
    x_data : array-like, shape (N,), optional
        The x-values of the measured data. Default is None, which uses evenly spaced
        positions in the input order.

    Returns
    -------
    dict
        A dictionary with the items 'lam_grid', 'fold_losses', 'mean_losses',
        'standard_errors', 'lam_min', and 'lam_1se'. See :func:`cv_tvd` for
        their descriptions.

    Raises
    ------
    InvalidArgumentError
        Raised if `data` contains non-finite values, if `lam_grid` is empty or contains
        negative or non-finite values, if `num_folds` is invalid for the data size, or
        if `loss` or `method` is unknown.

    Examples
    --------
    >>> import numpy as np
    >>> from tvdenoise.cross_validation import select_lam
    >>> steps = np.repeat([1., 2., 3., 4., 2., 4., 3., 2., 1.], 100)
    >>> noisy = steps + np.random.default_rng(0).normal(0, 0.25, steps.size)
    >>> params = select_lam(noisy)
    >>> params['lam_1se'] >= params['lam_min']
    True

    """
    y, x = _yx_arrays(data, x_data, check_finite=True, dtype=float)
    if x_data is not None:
        sort_order = _determine_sorts(x)[0]
        y = _sort_array(y, sort_order)
        x = _sort_array(x, sort_order)

    return _cross_validate(y, x, lam_grid, num_folds, loss, method, max_workers)


def squared_error(prediction, actual):
    """
    Calculates the sum of squared errors, ``sum((prediction - actual)**2)``.

    Parameters
    ----------
    prediction : numpy.ndarray, shape (M,)
        The predicted values.
    actual : numpy.ndarray, shape (M,)
        The measured values.

    Returns
    -------
    float
        The sum of squared errors.

    """
    return float(np.sum((prediction - actual)**2))


_LOSSES = {'squared_error': squared_error}
# the loss that each denoising method minimizes
_METHOD_LOSSES = {'condat': 'squared_error'}


def _fold_assignment(num_points, num_folds):
    """
    Assigns each data point to a fold in a round-robin fashion.

    Parameters
    ----------
    num_points : int
        The number of data points.
    num_folds : int
        The number of folds.

    Returns
    -------
    numpy.ndarray, shape (`num_points`,)
        The fold of each point, ``[0, 1, ..., num_folds - 1, 0, 1, ...]``.

    """
    return np.arange(num_points) % num_folds


def _fold_loss(lam, test_mask, y, x, method, loss_func):
    """Denoises the training points for one fold and scores the held-out points."""
    train_mask = ~test_mask
    x_train = x[train_mask]
    fit = _solve(y[train_mask], lam, method)
    # np.interp extends the edge values beyond the training points
    prediction = np.interp(x[test_mask], x_train, fit)

    return loss_func(prediction, y[test_mask])


def _cross_validate(y, x, lam_grid, num_folds, loss, method, max_workers):
    """
    Computes the cross validation losses for each penalty.

    Parameters
    ----------
    y : numpy.ndarray, shape (N,)
        The validated float data, ordered by `x`.
    x : numpy.ndarray, shape (N,)
        The sorted x-values.
    lam_grid : array-like or None
        The penalty values, or None to use the default grid.
    num_folds : int
        The number of folds.
    loss : str or None
        The loss designation.
    method : str
        The denoising method.
    max_workers : int or None
        The number of threads.

    Returns
    -------
    params : dict
        The cross validation results. See :func:`select_lam`.

    """
    method = _check_option(method, _METHODS, 'method')
    if loss is None:
        loss = _METHOD_LOSSES[method]
    loss_func = _LOSSES[_check_option(loss, _LOSSES, 'loss')]
    if lam_grid is None:
        lam_grid = log_lam_grid()
    lam_grid = _check_lam_grid(lam_grid)
    num_folds = _check_num_folds(num_folds, y.shape[0])
    if max_workers is None:
        max_workers = config.CV_MAX_WORKERS
    if max_workers is not None and (isinstance(max_workers, bool) or max_workers < 1):
        raise InvalidArgumentError(f'max_workers must be at least 1, but got {max_workers}')

    folds = _fold_assignment(y.shape[0], num_folds)
    test_masks = [folds == fold for fold in range(num_folds)]
    pairs = [(lam, mask) for lam in lam_grid for mask in test_masks]
    scorer = partial(_fold_loss, y=y, x=x, method=method, loss_func=loss_func)
    if max_workers == 1:
        losses = [scorer(lam, mask) for lam, mask in pairs]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            losses = list(pool.map(scorer, *zip(*pairs)))

    # pool.map keeps the input order, so losses reshape directly into (lam, fold)
    fold_losses = np.array(losses, dtype=float).reshape(lam_grid.shape[0], num_folds)
    mean_losses = fold_losses.mean(axis=1)
    standard_errors = fold_losses.std(axis=1, ddof=1) / np.sqrt(num_folds)

    min_loss = mean_losses.min()
    lam_min = lam_grid[np.argmin(mean_losses)]
    lam_1se = lam_grid[mean_losses - standard_errors <= min_loss].max()
    if lam_grid.shape[0] > 1 and lam_min in (lam_grid.min(), lam_grid.max()):
        warnings.warn(
            (f'the optimal lam, {lam_min:.6g}, is at the edge of lam_grid; the true optimum '
             'may be outside of the grid'), ParameterWarning, stacklevel=3
        )

    return {
        'lam_grid': lam_grid,
        'fold_losses': fold_losses,
        'mean_losses': mean_losses,
        'standard_errors': standard_errors,
        'lam_min': float(lam_min),
        'lam_1se': float(lam_1se),
    }
