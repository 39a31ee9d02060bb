# -*- coding: utf-8 -*-
"""Code for validating inputs.

Created on October 16, 2026
@author: tvdenoise developers

"""

import numbers

import numpy as np

from . import config


class InvalidArgumentError(ValueError):
    """
    Error raised when an input is outside of the domain of the algorithm.

    Covers negative or non-finite penalties, non-finite data, malformed grids of
    penalty values, and invalid selections of methods, losses, or fold counts.
    """


class SizeLimitExceededError(ValueError):
    """Error raised when the input data is longer than :data:`tvdenoise.config.MAX_DATA_SIZE`."""


def _check_scalar(data, **asarray_kwargs):
    """
    Checks if the input is scalar.

    Parameters
    ----------
    data : array-like
        Either a scalar value or an array. Array-like inputs with only 1 item will also
        be considered scalar.
    **asarray_kwargs : dict
        Additional keyword arguments to pass to :func:`numpy.asarray`.

    Returns
    -------
    output : numpy.ndarray or numpy.number
        The array of values or the single array scalar.
    is_scalar : bool
        True if the input was a scalar value or had a length of 1; otherwise, is False.

    """
    output = np.asarray(data, **asarray_kwargs)
    if output.ndim > 1:  # coerce to 1d shape
        output = output.reshape(-1)
    if not output.ndim:
        is_scalar = True
    elif len(output) == 1:
        is_scalar = True
        output = output[0]
    else:
        is_scalar = False

    if is_scalar:
        # index with an empty tuple to get the single scalar while maintaining the numpy dtype
        output = np.asarray(output)[()]

    return output, is_scalar


def _check_scalar_variable(value, allow_zero=False, variable_name='lam', **asarray_kwargs):
    """
    Ensures the input is a finite scalar value.

    Parameters
    ----------
    value : numpy.Number or array-like
        The value to check.
    allow_zero : bool, optional
        If False (default), only allows `value` > 0. If True, allows `value` >= 0.
    variable_name : str, optional
        The name displayed if an error occurs. Default is 'lam'.
    **asarray_kwargs : dict
        Additional keyword arguments to pass to :func:`numpy.asarray`.

    Returns
    -------
    output : numpy.Number
        The verified scalar value.

    Raises
    ------
    InvalidArgumentError
        Raised if `value` is not a single value, is not finite, or is less than or
        equal to 0 if `allow_zero` is False or less than 0 if `allow_zero` is True.

    """
    output, is_scalar = _check_scalar(value, **asarray_kwargs)
    if not is_scalar:
        raise InvalidArgumentError(f'{variable_name} must be a single value')
    elif not np.isfinite(output):
        raise InvalidArgumentError(f'{variable_name} must be finite, but got {output}')

    if allow_zero:
        invalid = output < 0
        text = 'greater than or equal to'
    else:
        invalid = output <= 0
        text = 'greater than'
    if invalid:
        raise InvalidArgumentError(f'{variable_name} must be {text} 0, but got {output}')

    return output


def _check_array(array, dtype=None, order=None, check_finite=False, ensure_1d=True):
    """
    Validates the shape and values of the input array and controls the output parameters.

    Parameters
    ----------
    array : array-like
        The input array to check.
    dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing of `array`.
    order : {None, 'C', 'F'}, optional
        The order for the output array. Default is None, which will use the default array
        ordering. Other valid options are 'C' for C ordering or 'F' for Fortran ordering.
    check_finite : bool, optional
        If True, will raise an error if any values in `array` are not finite. Default is False,
        which skips the check.
    ensure_1d : bool, optional
        If True (default), will raise an error if the shape of `array` is not a one dimensional
        array with shape (N,) or a two dimensional array with shape (N, 1) or (1, N).

    Returns
    -------
    output : numpy.ndarray
        The array after performing all validations.

    Raises
    ------
    InvalidArgumentError
        Raised if `check_finite` is True and `array` contains nan or inf values, or if
        `ensure_1d` is True and `array` does not have a shape of (N,) or (N, 1) or (1, N).

    Notes
    -----
    If `ensure_1d` is True and `array` has a shape of (N, 1) or (1, N), it is reshaped to
    (N,) for better compatibility for all functions.

    """
    output = np.asarray(array, dtype=dtype, order=order)
    if ensure_1d:
        output = np.atleast_1d(output)
        dimensions = output.ndim
        if dimensions == 2 and 1 in output.shape:
            output = output.reshape(-1)
        elif dimensions != 1:
            raise InvalidArgumentError('must be a one dimensional array')
    if check_finite and not np.isfinite(output).all():
        raise InvalidArgumentError('array must not contain infs or NaNs')

    return output


def _check_sized_array(array, length, dtype=None, order=None, check_finite=False,
                       ensure_1d=True, name='weights'):
    """
    Validates the input array and ensures its length is correct.

    Parameters
    ----------
    array : array-like
        The input array to check.
    length : int
        The length that the input should have.
    dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing of `array`.
    order : {None, 'C', 'F'}, optional
        The order for the output array. Default is None, which will use the default array
        ordering. Other valid options are 'C' for C ordering or 'F' for Fortran ordering.
    check_finite : bool, optional
        If True, will raise an error if any values if `array` are not finite. Default is False,
        which skips the check.
    ensure_1d : bool, optional
        If True (default), will raise an error if the shape of `array` is not a one dimensional
        array with shape (N,) or a two dimensional array with shape (N, 1) or (1, N).
    name : str, optional
        The name for the variable if an exception is raised. Default is 'weights'.

    Returns
    -------
    output : numpy.ndarray
        The array after performing all validations.

    Raises
    ------
    InvalidArgumentError
        Raised if `array` does not match `length`.

    """
    output = _check_array(
        array, dtype=dtype, order=order, check_finite=check_finite, ensure_1d=ensure_1d
    )
    if output.shape[-1] != length:
        raise InvalidArgumentError(
            f'length mismatch for {name}; expected {length} but got {output.shape[-1]}'
        )
    return output


def _check_size(num_points):
    """
    Ensures the number of data points does not exceed the supported maximum.

    Parameters
    ----------
    num_points : int
        The number of data points.

    Raises
    ------
    SizeLimitExceededError
        Raised if `num_points` is greater than :data:`tvdenoise.config.MAX_DATA_SIZE`.

    """
    if num_points > config.MAX_DATA_SIZE:
        raise SizeLimitExceededError(
            f'data has {num_points} points, but at most {config.MAX_DATA_SIZE} are supported'
        )


def _yx_arrays(data, x_data=None, check_finite=False, dtype=None, order=None, ensure_1d=True):
    """
    Converts input data into numpy arrays and provides x data if none is given.

    Parameters
    ----------
    data : array-like, shape (N,)
        The y-values of the measured data, with N data points.
    x_data : array-like, shape (N,), optional
        The x-values of the measured data. Default is None, which will create an
        array from -1. to 1. with N points.
    check_finite : bool, optional
        If True, will raise an error if any values if `array` are not finite. Default is False,
        which skips the check.
    dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing of `array`.
    order : {None, 'C', 'F'}, optional
        The order for the output array. Default is None, which will use the default array
        ordering. Other valid options are 'C' for C ordering or 'F' for Fortran ordering.
    ensure_1d : bool, optional
        If True (default), will raise an error if the shape of `array` is not a one dimensional
        array with shape (N,) or a two dimensional array with shape (N, 1) or (1, N).

    Returns
    -------
    y : numpy.ndarray, shape (N,)
        A numpy array of the y-values of the measured data.
    x : numpy.ndarray, shape (N,)
        A numpy array of the x-values of the measured data, or a created array.

    Notes
    -----
    Does not change the scale/domain of the input `x_data` if it is given, only
    converts it to an array.

    """
    y = _check_array(
        data, dtype=dtype, order=order, check_finite=check_finite, ensure_1d=ensure_1d
    )
    len_y = y.shape[-1]
    _check_size(len_y)
    if x_data is None:
        x = np.linspace(-1, 1, len_y)
    else:
        x = _check_sized_array(
            x_data, len_y, dtype=dtype, order=order, check_finite=check_finite,
            ensure_1d=True, name='x_data'
        )

    return y, x


def _check_lam(lam, allow_zero=True, dtype=float):
    """
    Ensures the total variation penalty `lam` is a finite scalar greater than or equal to 0.

    Parameters
    ----------
    lam : float or array-like
        The penalty, lambda, weighting the total variation of the output.
    allow_zero : bool
        If True (default), allows `lam` >= 0. If False, only allows `lam` values > 0.
    dtype : type or numpy.dtype, optional
        The dtype to cast the lam value. Default is float.

    Returns
    -------
    float
        The verified `lam` value.

    Raises
    ------
    InvalidArgumentError
        Raised if `lam` is negative or not finite.

    """
    return float(
        _check_scalar_variable(lam, allow_zero, variable_name='lam', dtype=dtype)
    )


def _check_lam_grid(lam_grid):
    """
    Validates a grid of penalty values for cross validation.

    Parameters
    ----------
    lam_grid : array-like, shape (L,)
        The penalty values.

    Returns
    -------
    numpy.ndarray, shape (L,)
        The validated grid as a float array.

    Raises
    ------
    InvalidArgumentError
        Raised if `lam_grid` is empty, is not one dimensional, or contains a negative
        or non-finite value. The message names the first offending value and its index.

    """
    output = _check_array(lam_grid, dtype=float)
    if not output.size:
        raise InvalidArgumentError('lam_grid must contain at least one value')
    invalid = ~np.isfinite(output) | (output < 0)
    if invalid.any():
        index = np.flatnonzero(invalid)[0]
        raise InvalidArgumentError(
            'all values in lam_grid must be finite and greater than or equal to 0, but '
            f'lam_grid[{index}] is {output[index]}'
        )

    return output


def _check_num_folds(num_folds, num_points):
    """
    Ensures the number of cross validation folds is usable for the given data size.

    Parameters
    ----------
    num_folds : int
        The number of folds.
    num_points : int
        The number of data points.

    Returns
    -------
    int
        The verified number of folds.

    Raises
    ------
    TypeError
        Raised if `num_folds` is not an integer.
    InvalidArgumentError
        Raised if `num_folds` is less than 2 or greater than `num_points`, which
        would leave a fold without any held-out points.

    """
    if (
        isinstance(num_folds, bool) or not isinstance(num_folds, numbers.Real)
        or not float(num_folds).is_integer()
    ):
        raise TypeError('num_folds must be an integer')
    num_folds = int(num_folds)
    if num_folds < 2:
        raise InvalidArgumentError(f'num_folds must be at least 2, but got {num_folds}')
    elif num_folds > num_points:
        raise InvalidArgumentError(
            f'num_folds ({num_folds}) cannot be greater than the number of data '
            f'points ({num_points})'
        )

    return num_folds


def _check_option(value, options, variable_name):
    """
    Ensures a string option is one of the allowed values, ignoring capitalization.

    Parameters
    ----------
    value : str
        The input option.
    options : Container[str]
        The allowed options, all lower case.
    variable_name : str
        The name displayed if an error occurs.

    Returns
    -------
    str
        The lower case version of `value`.

    Raises
    ------
    InvalidArgumentError
        Raised if `value` is not a string within `options`.

    """
    output = value.lower() if isinstance(value, str) else value
    if output not in options:
        raise InvalidArgumentError(
            f'unknown {variable_name} "{value}"; must be one of {tuple(options)}'
        )

    return output
