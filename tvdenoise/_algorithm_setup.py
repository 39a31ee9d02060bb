# -*- coding: utf-8 -*-
"""Setup code for the various algorithm types in tvdenoise.

Created on October 16, 2026
@author: tvdenoise developers

"""

from functools import wraps
from inspect import signature
import warnings

import numpy as np

from ._validation import _check_array, _check_size, _check_sized_array, _yx_arrays
from .utils import SortingWarning, _determine_sorts, _sort_array


class _Algorithm:
    """
    A base class for all algorithm types.

    Handles the conversion and validation of input data and x-values, orders the data
    by its x-values, and puts outputs back into the input ordering with the desired dtype.

    Attributes
    ----------
    x : numpy.ndarray or None
        The x-values for the object. If initialized with None, then `x` is initialized the
        first function call to have the same length as the input `data` and has min and max
        values of -1 and 1, respectively.

    """

    def __init__(self, x_data=None, check_finite=True, assume_sorted=False,
                 output_dtype=None):
        """
        Initializes the algorithm object.

        Parameters
        ----------
        x_data : array-like, shape (N,), optional
            The x-values of the measured data. Default is None, which will create an
            array from -1 to 1 during the first function call with length equal to the
            input data length.
        check_finite : bool, optional
            If True (default), will raise an error if any values in input data are not finite.
            Setting to False will skip the check. Note that the output is undefined if
            `check_finite` is False and the input data contains non-finite values.
        assume_sorted : bool, optional
            If False (default), will sort the input `x_data` values. Otherwise, the input
            is assumed to be sorted, although it will still be checked to be in ascending order.
        output_dtype : type or numpy.dtype, optional
            The dtype to cast the output array. Default is None, which uses the typing
            of the input data if it is a floating point type, otherwise float64.

        """
        if x_data is None:
            self.x = None
            self._size = None
        else:
            self.x = _check_array(x_data, dtype=float, check_finite=check_finite)
            self._size = len(self.x)
            _check_size(self._size)
            if assume_sorted and np.any(self.x[1:] < self.x[:-1]):
                warnings.warn(
                    ('x-values must be increasing to define the order of the data, so '
                     'setting assume_sorted to False'), SortingWarning, stacklevel=2
                )
                assume_sorted = False

        if x_data is None or assume_sorted:
            self._sort_order = None
            self._inverted_order = None
        else:
            self._sort_order, self._inverted_order = _determine_sorts(self.x)
            if self._sort_order is not None:
                self.x = self.x[self._sort_order]

        self._check_finite = check_finite
        self._dtype = output_dtype

    def _return_results(self, output, params, dtype):
        """
        Re-orders the output based on the x ordering and sets its dtype.

        If `self._sort_order` is None, then no reordering is performed.

        Parameters
        ----------
        output : numpy.ndarray, shape (N,)
            The denoised output of the algorithm.
        params : dict
            The parameter dictionary output by the algorithm.
        dtype : type or numpy.dtype
            The desired output dtype.

        Returns
        -------
        output : numpy.ndarray, shape (N,)
            The input `output` after re-ordering and setting to the desired dtype.
        params : dict
            The input `params`, unchanged.

        """
        if self._sort_order is not None:
            output = _sort_array(output, sort_order=self._inverted_order)

        return np.asarray(output, dtype=dtype), params

    @classmethod
    def _register(cls, func):
        """
        Wraps a denoising function to validate inputs and correct outputs.

        The input data is converted to a numpy array, validated to ensure the length is
        consistent, and ordered to match the input x ordering. The outputs are corrected
        to ensure proper inverted sort ordering and dtype.

        Parameters
        ----------
        func : Callable
            The function that is being decorated.

        Returns
        -------
        numpy.ndarray
            The denoised data.
        dict
            A dictionary of parameters output by the function.

        """
        @wraps(func)
        def inner(self, data=None, *args, **kwargs):
            if data is None:
                raise TypeError('"data" must be given')
            if self.x is None:
                y, self.x = _yx_arrays(data, check_finite=self._check_finite)
                self._size = y.shape[-1]
            else:
                y = _check_sized_array(
                    data, self._size, check_finite=self._check_finite, name='data'
                )

            y = _sort_array(y, sort_order=self._sort_order)
            if self._dtype is not None:
                output_dtype = self._dtype
            elif np.issubdtype(y.dtype, np.floating):
                output_dtype = y.dtype
            else:
                output_dtype = float
            y = np.asarray(y, dtype=float)

            output, params = func(self, y, *args, **kwargs)

            return self._return_results(output, params, output_dtype)

        return inner


def _class_wrapper(klass):
    """
    Wraps a function to call the corresponding class method instead.

    Parameters
    ----------
    klass : _Algorithm
        The class being wrapped.

    """
    def outer(func):
        func_signature = signature(func)
        method = func.__name__

        @wraps(func)
        def inner(*args, **kwargs):
            total_inputs = func_signature.bind(*args, **kwargs)
            x = total_inputs.arguments.pop('x_data', None)
            return getattr(klass(x_data=x), method)(*total_inputs.args, **total_inputs.kwargs)
        return inner

    return outer
