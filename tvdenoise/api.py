# -*- coding: utf-8 -*-
"""The main entry point for using the object oriented api of tvdenoise."""

from .cross_validation import _CrossValidation
from .denoise import _Denoise


class Denoiser(_CrossValidation, _Denoise):
    """
    A class for all total variation denoising algorithms.

    Contains all available algorithms in tvdenoise as methods to allow a single
    interface for easier usage.

    Parameters
    ----------
    x_data : array-like, shape (N,), optional
        The x-values of the measured data, which define the order of the data.
        Default is None, which will create an array from -1 to 1 during the first
        function call with length equal to the input data length.
    check_finite : bool, optional
        If True (default), will raise an error if any values in input data are not finite.
        Setting to False will skip the check. Note that the output is undefined if
        `check_finite` is False and the input data contains non-finite values.
    assume_sorted : bool, optional
        If False (default), will sort the input `x_data` values. Otherwise, the
        input is assumed to be sorted.
    output_dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing
        of the input data if it is a floating point type, otherwise float64.

    Attributes
    ----------
    x : numpy.ndarray or None
        The x-values for the object. If initialized with None, then `x` is initialized the
        first function call to have the same length as the input `data` and has min and max
        values of -1 and 1, respectively.

    """
