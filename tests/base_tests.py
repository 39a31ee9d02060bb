# -*- coding: utf-8 -*-
"""Base functions and classes for testing tvdenoise.

@author: tvdenoise developers
Created on October 16, 2026

"""

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from inspect import signature

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest
from scipy.optimize import minimize

from tvdenoise import Denoiser


STEP_LEVELS = np.array([1., 2., 3., 4., 2., 4., 3., 2., 1.])


def step_signal(num_points=900, levels=STEP_LEVELS):
    """
    Creates a piecewise constant signal with equally long steps.

    Parameters
    ----------
    num_points : int, optional
        The number of data points. Default is 900.
    levels : array-like, optional
        The value of each step. Default is the nine levels
        ``[1, 2, 3, 4, 2, 4, 3, 2, 1]``.

    Returns
    -------
    numpy.ndarray, shape (`num_points`,)
        The step signal.

    """
    levels = np.asarray(levels, dtype=float)
    indices = (np.arange(num_points) * levels.size) // num_points
    return levels[indices]


def get_data(include_noise=True, num_points=900):
    """Creates x- and y-data for testing.

    Parameters
    ----------
    include_noise : bool, optional
        If True (default), will include noise with the y-data.
    num_points : int, optional
        The number of data points to use. Default is 900.

    Returns
    -------
    x_data : numpy.ndarray
        The x-values.
    y_data : numpy.ndarray
        The y-values.

    """
    x_data = np.linspace(1, 100, num_points)
    y_data = step_signal(num_points)
    if include_noise:
        y_data += np.random.default_rng(0).normal(0, 0.5, x_data.size)

    return x_data, y_data


def changing_dataset(data_size=900, dataset_size=100):
    """
    Creates a dataset containing step signals with different noise levels.

    Parameters
    ----------
    data_size : int, optional
        The number of points for the data. Default is 900.
    dataset_size : int, optional
        The number of data within the datasset. Default is 100.

    Returns
    -------
    x : numpy.ndarray, shape (`data_size`,)
        The x-values for the data.
    dataset : numpy.ndarray, shape (`dataset_size`, `data_size`)
        The dataset for testing.

    """
    x = np.linspace(0, 1000, data_size)
    signal = step_signal(data_size)
    noise_levels = np.linspace(0.05, 1, dataset_size).reshape(-1, 1)
    noise = np.random.default_rng(0).normal(0, 1, (dataset_size, data_size))

    return x, signal + noise_levels * noise


def reference_tvd(data, lam):
    """
    Solves total variation denoising through its dual problem using scipy.

    Minimizes ``0.5 * ||y - D.T @ u||**2`` subject to ``|u| <= lam / 2`` with a bounded
    quasi-Newton solver, where ``D`` is the first order difference matrix, and recovers
    the primal solution as ``y - D.T @ u``. Slow, but independent of tvdenoise.

    Parameters
    ----------
    data : array-like, shape (N,)
        The data.
    lam : float
        The penalty for ``sum((x - y)**2) + lam * sum(abs(diff(x)))``.

    Returns
    -------
    numpy.ndarray, shape (N,)
        The reference solution.

    """
    y = np.asarray(data, dtype=float)
    half_lam = lam / 2

    def transpose_diff(u):
        return np.concatenate(([0.], u)) - np.concatenate((u, [0.]))

    def objective(u):
        residual = y - transpose_diff(u)
        return 0.5 * residual @ residual, -np.diff(residual)

    result = minimize(
        objective, np.zeros(y.size - 1), jac=True, method='L-BFGS-B',
        bounds=[(-half_lam, half_lam)] * (y.size - 1),
        options={'ftol': 1e-16, 'gtol': 1e-13, 'maxiter': 20000, 'maxcor': 30}
    )
    return y - transpose_diff(result.x)


def optimality_violation(denoised, data, lam):
    """
    Measures how far a solution is from satisfying the optimality conditions.

    The dual variables implied by `denoised` are ``u = -2 * cumsum(data - denoised)``;
    the solution is optimal if and only if the residuals sum to 0, every ``|u|`` is at
    most `lam`, and ``u = lam * sign(diff(denoised))`` wherever `denoised` jumps.

    Parameters
    ----------
    denoised : numpy.ndarray, shape (N,)
        The candidate solution.
    data : numpy.ndarray, shape (N,)
        The data.
    lam : float
        The total variation penalty.

    Returns
    -------
    float
        The largest violation of any optimality condition.

    """
    pull = -2 * np.cumsum(np.asarray(data, dtype=float) - denoised)
    dual = pull[:-1]
    jumps = np.diff(denoised)
    violations = [abs(pull[-1]), np.max(np.abs(dual), initial=0) - lam]
    if (jumps > 0).any():
        violations.append(np.abs(dual[jumps > 0] - lam).max())
    if (jumps < 0).any():
        violations.append(np.abs(dual[jumps < 0] + lam).max())

    return max(violations)


def check_param_keys(expected_keys, output_keys):
    """
    Ensures the output keys within the parameter dictionary matched the expected keys.

    Parameters
    ----------
    expected_keys : Iterable[str, ...]
        An iterable of the expected keys within the parameter dictionary.
    output_keys : Iterable[str, ...]
        An iterable of the actual keys within the parameter dictionary.

    Raises
    ------
    AssertionError
        Raised if `expected_keys` and `output_keys` are not the same.

    """
    expected = set(expected_keys)
    output = set(output_keys)

    missed_keys = expected.difference(output)
    if missed_keys:
        raise AssertionError(f'key(s) missing from param dictionary: {missed_keys}')
    unchecked_keys = output.difference(expected)
    if unchecked_keys:
        raise AssertionError(f'unchecked key(s) in param dictionary output: {unchecked_keys}')


class DummyModule:
    """A dummy object to serve as a fake module."""

    @staticmethod
    def func(*args, data=None, x_data=None, **kwargs):
        """Dummy function."""
        raise NotImplementedError('need to set func')


class BaseTester:
    """
    A base class for testing all algorithms.

    Ensure the functional and class-based algorithms are the same and that both do not
    modify the inputs. After that, only the class-based call is used to potentially save
    time from the setup.

    Attributes
    ----------
    kwargs : dict
        The keyword arguments that will be used as inputs for all default test cases.

    """

    module = DummyModule
    algorithm_base = Denoiser
    func_name = 'func'
    checked_keys = None
    required_kwargs = None
    required_repeated_kwargs = None

    @classmethod
    def setup_class(cls):
        """Sets up the class for testing."""
        cls.x, cls.y = get_data()
        func = getattr(cls.module, cls.func_name)
        cls.func = lambda self, *args, **kws: func(*args, **kws)
        cls.algorithm = cls.algorithm_base(cls.x, check_finite=False, assume_sorted=True)
        cls.class_func = getattr(cls.algorithm, cls.func_name)
        cls.kwargs = cls.required_kwargs if cls.required_kwargs is not None else {}
        cls.repeated_kwargs = (
            cls.required_repeated_kwargs if cls.required_repeated_kwargs is not None else {}
        )
        cls.param_keys = cls.checked_keys if cls.checked_keys is not None else []

    @classmethod
    def teardown_class(cls):
        """Resets class attributes after testing."""
        cls.x = None
        cls.y = None
        cls.func = None
        cls.algorithm = None
        cls.class_func = None
        cls.kwargs = None
        cls.repeated_kwargs = None
        cls.param_keys = None

    def test_ensure_wrapped(self):
        """Ensures the class method was wrapped using _Algorithm._register to control inputs."""
        assert hasattr(self.class_func, '__wrapped__')

    @pytest.mark.parametrize('use_class', (True, False))
    def test_unchanged_data(self, use_class, **kwargs):
        """Ensures that input data is unchanged by the function."""
        x, y = get_data()
        x2, y2 = get_data()
        x.setflags(write=False)
        y.setflags(write=False)

        try:
            if use_class:
                getattr(self.algorithm_base(x_data=x), self.func_name)(
                    data=y, **self.kwargs, **kwargs
                )
            else:
                self.func(data=y, x_data=x, **self.kwargs, **kwargs)
        except ValueError as e:  # from trying to assign value to read-only array
            raise AssertionError('method modified the input x- or y-data.') from e

        assert_array_equal(y2, y, err_msg='the y-data was changed by the algorithm')
        assert_array_equal(x2, x, err_msg='the x-data was changed by the algorithm')

    def test_repeated_fits(self):
        """Ensures repeated calls give bit-identical outputs."""
        first_output = self.class_func(data=self.y, **self.kwargs)
        second_output = self.class_func(data=self.y, **self.kwargs)

        assert_array_equal(first_output[0], second_output[0])

    def test_functional_vs_class_output(self, **assertion_kwargs):
        """Ensures the functional and class-based functions perform the same."""
        x, dataset = changing_dataset(dataset_size=5)

        class_method = getattr(
            self.algorithm_base(x, check_finite=False, assume_sorted=True), self.func_name
        )
        for data in dataset:
            class_output, class_params = class_method(data=data, **self.repeated_kwargs)
            func_output, func_params = self.func(data=data, x_data=x, **self.repeated_kwargs)

            assert_allclose(class_output, func_output, **assertion_kwargs)
            check_param_keys(class_params.keys(), func_params.keys())

    def test_functional_vs_class_parameters(self):
        """
        Ensures the args and kwargs for functional and class-based functions are the same.

        The only difference between the two signatures should be that the functional
        api has an `x_data` keyword.

        """
        class_parameters = signature(self.class_func).parameters
        functional_parameters = signature(
            getattr(self.module, self.func_name)
        ).parameters

        assert len(class_parameters) == len(functional_parameters) - 1
        assert 'data' in class_parameters
        assert 'x_data' in functional_parameters
        assert list(class_parameters.keys())[0] == 'data'
        for key in class_parameters:
            assert key in functional_parameters
            class_value = class_parameters[key].default
            functional_value = functional_parameters[key].default
            assert class_value == functional_value, f'Parameter mismatch for key "{key}"'

    def test_list_input(self, **assertion_kwargs):
        """Ensures that function works the same for both array and list inputs."""
        output_array = self.class_func(data=self.y, **self.kwargs)
        output_list = self.class_func(data=self.y.tolist(), **self.kwargs)

        assert_allclose(
            output_array[0], output_list[0],
            err_msg='algorithm output is different for arrays vs lists', **assertion_kwargs
        )
        for key in output_array[1]:
            assert key in output_list[1]

    def test_no_x(self, **assertion_kwargs):
        """Ensures that function output is the same when no x is input for evenly spaced data."""
        output_with = self.class_func(data=self.y, **self.kwargs)
        output_without = getattr(self.algorithm_base(), self.func_name)(
            data=self.y, **self.kwargs
        )

        assert_allclose(
            output_with[0], output_without[0],
            err_msg='algorithm output is different with no x-values',
            **assertion_kwargs
        )

    def test_output(self, additional_keys=None, **kwargs):
        """
        Ensures that the output has the desired format.

        Ensures that output has two elements, a numpy array and a param dictionary,
        and that the output is the same shape as the input y-data.

        Parameters
        ----------
        additional_keys : Iterable(str, ...), optional
            Additional keys to check for in the output parameter dictionary. Default is None.
        **kwargs
            Additional keyword arguments to pass to the function.

        """
        output = self.class_func(data=self.y, **self.kwargs, **kwargs)

        assert len(output) == 2, 'algorithm output should have two items'
        assert isinstance(output[0], np.ndarray), 'output[0] should be a numpy ndarray'
        assert isinstance(output[1], dict), 'output[1] should be a dictionary'
        assert self.y.shape == output[0].shape, 'output[0] must have same shape as y-data'

        if additional_keys is not None:
            total_keys = list(self.param_keys) + list(additional_keys)
        else:
            total_keys = self.param_keys
        check_param_keys(total_keys, output[1].keys())

    @pytest.mark.parametrize('dtype', (np.float32, np.float64, int))
    def test_output_dtype(self, dtype):
        """Ensures floating inputs keep their dtype and other inputs are output as float64."""
        output = self.class_func(data=self.y.astype(dtype), **self.kwargs)[0]

        expected_dtype = np.float64 if dtype is int else dtype
        assert output.dtype == expected_dtype

    def test_x_ordering(self, assertion_kwargs=None, **kwargs):
        """Ensures arrays are correctly sorted within the function."""
        reverse_fitter = self.algorithm_base(self.x[::-1], assume_sorted=False)

        regular_inputs_result = self.class_func(data=self.y, **self.kwargs, **kwargs)[0]
        reverse_inputs_result = getattr(reverse_fitter, self.func_name)(
            data=self.y[::-1], **self.kwargs, **kwargs
        )[0]

        if assertion_kwargs is None:
            assertion_kwargs = {}
        if 'rtol' not in assertion_kwargs:
            assertion_kwargs['rtol'] = 1e-10

        assert_allclose(regular_inputs_result, reverse_inputs_result[::-1], **assertion_kwargs)

    @pytest.mark.parametrize('bad_value', (np.nan, np.inf, -np.inf))
    def test_non_finite_data_fails(self, bad_value):
        """Ensures non-finite data raises an exception when check_finite is True."""
        y = self.y.copy()
        y[10] = bad_value
        with pytest.raises(ValueError):
            getattr(self.algorithm_base(self.x), self.func_name)(data=y, **self.kwargs)
        with pytest.raises(ValueError):
            self.func(data=y, **self.kwargs)

    @pytest.mark.threaded_test
    def test_threading(self, **kwargs):
        """
        Ensures the method produces the same output when using the same object within threading.

        Parameters
        ----------
        **kwargs
            Additional keyword arguments to pass to the function.

        """
        x, dataset = changing_dataset()

        fitter = self.algorithm_base(x, check_finite=False, assume_sorted=True)
        fitter_func = getattr(fitter, self.func_name)
        output_serial = np.empty_like(dataset)
        serial_params = []
        for i, data in enumerate(dataset):
            output_serial[i], method_params = fitter_func(data, **self.repeated_kwargs, **kwargs)
            serial_params.append(method_params)

        fitter = self.algorithm_base(x, check_finite=False, assume_sorted=True)
        fitter_func = partial(getattr(fitter, self.func_name), **self.repeated_kwargs, **kwargs)
        output_threaded = np.empty_like(dataset)
        threaded_params = []
        with ThreadPoolExecutor() as pool:
            for i, (denoised, param) in enumerate(pool.map(fitter_func, dataset)):
                output_threaded[i] = denoised
                threaded_params.append(param)

        assert_array_equal(
            output_threaded, output_serial, err_msg='Threaded results not equal to serial results'
        )
        for i, param_dict in enumerate(serial_params):
            check_param_keys(param_dict.keys(), threaded_params[i].keys())
