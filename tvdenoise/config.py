# -*- coding: utf-8 -*-
"""Configuration settings for tvdenoise.

Created on October 16, 2026
@author: tvdenoise developers

"""

# Note: the triple quotes are for including the attributes within the documentation
MAX_DATA_SIZE = 2**53
"""The maximum number of data points that can be denoised in a single call.

Segment lengths are converted to floats within the direct algorithm, and 2**53 is
the largest count for which every integer is exactly representable as a float64.
Inputs longer than this raise a :class:`~tvdenoise.utils.SizeLimitExceededError`
rather than silently losing precision.

"""

CV_MAX_WORKERS = None
"""The default number of threads used for cross validation.

Passed as `max_workers` to :class:`concurrent.futures.ThreadPoolExecutor`, so None
(default) lets Python choose based on the number of processors. Set to 1 to
compute every (lam, fold) pair serially within the calling thread.

"""
