# -*- coding: utf-8 -*-
"""
=====================================================================================
tvdenoise - Exact total variation denoising of one dimensional signals.
=====================================================================================

tvdenoise provides a linear time, exact solver for total variation denoising with a
squared error loss and the selection of its penalty by cross validation.

@author: tvdenoise developers
Created on October 16, 2026

"""

__version__ = '0.1.0'

# import utils first since it is imported by other modules; likewise, import
# api last since it imports the other modules
from . import utils, config, denoise, cross_validation, api

from .api import Denoiser
