"""
tmdoc – Term-frequency documents for text mining pipelines

A document is represented as sparse bag of weighted terms. This package provides frequency accumulation, feature
filtering, pairwise similarity and export to the input format of supervised LDA (sLDA) trainers.
"""

import logging

__title__ = 'tmdoc'
__version__ = '0.1.0'
__author__ = 'tmdoc contributors'
__license__ = 'Apache License 2.0'

logger = logging.getLogger(__title__)
logger.addHandler(logging.NullHandler())
logger.setLevel(logging.WARNING)   # set default level


from . import bow, defaults, similarity, slda, types, utils

from .document import Document, NO_LABEL, filter_features
from .similarity import jaccard_similarity, cosine_similarity
from .slda import LabelMapping, get_slda_term_data, get_slda_label_data
