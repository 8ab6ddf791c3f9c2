"""
Similarity measures between two documents' term frequencies.

Both functions accept any objects with a ``frequencies`` mapping of term ID -> weight, most notably
:class:`~tmdoc.document.Document` objects. They never fail on empty documents but return 0 instead.
"""

import numpy as np


def jaccard_similarity(a, b) -> float:
    """
    Calculate the Jaccard similarity between documents `a` and `b`, i.e. the number of shared terms divided by the
    number of terms that occur in any of both documents. Only terms with a nonzero frequency are taken into account,
    the magnitude of the frequencies is ignored.

    :param a: first document
    :param b: second document
    :return: Jaccard similarity in range [0, 1]; 0 if both documents don't contain any term
    """
    terms_a = _nonzero_terms(a)
    terms_b = _nonzero_terms(b)

    n_union = len(terms_a | terms_b)
    if n_union == 0:
        return 0.0

    return len(terms_a & terms_b) / n_union


def cosine_similarity(a, b) -> float:
    """
    Calculate the cosine similarity between documents `a` and `b`. Each document is treated as vector of term
    frequencies over the union of their terms, where terms missing in a document have a frequency of 0.

    :param a: first document
    :param b: second document
    :return: cosine similarity in range [-1, 1]; 0 if any of both documents has a zero norm
    """
    freq_a = a.frequencies
    freq_b = b.frequencies

    sqsum_a = _sum_of_squares(freq_a)
    sqsum_b = _sum_of_squares(freq_b)

    if sqsum_a == 0 or sqsum_b == 0:
        return 0.0

    # iterate through the smaller store; sorting makes the sum independent of the argument order
    if len(freq_a) > len(freq_b):
        shared = sorted(t for t in freq_b.keys() if t in freq_a)
    else:
        shared = sorted(t for t in freq_a.keys() if t in freq_b)

    if not shared:
        return 0.0

    dot = np.dot(_sorted_values(freq_a, shared), _sorted_values(freq_b, shared))

    # sqrt(x * x) == x holds exactly, hence a document compared with itself yields exactly 1
    return float(min(dot / np.sqrt(sqsum_a * sqsum_b), 1.0))


def _nonzero_terms(doc) -> set:
    """Helper function to get the set of terms with nonzero frequency in `doc`."""
    return {t for t, f in doc.frequencies.items() if f != 0}


def _sorted_values(frequencies, terms) -> np.ndarray:
    """Helper function to get the frequencies of `terms` as float array."""
    return np.fromiter((frequencies[t] for t in terms), dtype=float, count=len(terms))


def _sum_of_squares(frequencies) -> float:
    """
    Helper function to calculate the sum of squared frequencies, i.e. the squared Euclidean norm. The values are
    summed in order of sorted term IDs, the same order that is used for the dot product of shared terms.
    """
    if not frequencies:
        return 0.0
    vec = _sorted_values(frequencies, sorted(frequencies.keys()))
    return float(np.dot(vec, vec))
