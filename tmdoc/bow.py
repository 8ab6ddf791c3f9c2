"""
Functions for converting documents to a document-term matrix (DTM) and to pandas DataFrames.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy.sparse import coo_matrix


logger = logging.getLogger('tmdoc')


#%% DTM creation

def documents_to_sparse_dtm(docs: Sequence, n_terms: Optional[int] = None, dtype=float) -> coo_matrix:
    """
    Create a sparse document-term-matrix (DTM) as matrix in
    `COO sparse format <https://docs.scipy.org/doc/scipy/reference/generated/scipy.sparse.coo_matrix.html>`_
    from a sequence of documents `docs`.

    The DTM's rows are the documents in the order of `docs`, its columns are term IDs, hence a value ``DTM[j, k]`` is
    the frequency of term ID ``k`` in document ``j``.

    :param docs: sequence of :class:`~tmdoc.document.Document` objects
    :param n_terms: number of columns, i.e. the vocabulary size; if None, use the largest term ID plus one
    :param dtype: data type of the resulting matrix
    :return: a sparse document-term-matrix in COO sparse format
    """
    ndocs = len(docs)
    nvals = sum(len(d.frequencies) for d in docs)

    # create arrays for sparse matrix
    data = np.empty(nvals, dtype=dtype)      # all term frequencies at data[k]
    cols = np.empty(nvals, dtype=np.intc)    # column index (term ID) for kth data item
    rows = np.empty(nvals, dtype=np.intc)    # row index (document index) for kth data item

    ind = 0  # current index in the sparse matrix data
    for doc_idx, doc in enumerate(docs):
        freqs = doc.frequencies
        n_vals = len(freqs)
        if n_vals == 0: continue   # skip empty documents

        ind_end = ind + n_vals
        cols[ind:ind_end] = np.fromiter(freqs.keys(), dtype=np.intc, count=n_vals)
        data[ind:ind_end] = np.fromiter(freqs.values(), dtype=dtype, count=n_vals)
        rows[ind:ind_end] = doc_idx

        ind = ind_end

    assert ind == len(data)

    if len(cols) > 0 and cols.min() < 0:
        raise ValueError('term IDs must be non-negative')

    max_term_id = int(cols.max()) if len(cols) > 0 else -1

    if n_terms is None:
        n_terms = max_term_id + 1
    elif max_term_id >= n_terms:
        raise ValueError(f'`n_terms` is {n_terms} but documents contain term ID {max_term_id}')

    logger.debug(f'creating sparse DTM of shape ({ndocs}, {n_terms}) with {nvals} values')

    return coo_matrix((data, (rows, cols)), shape=(ndocs, n_terms), dtype=dtype)


def documents_to_dtm_dataframe(docs: Sequence, vocab: Optional[Sequence] = None, doc_labels: Optional[Sequence] = None,
                               n_terms: Optional[int] = None) -> pd.DataFrame:
    """
    Convert documents `docs` to a dense document-term-matrix as pandas DataFrame. By default, the documents' names
    are used as row index and the term IDs as column names.

    :param docs: sequence of :class:`~tmdoc.document.Document` objects
    :param vocab: optional vocabulary used as column names, where ``vocab[k]`` is the term for term ID ``k``; its size
                  determines the number of columns
    :param doc_labels: optional row index; if None, use the documents' names
    :param n_terms: number of columns if `vocab` is None; if both are None, use the largest term ID plus one
    :return: pandas DataFrame of shape (number of documents, vocabulary size)
    """
    if vocab is not None:
        if n_terms is not None and n_terms != len(vocab):
            raise ValueError('`n_terms` must be equal to `len(vocab)`')
        n_terms = len(vocab)

    if doc_labels is None:
        doc_labels = [d.name for d in docs]
    elif len(doc_labels) != len(docs):
        raise ValueError('number of documents must be equal to `len(doc_labels)`')

    dtm = documents_to_sparse_dtm(docs, n_terms=n_terms)
    columns = list(vocab) if vocab is not None else list(range(dtm.shape[1]))

    return pd.DataFrame(dtm.toarray(), index=list(doc_labels), columns=columns)


def documents_to_dataframe(docs: Sequence) -> pd.DataFrame:
    """
    Convert the term frequencies of documents `docs` to a DataFrame in "long" format, i.e. with one row per document
    and term.

    :param docs: sequence of :class:`~tmdoc.document.Document` objects
    :return: pandas DataFrame with columns ``doc_id``, ``name``, ``label``, ``term_id``, ``frequency``
    """
    records = [(d.id, d.name, d.label, t, f) for d in docs for t, f in d.frequencies.items()]

    return pd.DataFrame.from_records(records, columns=['doc_id', 'name', 'label', 'term_id', 'frequency'])
