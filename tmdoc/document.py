"""
Module that implements the :class:`Document` class representing a text document as sparse bag of weighted terms,
along with :func:`filter_features` for deriving documents that are restricted to a set of terms.
"""

from __future__ import annotations   # req. for classmethod return type; see https://stackoverflow.com/a/49872353
import logging
import os
from types import MappingProxyType
from typing import Optional, Dict, Iterable, List, Mapping, Sequence, Union

from . import defaults
from .types import TermId, DocId, ClassLabel, Feature, Number
from .similarity import jaccard_similarity, cosine_similarity
from .slda import get_slda_term_data, get_slda_label_data


#%% constants

#: sentinel class label for documents that are not assigned to any category
NO_LABEL = '[NONE]'


logger = logging.getLogger('tmdoc')


#%% document class

class Document:
    """
    A class that represents an indexable document as mapping of term IDs to frequencies. Term IDs are opaque
    integers that are assigned by a tokenizer or vocabulary outside of this package.

    A document is created once per source unit with a path, an ID and optionally a class label. Its term frequencies
    are then accumulated via :meth:`increment`. Afterwards, the document is usually only read, e.g. for calculating
    similarities, filtering or exporting it to the sLDA format.

    Optionally, the raw text content can be stored in the document via :attr:`content`. Not all documents are
    guaranteed to have their content stored in the object itself.
    """

    def __init__(self, path: str, id: DocId, label: Optional[ClassLabel] = None):
        """
        Create a new :class:`~tmdoc.document.Document` object with an empty term frequency mapping.

        :param path: path to the document; can also be a logical identifier
        :param id: document ID; should be unique within a corpus
        :param label: class label; if None, use the default label from :data:`tmdoc.defaults.label`
        """
        self._path = path
        self._id = id
        self._label = defaults.label if label is None else label
        self._name = os.path.basename(path)   # the short name (not the full path)
        self._length = 0.0   # sum of all frequencies, *not* the number of unique terms
        self._frequencies = {}   # type: Dict[TermId, float]
        self._content = None   # type: Optional[str]
        self._contains_content = False

    def __repr__(self) -> str:
        """
        Document summary.

        :return: document summary as string
        """
        return f'Document "{self.name}" (ID {self.id}, label "{self.label}", {len(self._frequencies)} terms, ' \
               f'length {self.length})'

    def __str__(self) -> str:
        """
        Document summary.

        :return: document summary as string
        """
        return self.__repr__()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return NotImplemented

        return self.id == other.id and self.path == other.path and self.label == other.label \
            and self.length == other.length and self._frequencies == other._frequencies \
            and self._content == other._content and self._contains_content == other._contains_content

    __hash__ = None   # documents are mutable

    def __copy__(self) -> Document:
        """
        Make a copy of this Document, returning a new object with the same data.

        :return: new Document object
        """
        return self._copy_with_frequencies(self._frequencies)

    @property
    def path(self) -> str:
        """Path to this document (the argument to the constructor)."""
        return self._path

    @property
    def id(self) -> DocId:
        """Document ID."""
        return self._id

    @property
    def name(self) -> str:
        """Short name of this document, i.e. the last component of its path."""
        return self._name

    @property
    def label(self) -> ClassLabel:
        """Class label, i.e. the classification category this document is in."""
        return self._label

    @label.setter
    def label(self, label: ClassLabel):
        self._label = label

    def set_label(self, label: ClassLabel) -> None:
        """
        Set the class label of this document.

        :param label: new class label
        """
        self.label = label

    @property
    def length(self) -> float:
        """
        Total of all frequencies recorded for this document. This is *not* the number of unique terms.
        """
        return self._length

    @property
    def frequencies(self) -> Mapping[TermId, float]:
        """
        Read-only view of the mapping of term IDs to frequencies. Don't rely on any order when iterating through it.
        """
        return MappingProxyType(self._frequencies)

    @property
    def content(self) -> Optional[str]:
        """Text content of this document or None if it was not set."""
        return self._content

    @content.setter
    def content(self, content: str):
        self._content = content
        self._contains_content = True

    def set_content(self, content: str) -> None:
        """
        Store the text content `content` in this document. This does not change the term frequencies.

        :param content: text content
        """
        self.content = content

    @property
    def contains_content(self) -> bool:
        """True if the text content was stored in this document, else False."""
        return self._contains_content

    def increment(self, term_id: TermId, amount: Number) -> None:
        """
        Increment the frequency of term `term_id` by `amount`. Adds a new entry for `term_id` if it is not yet
        recorded for this document. The document length is incremented by `amount`, too.

        .. note:: `amount` is not checked. Passing a negative amount may result in a negative frequency, so callers
                  that require non-negative frequencies must ensure this themselves.

        :param term_id: term ID
        :param amount: amount by which the frequency is incremented
        """
        amount = float(amount)
        self._frequencies[term_id] = self._frequencies.get(term_id, 0.0) + amount
        self._length += amount

    def frequency(self, term_id: TermId) -> float:
        """
        Get the frequency of term `term_id` in this document.

        :param term_id: term ID
        :return: frequency of the term or 0 if it was never incremented
        """
        return self._frequencies.get(term_id, 0.0)

    def get_slda_term_data(self) -> str:
        """
        Term frequency data of this document in sLDA format.

        .. seealso:: :func:`tmdoc.slda.get_slda_term_data`

        :return: a single line (without line break) in sLDA format
        """
        return get_slda_term_data(self)

    def get_slda_label_data(self, mapping) -> str:
        """
        Class label of this document as integer for sLDA.

        .. seealso:: :func:`tmdoc.slda.get_slda_label_data`

        :param mapping: :class:`~tmdoc.slda.LabelMapping` or ``bidict`` shared across all exported documents
        :return: integer for this document's label as string
        """
        return get_slda_label_data(self, mapping)

    @staticmethod
    def jaccard_similarity(a: Document, b: Document) -> float:
        """
        Jaccard similarity between `a` and `b`. See :func:`tmdoc.similarity.jaccard_similarity`.
        """
        return jaccard_similarity(a, b)

    @staticmethod
    def cosine_similarity(a: Document, b: Document) -> float:
        """
        Cosine similarity between `a` and `b`. See :func:`tmdoc.similarity.cosine_similarity`.
        """
        return cosine_similarity(a, b)

    @staticmethod
    def filter_features(docs: Union[Document, Iterable[Document]], features: Sequence[Feature]) \
            -> Union[Document, List[Document]]:
        """
        Keep only the terms in `features` in a document or in a sequence of documents. See
        :func:`tmdoc.document.filter_features`.
        """
        return filter_features(docs, features)

    def _copy_with_frequencies(self, frequencies: Dict[TermId, float]) -> Document:
        """
        Helper function to create a copy of this document with the same scalar attributes but frequencies
        `frequencies`. The length of the new document is the sum of `frequencies`.
        """
        doc = Document(self._path, self._id)
        doc._label = self._label
        doc._name = self._name
        doc._content = self._content
        doc._contains_content = self._contains_content
        doc._frequencies = dict(frequencies)
        doc._length = float(sum(doc._frequencies.values()))

        return doc


#%% document functions


def filter_features(docs: Union[Document, Iterable[Document]], features: Sequence[Feature]) \
        -> Union[Document, List[Document]]:
    """
    Keep only those terms whose IDs appear in `features` in a single document or in each document of a sequence of
    documents. The input documents are not changed; instead, new documents are returned that retain the ID, path,
    name, label and content of their originals. The length of a filtered document is the sum of its remaining
    frequencies.

    :param docs: either a single :class:`~tmdoc.document.Document` or a sequence of documents
    :param features: sequence of ``(term_id, weight)`` pairs; only the term IDs are used for filtering, the weights
                     are ignored
    :return: a single filtered document if `docs` is a document, else a list of filtered documents in the order of
             the input documents
    """
    keep_terms = _feature_terms(features)

    if isinstance(docs, Document):
        return _filter_document(docs, keep_terms)

    try:
        docs = list(docs)
    except TypeError:
        raise ValueError('`docs` must be a Document or an iterable of Documents')

    if not all(isinstance(d, Document) for d in docs):
        raise ValueError('all elements in `docs` must be Document objects')

    logger.info(f'filtering {len(docs)} documents for {len(keep_terms)} features')

    return [_filter_document(d, keep_terms) for d in docs]


def _feature_terms(features: Sequence[Feature]) -> set:
    """Helper function to get the set of term IDs from a sequence of ``(term_id, weight)`` pairs."""
    try:
        return {term_id for term_id, _ in features}
    except (TypeError, ValueError):
        raise ValueError('`features` must be a sequence of (term_id, weight) pairs')


def _filter_document(doc: Document, keep_terms: set) -> Document:
    """Helper function to filter a single document `doc` so that only terms in `keep_terms` remain."""
    return doc._copy_with_frequencies({t: f for t, f in doc.frequencies.items() if t in keep_terms})
