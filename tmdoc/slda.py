"""
Export of documents to the text input format of supervised LDA (sLDA) trainers.

The sLDA format consists of two files with one line per document:

1. term data: ``<number of distinct terms> <term_id>:<frequency> <term_id>:<frequency> ...``
2. label data: class label of the document as non-negative integer

The integers for the class labels are assigned by a :class:`LabelMapping`, which must be shared across all documents
of one export so that the same label always gets the same integer.
"""

import logging
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from bidict import bidict

from . import defaults
from .types import ClassLabel
from .utils import format_number, pickle_data, unpickle_file


logger = logging.getLogger('tmdoc')


#%% label mapping


class LabelMapping:
    """
    Bidirectional mapping between class labels and non-negative integers that is used when exporting class labels
    in sLDA format. A new label gets the next unused integer, starting at 0.

    Instances are meant to be passed explicitly to all export calls of one export session. Allocating an integer
    for a new label is guarded by a lock, so that a mapping can be shared between threads without two labels
    getting the same integer.
    """

    def __init__(self, mapping: Optional[Mapping[ClassLabel, int]] = None):
        """
        Create a new label mapping, optionally initialized from an existing label -> integer mapping `mapping`.

        :param mapping: optional mapping of labels to integers; integers must be unique and non-negative
        """
        self._lock = threading.Lock()

        if mapping is None:
            self._bimap = bidict()
        else:
            if any(not isinstance(i, int) or i < 0 for i in mapping.values()):
                raise ValueError('all values in `mapping` must be non-negative integers')
            if len(set(mapping.values())) != len(mapping):
                raise ValueError('integers in `mapping` must be unique')
            self._bimap = bidict(mapping)

    def __repr__(self) -> str:
        return f'LabelMapping ({len(self)} labels)'

    def __len__(self) -> int:
        return len(self._bimap)

    def __contains__(self, label: Any) -> bool:
        return label in self._bimap

    def __iter__(self) -> Iterator[ClassLabel]:
        return iter(list(self._bimap.keys()))

    def __eq__(self, other) -> bool:
        if isinstance(other, LabelMapping):
            return self.as_dict() == other.as_dict()
        return NotImplemented

    def __getstate__(self) -> Dict[str, Any]:
        # locks can't be pickled
        return {'mapping': self.as_dict()}

    def __setstate__(self, state: Dict[str, Any]):
        self._lock = threading.Lock()
        self._bimap = bidict(state['mapping'])

    @property
    def bimap(self) -> bidict:
        """Copy of the underlying label -> integer bidirectional dictionary."""
        return self._bimap.copy()

    def index_for(self, label: ClassLabel) -> int:
        """
        Get the integer for `label`.

        :param label: class label
        :return: integer assigned to `label`; raises ``KeyError`` if `label` is unknown
        """
        return self._bimap[label]

    def label_for(self, index: int) -> ClassLabel:
        """
        Get the class label for integer `index`.

        :param index: integer
        :return: label to which `index` is assigned; raises ``KeyError`` if `index` is unknown
        """
        return self._bimap.inverse[index]

    def get_or_assign(self, label: ClassLabel) -> int:
        """
        Get the integer for `label`. If `label` is not in this mapping yet, assign the next unused integer to it.

        :param label: class label
        :return: integer assigned to `label`
        """
        with self._lock:
            return _get_or_assign(self._bimap, label)

    def as_dict(self) -> Dict[ClassLabel, int]:
        """
        Return this mapping as plain dictionary.

        :return: dict mapping labels to integers
        """
        return dict(self._bimap)


def _get_or_assign(bimap: bidict, label: ClassLabel) -> int:
    """Helper function to get or newly assign the integer for `label` in `bimap`."""
    if label in bimap:
        return bimap[label]

    index = len(bimap)
    while index in bimap.inverse:   # may happen if the bimap was initialized with non-consecutive integers
        index += 1

    bimap[label] = index
    logger.debug(f'assigned integer {index} to label "{label}"')

    return index


#%% export of single documents


def get_slda_term_data(doc) -> str:
    """
    Output the term frequencies of document `doc` in sLDA format, i.e. as single line
    ``<number of distinct terms> <term_id>:<frequency> ...``. The term frequency pairs are in the order of the
    document's term frequency mapping. Frequencies are formatted as shortest string that is parsed back to the same
    double precision value (see :func:`~tmdoc.utils.format_number`).

    :param doc: :class:`~tmdoc.document.Document` object
    :return: term data as string without line break
    """
    freqs = doc.frequencies
    return ' '.join([str(len(freqs))] + [f'{t}:{format_number(f)}' for t, f in freqs.items()])


def get_slda_label_data(doc, mapping: Union[LabelMapping, bidict]) -> str:
    """
    Output the class label of document `doc` as integer string for sLDA. The integer is looked up in `mapping`. If
    the label is not in `mapping` yet, the next unused integer is assigned to it and `mapping` is updated.

    .. note:: When passing a :class:`LabelMapping`, the lookup and assignment of integers is thread-safe. When passing
              a plain ``bidict``, the caller must make sure that no two threads update it at the same time.

    :param doc: :class:`~tmdoc.document.Document` object
    :param mapping: label mapping shared across all documents of one export
    :return: integer of the document's class label as string
    """
    if isinstance(mapping, LabelMapping):
        index = mapping.get_or_assign(doc.label)
    elif isinstance(mapping, bidict):
        index = _get_or_assign(mapping, doc.label)
    else:
        raise ValueError('`mapping` must be a LabelMapping or bidict instance')

    return str(index)


#%% export of multiple documents


def slda_data(docs: Sequence, mapping: Optional[LabelMapping] = None) -> Tuple[List[str], List[str], LabelMapping]:
    """
    Generate sLDA term data and label data for all documents in `docs`.

    :param docs: sequence of :class:`~tmdoc.document.Document` objects
    :param mapping: label mapping to use; if None, create a new one
    :return: tuple with (1) list of term data lines, (2) list of label data lines, (3) the label mapping; the lines
             don't contain line breaks
    """
    if mapping is None:
        mapping = LabelMapping()

    term_lines = []
    label_lines = []
    for doc in docs:
        term_lines.append(get_slda_term_data(doc))
        label_lines.append(get_slda_label_data(doc, mapping))

    logger.info(f'generated sLDA data for {len(term_lines)} documents with {len(mapping)} distinct labels')

    return term_lines, label_lines, mapping


def write_slda_files(docs: Sequence, term_file, label_file, mapping: Optional[LabelMapping] = None,
                     encoding: Optional[str] = None) -> LabelMapping:
    """
    Write sLDA term data and label data for all documents in `docs` to `term_file` and `label_file` respectively.
    Each document results in one line in each file.

    :param docs: sequence of :class:`~tmdoc.document.Document` objects
    :param term_file: target file path or text file handle for term data
    :param label_file: target file path or text file handle for label data
    :param mapping: label mapping to use; if None, create a new one
    :param encoding: character encoding when file paths are passed; if None, use :data:`tmdoc.defaults.encoding`
    :return: the label mapping; store it e.g. via :func:`save_label_mapping` to be able to reproduce the labels later
    """
    term_lines, label_lines, mapping = slda_data(docs, mapping=mapping)
    encoding = encoding or defaults.encoding

    for lines, target in ((term_lines, term_file), (label_lines, label_file)):
        if isinstance(target, str):
            logger.info(f'writing {len(lines)} lines to file "{target}"')
            with open(target, 'w', encoding=encoding) as f:
                _write_lines(f, lines)
        else:
            _write_lines(target, lines)

    return mapping


def _write_lines(f, lines: List[str]) -> None:
    """Helper function to write `lines` as newline-terminated lines to file handle `f`."""
    for line in lines:
        f.write(line + '\n')


#%% persisting label mappings


def save_label_mapping(mapping: LabelMapping, picklefile: str) -> None:
    """
    Save label mapping `mapping` to a pickle file.

    :param mapping: label mapping
    :param picklefile: target file path or file handle
    """
    logger.info(f'saving label mapping with {len(mapping)} labels')
    pickle_data(mapping.as_dict(), picklefile)


def load_label_mapping(picklefile: str) -> LabelMapping:
    """
    Load a label mapping from a pickle file that was created with :func:`save_label_mapping`.

    .. warning:: Python pickle files may contain malicious code. You should only load pickle files from trusted sources.

    :param picklefile: source file path or file handle
    :return: label mapping
    """
    return LabelMapping(unpickle_file(picklefile))
