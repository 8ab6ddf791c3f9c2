import io
import pickle
import threading

import pytest
from bidict import bidict
from hypothesis import given, strategies as st

from ._testtools import strategy_document, make_document

from tmdoc import Document, LabelMapping, get_slda_term_data, get_slda_label_data
from tmdoc.slda import slda_data, write_slda_files, save_label_mapping, load_label_mapping


#%% term data


def test_get_slda_term_data():
    doc = make_document({5: 2.0, 9: 1.0})
    line = doc.get_slda_term_data()
    assert line in {'2 5:2.0 9:1.0', '2 9:1.0 5:2.0'}
    assert get_slda_term_data(doc) == line


def test_get_slda_term_data_formatting():
    doc = Document('doc', 0)
    doc.increment(3, 1)
    doc.increment(4, 0.1)
    doc.increment(4, 0.2)
    doc.increment(7, 1e-20)

    parts = doc.get_slda_term_data().split(' ')
    assert parts[0] == '3'
    pairs = dict(p.split(':') for p in parts[1:])
    assert pairs['3'] == '1.0'
    assert float(pairs['4']) == doc.frequency(4) == 0.1 + 0.2
    assert float(pairs['7']) == 1e-20


def test_get_slda_term_data_empty():
    assert Document('doc', 0).get_slda_term_data() == '0'


@given(doc=strategy_document())
def test_get_slda_term_data_roundtrip(doc):
    line = doc.get_slda_term_data()
    assert line == line.strip()
    assert '  ' not in line

    parts = line.split(' ')
    assert int(parts[0]) == len(doc.frequencies)

    parsed = {}
    for p in parts[1:]:
        t, f = p.split(':')
        parsed[int(t)] = float(f)

    assert parsed == dict(doc.frequencies)


#%% label data


def test_get_slda_label_data():
    mapping = LabelMapping()
    doc_a1 = Document('a1', 0, label='a')
    doc_a2 = Document('a2', 1, label='a')
    doc_b = Document('b', 2, label='b')
    doc_none = Document('n', 3)

    assert doc_a1.get_slda_label_data(mapping) == '0'
    assert doc_a2.get_slda_label_data(mapping) == '0'
    assert doc_b.get_slda_label_data(mapping) == '1'
    assert get_slda_label_data(doc_none, mapping) == '2'
    assert doc_a1.get_slda_label_data(mapping) == '0'

    assert len(mapping) == 3
    assert mapping.as_dict() == {'a': 0, 'b': 1, '[NONE]': 2}
    assert mapping.label_for(1) == 'b'
    assert mapping.index_for('[NONE]') == 2
    assert 'a' in mapping
    assert 'c' not in mapping
    assert list(mapping) == ['a', 'b', '[NONE]']


def test_get_slda_label_data_with_bidict():
    mapping = bidict()
    assert Document('a', 0, label='a').get_slda_label_data(mapping) == '0'
    assert Document('b', 1, label='b').get_slda_label_data(mapping) == '1'
    assert mapping.inverse[1] == 'b'


def test_get_slda_label_data_invalid_mapping():
    with pytest.raises(ValueError):
        Document('a', 0, label='a').get_slda_label_data({})


@given(labels=st.lists(st.text(max_size=3)))
def test_get_slda_label_data_stable_and_unique(labels):
    mapping = LabelMapping()
    returned = {}
    for i, lbl in enumerate(labels):
        res = Document('doc', i, label=lbl).get_slda_label_data(mapping)
        assert res.isdigit()
        if lbl in returned:
            assert res == returned[lbl]
        else:
            assert res not in returned.values()
            returned[lbl] = res

    assert len(mapping) == len(set(labels))
    assert sorted(int(v) for v in returned.values()) == list(range(len(returned)))


def test_label_mapping_init():
    mapping = LabelMapping({'a': 0, 'c': 2})
    assert mapping.as_dict() == {'a': 0, 'c': 2}
    assert mapping.get_or_assign('b') == 3
    assert mapping.get_or_assign('d') == 4
    assert mapping.get_or_assign('a') == 0

    with pytest.raises(ValueError):
        LabelMapping({'a': 0, 'b': 0})

    with pytest.raises(ValueError):
        LabelMapping({'a': -1})

    with pytest.raises(KeyError):
        mapping.label_for(99)

    with pytest.raises(KeyError):
        mapping.index_for('x')


def test_label_mapping_bimap_is_copy():
    mapping = LabelMapping({'a': 0})
    bm = mapping.bimap
    bm['b'] = 1
    assert 'b' not in mapping
    assert repr(mapping) == 'LabelMapping (1 labels)'


def test_label_mapping_threads():
    mapping = LabelMapping()
    labels = ['label%d' % (i % 50) for i in range(2000)]
    results = [None] * len(labels)

    def worker(offset):
        for i in range(offset, len(labels), 8):
            results[i] = mapping.get_or_assign(labels[i])

    threads = [threading.Thread(target=worker, args=(k, )) for k in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(mapping) == 50
    assert sorted(mapping.as_dict().values()) == list(range(50))
    for lbl, res in zip(labels, results):
        assert res == mapping.index_for(lbl)


def test_label_mapping_pickle():
    mapping = LabelMapping({'a': 0, 'b': 1})
    unpickled = pickle.loads(pickle.dumps(mapping))
    assert unpickled == mapping
    assert unpickled.get_or_assign('c') == 2


def test_save_load_label_mapping(tmp_path):
    mapping = LabelMapping()
    for lbl in ('x', 'y', 'z'):
        mapping.get_or_assign(lbl)

    pfile = str(tmp_path / 'mapping.pickle')
    save_label_mapping(mapping, pfile)
    loaded = load_label_mapping(pfile)

    assert isinstance(loaded, LabelMapping)
    assert loaded == mapping


#%% multiple documents


def _example_docs():
    d1 = make_document({5: 2.0}, path='d1', id=0, label='pos')
    d2 = make_document({1: 1.5, 2: 3.0}, path='d2', id=1, label='neg')
    d3 = make_document({}, path='d3', id=2, label='pos')
    return [d1, d2, d3]


def test_slda_data():
    term_lines, label_lines, mapping = slda_data(_example_docs())
    assert term_lines == ['1 5:2.0', '2 1:1.5 2:3.0', '0']
    assert label_lines == ['0', '1', '0']
    assert mapping.as_dict() == {'pos': 0, 'neg': 1}

    # reuse existing mapping
    existing = LabelMapping({'neg': 0})
    _, label_lines, mapping = slda_data(_example_docs(), mapping=existing)
    assert mapping is existing
    assert label_lines == ['1', '0', '1']


def test_write_slda_files_handles():
    term_f = io.StringIO()
    label_f = io.StringIO()
    mapping = write_slda_files(_example_docs(), term_f, label_f)

    assert term_f.getvalue() == '1 5:2.0\n2 1:1.5 2:3.0\n0\n'
    assert label_f.getvalue() == '0\n1\n0\n'
    assert len(mapping) == 2


def test_write_slda_files_paths(tmp_path):
    term_path = str(tmp_path / 'terms.txt')
    label_path = str(tmp_path / 'labels.txt')
    write_slda_files(_example_docs(), term_path, label_path)

    with open(term_path, encoding='utf-8') as f:
        assert f.read().splitlines() == ['1 5:2.0', '2 1:1.5 2:3.0', '0']

    with open(label_path, encoding='utf-8') as f:
        assert f.read().splitlines() == ['0', '1', '0']
