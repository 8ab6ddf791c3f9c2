"""
A minimal example to showcase a few features of tmdoc.

Term IDs are generated here with a naive whitespace tokenizer; in a real pipeline they come from your own
tokenizer and vocabulary.
"""

from tmdoc import Document, LabelMapping, filter_features, cosine_similarity, jaccard_similarity
from tmdoc.slda import slda_data


texts = {
    '/corpus/sports1.txt': ('sports', 'the team won the match'),
    '/corpus/sports2.txt': ('sports', 'the match was won by the other team'),
    '/corpus/politics1.txt': ('politics', 'the parliament passed the law'),
}

vocab = {}   # token -> term ID
docs = []
for doc_id, (path, (label, text)) in enumerate(texts.items()):
    doc = Document(path, doc_id, label=label)
    doc.content = text
    for tok in text.split():
        doc.increment(vocab.setdefault(tok, len(vocab)), 1)
    docs.append(doc)

for doc in docs:
    print(doc)

# pairwise similarities of first document to the others
for other in docs[1:]:
    print(f'{docs[0].name} vs. {other.name}: jaccard={jaccard_similarity(docs[0], other):.3f}, '
          f'cosine={cosine_similarity(docs[0], other):.3f}')

# remove the stopword "the" from all documents
features = [(term_id, 1.0) for tok, term_id in vocab.items() if tok != 'the']
filtered = filter_features(docs, features)

# generate term data and label data lines in sLDA format
term_lines, label_lines, mapping = slda_data(filtered, mapping=LabelMapping())
for term_line, label_line in zip(term_lines, label_lines):
    print(label_line, '|', term_line)
print(mapping.as_dict())
