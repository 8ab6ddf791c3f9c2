"""
Module with default settings which can be changed during runtime, e.g.::

    import tmdoc

    tmdoc.defaults.label = 'unlabelled'
    # -> documents created without an explicit label now get the label "unlabelled":
    tmdoc.Document('/corpus/doc1.txt', 1).label

.. note:: Changing `label` does not affect :data:`tmdoc.document.NO_LABEL`, which always holds the original
          sentinel value.
"""

label = '[NONE]'
"""Class label used for documents that are created without a label."""

encoding = 'utf-8'
"""Character encoding used when writing sLDA export files."""
