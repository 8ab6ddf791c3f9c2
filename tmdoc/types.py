"""
Module with common types used in type annotations throughout this project.
"""

from typing import Tuple, Union

TermId = int
DocId = int
ClassLabel = str

Feature = Tuple[TermId, float]

Number = Union[int, float]
