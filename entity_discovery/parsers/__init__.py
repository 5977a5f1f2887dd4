"""
Input parsers.

JSONPath extraction and the streaming reader for the input JSON array.
"""

from .jsonpath import JSONPath, PathSyntaxError, compile_path, extract
from .stream import MalformedInputError, iter_documents

__all__ = [
    'JSONPath',
    'PathSyntaxError',
    'compile_path',
    'extract',
    'MalformedInputError',
    'iter_documents',
]
