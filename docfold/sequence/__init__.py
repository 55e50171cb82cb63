"""Sentence samples, span decoding and document grouping."""

from .documents import Document, DocumentStream, flatten_documents, group_documents, read_document
from .sample import SequenceLabelSample
from .span import Span, decode_tags, encode_spans

__all__ = [
    "Document",
    "DocumentStream",
    "SequenceLabelSample",
    "Span",
    "decode_tags",
    "encode_spans",
    "flatten_documents",
    "group_documents",
    "read_document",
]
