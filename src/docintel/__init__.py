"""Rank the contents of a document folder against a question and hand the
best passages, labelled with their source file, to an answer generator."""

__version__ = "0.1.0"
