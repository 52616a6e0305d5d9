"""
Ingestion — directory scanning, text extraction, chunking, and embedding.

This module turns a directory of heterogeneous files (text, Markdown, PDF,
Word, CSV, JSON) into an in-memory corpus of attributed segments and embeds
them through a pluggable embedding service.  Nothing is persisted.
"""
