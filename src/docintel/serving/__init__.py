"""
Serving — FastAPI application for the retriever.

This module exposes retrieval over HTTP so the conversational layer can run
in a separate process or container.
"""
