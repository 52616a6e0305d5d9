"""Text chunking — split one document into overlapping segments."""

from __future__ import annotations

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from docintel.config import settings
from docintel.ingestion.models import Segment


class Chunker:
    """Split text into overlapping fixed-size :class:`Segment` objects.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
    """

    def __init__(
        self,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
    ) -> None:
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=["\n\n", "\n", ". ", " ", ""],
        )

    def split(self, text: str, source: str) -> list[Segment]:
        """Split *text* into segments attributed to *source*.

        Returns
        -------
        list[Segment]
            Segments in document order, ``position`` counting from 0.
            Blank text yields an empty list.
        """
        if not text.strip():
            return []
        chunks = self._splitter.split_documents([Document(page_content=text, metadata={"file_name": source})])
        return [
            Segment(text=chunk.page_content, source=chunk.metadata["file_name"], position=index)
            for index, chunk in enumerate(chunks)
        ]
