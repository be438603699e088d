"""
Document context for AI prompts.

Holds already-extracted document text (extraction from PDFs, Word files etc.
happens upstream) and caps each document before it reaches a prompt.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..config import DEFAULT_MAX_DOCUMENT_LENGTH, DEFAULT_MAX_UPLOADED_FILES
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Document:
    """A named block of plain text."""
    name: str
    text: str


class DocumentContext:
    """
    Bounded set of documents attached to a research run.

    Args:
        max_documents: Maximum number of documents accepted
        max_document_length: Characters of each document kept for prompts
    """

    def __init__(
        self,
        max_documents: int = DEFAULT_MAX_UPLOADED_FILES,
        max_document_length: int = DEFAULT_MAX_DOCUMENT_LENGTH
    ):
        self.max_documents = max_documents
        self.max_document_length = max_document_length
        self._documents: List[Document] = []

    def add(self, name: str, text: str) -> Document:
        """
        Attach a document, truncating it to max_document_length.

        Raises:
            ValueError: Blank name, or the context already holds
                max_documents documents
        """
        if not (name or "").strip():
            raise ValueError("Document name must not be empty")
        if len(self._documents) >= self.max_documents:
            raise ValueError(f"Maximum {self.max_documents} files allowed")

        capped = text[:self.max_document_length]
        if len(text) > self.max_document_length:
            logger.debug(f"Document {name} truncated from {len(text)} to {len(capped)} characters")

        document = Document(name=name, text=capped)
        self._documents.append(document)
        logger.info(f"Document attached: {name} ({len(capped)} chars)")
        return document

    @property
    def documents(self) -> List[Document]:
        return list(self._documents)

    @property
    def names(self) -> List[str]:
        return [d.name for d in self._documents]

    def __len__(self) -> int:
        return len(self._documents)

    def __bool__(self) -> bool:
        return bool(self._documents)

    def to_prompt_section(self) -> Optional[str]:
        """Render the documents as a prompt section, or None if empty."""
        if not self._documents:
            return None

        blocks = [f"--- Document: {d.name} ---\n{d.text}" for d in self._documents]
        return "Supporting documents provided by the analyst:\n\n" + "\n\n".join(blocks)
