"""Central constants shared across the ingestion/retrieval stack.

Payload key names are the wire format read by every consumer of the two
collections; renaming any of them is a breaking change.
"""

from typing import Final

# Chunk payload keys (snake_case except uploadDate / fileType, as stored).
K_DOCUMENT_ID: Final[str] = "document_id"
K_FILENAME: Final[str] = "filename"
K_CHUNK_INDEX: Final[str] = "chunk_index"
K_CONTENT: Final[str] = "content"
K_UPLOAD_DATE: Final[str] = "uploadDate"
K_EMBEDDING_MODEL: Final[str] = "embedding_model"
K_FILE_TYPE: Final[str] = "fileType"

# Full-document payload keys.
K_FULL_DOCUMENT_ID: Final[str] = "documentId"
K_FILE_SIZE: Final[str] = "fileSize"
K_CHUNK_COUNT: Final[str] = "chunkCount"
K_FULL_CONTENT: Final[str] = "fullContent"
K_FULL_EMBEDDING_MODEL: Final[str] = "embeddingModel"
K_IS_FULL_DOCUMENT: Final[str] = "isFullDocument"

# Supported source types.
FILE_TYPE_TEXT: Final[str] = "text"
FILE_TYPE_PDF: Final[str] = "pdf"
FILE_TYPE_AUDIO: Final[str] = "audio"
FILE_TYPE_IMAGE: Final[str] = "image"

# The full-document collection is a key-value table; its vectors are placeholders.
FULL_DOCUMENT_VECTOR_SIZE: Final[int] = 1
FULL_DOCUMENT_PLACEHOLDER_VECTOR: Final[tuple[float, ...]] = (1.0,)
