"""Document-level operations against an IndexTank index."""

from indextank.api.document import MAX_DOCID_BYTES, Document, DocumentRef

__all__ = ["Document", "DocumentRef", "MAX_DOCID_BYTES"]
