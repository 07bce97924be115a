from .base import DocumentNotFound, DocumentStore, FindResult, StoreError, StoreValidationError
from .sqlalchemy_store import SqlAlchemyDocumentStore

__all__ = [
    "DocumentNotFound",
    "DocumentStore",
    "FindResult",
    "SqlAlchemyDocumentStore",
    "StoreError",
    "StoreValidationError",
]
