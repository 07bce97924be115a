from pagesync.extensions import db
from .base import BaseModel


class PageVersion(BaseModel):
    __tablename__ = "page_versions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False
    )
    collection = db.Column(db.String(100), nullable=False, index=True)

    # Display counter, not a key; concurrent saves may repeat a number
    version = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False)
    # draft | published

    snapshot = db.Column(db.JSON, nullable=False)
    autosave = db.Column(db.Boolean, nullable=False, default=False)

    page = db.relationship("Page", back_populates="versions")

    __table_args__ = (
        db.Index("idx_page_version_page", "page_id"),
    )
