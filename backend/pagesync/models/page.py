from pagesync.extensions import db
from .base import BaseModel


class Page(BaseModel):
    __tablename__ = "pages"

    collection = db.Column(db.String(100), nullable=False, default="pages", index=True)

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    status = db.Column(db.String(50), nullable=False, default="draft", index=True)
    is_homepage = db.Column(db.Boolean, nullable=False, default=False, index=True)

    # Structured fields not promoted to columns: meta, conversionTracking, pageLayout, ...
    fields = db.Column(db.JSON, nullable=False, default=dict)
    editor_content = db.Column(db.JSON, nullable=True)

    # Versioned fields of the last published state, None until first publish
    published = db.Column(db.JSON, nullable=True)
    # Mirrors published["isHomepage"] so the live homepage is queryable
    published_is_homepage = db.Column(db.Boolean, nullable=False, default=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("collection", "slug", name="uq_page_slug_per_collection"),
    )

    versions = db.relationship(
        "PageVersion",
        back_populates="page",
        cascade="all, delete-orphan",
    )
