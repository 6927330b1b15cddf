from pagecms.extensions import db
from .base import BaseModel

class PageSection(BaseModel):
    __tablename__ = "page_sections"

    page_type = db.Column(db.String(100), nullable=False, index=True)  # home, service, project
    entity_id = db.Column(db.String(36), nullable=True, index=True)
    section_type = db.Column(db.String(100), nullable=False)  # slug into section_types

    title = db.Column(db.String(255), nullable=True)
    subtitle = db.Column(db.Text, nullable=True)
    content = db.Column(db.JSON, nullable=False, default=dict)

    # No unique constraint: duplicates are tolerated and tie-break on created_at
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.Index("idx_page_section_scope_order", "page_type", "entity_id", "display_order"),
    )
