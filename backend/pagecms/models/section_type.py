from pagecms.extensions import db
from .base import BaseModel


class SectionType(BaseModel):
    __tablename__ = "section_types"

    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    icon = db.Column(db.String(100), nullable=True)  # display hint, e.g. "HelpCircle"

    # Content schema: properties / required / fields / items_schema
    schema = db.Column(db.JSON, nullable=False, default=dict)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    allowed_pages = db.Column(db.JSON, nullable=False, default=list)  # page types this slug applies to

    def allows_page(self, page_type: str) -> bool:
        return page_type in (self.allowed_pages or [])
