from pagecms.extensions import db
from .base import BaseModel


class ClipboardSlot(BaseModel):
    __tablename__ = "clipboard_slots"

    owner_id = db.Column(db.String(255), nullable=False, index=True)  # JWT identity
    slot = db.Column(db.String(100), nullable=False)
    payload = db.Column(db.JSON, nullable=False, default=dict)

    __table_args__ = (
        db.UniqueConstraint("owner_id", "slot", name="uq_clipboard_owner_slot"),
    )
