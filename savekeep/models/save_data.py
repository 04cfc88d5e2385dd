"""ORM model for the three save slots of an upgraded or admin account."""

from sqlalchemy import Column, DateTime, ForeignKey, Uuid

from savekeep.models.base import Base, JSONType

# slot number -> (blob column, timestamp column)
SLOT_COLUMNS: dict[int, tuple[str, str]] = {
    1: ("save_one", "saved_at_one"),
    2: ("save_two", "saved_at_two"),
    3: ("save_three", "saved_at_three"),
}


class SaveData(Base):
    """One row per account; slots start empty and are written independently."""

    __tablename__ = "save_data"

    account_id = Column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    save_one = Column(JSONType, nullable=True)
    save_two = Column(JSONType, nullable=True)
    save_three = Column(JSONType, nullable=True)
    saved_at_one = Column(DateTime(timezone=True), nullable=True)
    saved_at_two = Column(DateTime(timezone=True), nullable=True)
    saved_at_three = Column(DateTime(timezone=True), nullable=True)
