"""SQLAlchemy models for the marketplace entities conversations refer to.

Only the columns the messaging pipeline reads are mapped here; the listing,
textbook and note catalogues are owned by their own services.
"""

from sqlalchemy import Column, ForeignKey, Integer, String

from campusshare.infrastructure.database import Base


class ListingModel(Base):
    __tablename__ = "listing"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    seller_id = Column(Integer, ForeignKey("user.id"), nullable=True)


class TextbookModel(Base):
    __tablename__ = "textbook"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    owner_id = Column(Integer, ForeignKey("user.id"), nullable=True)


class NoteModel(Base):
    __tablename__ = "note"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    owner_id = Column(Integer, ForeignKey("user.id"), nullable=True)


__all__ = ["ListingModel", "TextbookModel", "NoteModel"]
