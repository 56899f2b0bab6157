from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text

from ..db.session import Base


class TransactionRecord(Base):
    """One stock movement row.

    ``date`` keeps the ISO 8601 timestamp as text, the same way the rest of
    the schema stores times, so sorting on the column matches chronological
    order for UTC values.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    date = Column(Text, nullable=False, index=True)
    type = Column(String(10), nullable=False, index=True)
    material_name = Column(Text, nullable=False, index=True)
    subtype = Column(Text, nullable=True)
    batch_number = Column(Text, nullable=False)
    origin_or_destination = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    observations = Column(Text, nullable=True)
