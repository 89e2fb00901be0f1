from sqlalchemy import BigInteger, Column, Float, String, Text

from .base import Base, Document, EntityMixin


class Event(EntityMixin, Base):
    __tablename__ = 'event'

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    host = Column(String(255), nullable=True)
    start_date = Column(BigInteger, nullable=True)
    end_date = Column(BigInteger, nullable=True)
    information = Column(Document, nullable=False, default=list)

    tickets = Column(Document, nullable=False, default=list)


class EventTicket(EntityMixin, Base):
    __tablename__ = 'event_ticket'

    event = Column(String(36), nullable=True)
    buyer = Column(String(36), nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    sale_date = Column(BigInteger, nullable=True)
