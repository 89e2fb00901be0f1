from sqlalchemy import Column, String

from .base import Base, Document, EntityMixin

CLUB_STATES = ('SUGGESTED', 'REJECTED', 'ACCEPTED')


class Club(EntityMixin, Base):
    __tablename__ = 'club'

    name = Column(String(255), nullable=False)
    # description, location, meeting time/day, requirements and rules
    details = Column(Document, nullable=False, default=dict)
    state = Column(String(16), nullable=False, default='SUGGESTED')

    leaders = Column(Document, nullable=False, default=list)
    members = Column(Document, nullable=False, default=list)
    events = Column(Document, nullable=False, default=list)
    chat = Column(String(36), nullable=True)
