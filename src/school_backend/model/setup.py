from sqlalchemy import Column, String

from .base import Base, Document, EntityMixin


class School(EntityMixin, Base):
    __tablename__ = 'school'

    name = Column(String(255), nullable=False)

    grades = Column(Document, nullable=False, default=list)
    courses = Column(Document, nullable=False, default=list)
    members = Column(Document, nullable=False, default=list)
    classes = Column(Document, nullable=False, default=list)
    messages = Column(Document, nullable=False, default=list)
    subjects = Column(Document, nullable=False, default=list)
    clubs = Column(Document, nullable=False, default=list)
    events = Column(Document, nullable=False, default=list)
    blackboards = Column(Document, nullable=False, default=list)


class SetupAccount(EntityMixin, Base):
    __tablename__ = 'setup_account'

    school_name = Column(String(255), nullable=False)
    # Assigned once the school is created
    school = Column(String(36), nullable=True)
