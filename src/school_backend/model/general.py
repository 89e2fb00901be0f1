from sqlalchemy import Column, Integer, String, Text

from .base import Base, Document, EntityMixin


class Grade(EntityMixin, Base):
    __tablename__ = 'grade'

    level = Column(Integer, nullable=False)
    classes = Column(Document, nullable=False, default=list)


class SchoolClass(EntityMixin, Base):
    __tablename__ = 'school_class'

    specified_grade = Column(String(32), nullable=False)
    grade = Column(String(36), nullable=True)
    courses = Column(Document, nullable=False, default=list)
    members = Column(Document, nullable=False, default=list)


class Course(EntityMixin, Base):
    __tablename__ = 'course'

    name = Column(String(255), nullable=True)
    members = Column(Document, nullable=False, default=list)
    classes = Column(Document, nullable=False, default=list)
    teacher = Column(String(36), nullable=True)
    chat = Column(String(36), nullable=True)
    subject = Column(String(36), nullable=True)


class Subject(EntityMixin, Base):
    __tablename__ = 'subject'

    type = Column(String(255), nullable=False)
    courses = Column(Document, nullable=False, default=list)


class Blackboard(EntityMixin, Base):
    __tablename__ = 'blackboard'

    title = Column(String(255), nullable=False)
    author = Column(String(36), nullable=True)
    cover_image = Column(String(2048), nullable=True)
    text = Column(Text, nullable=False)
