from sqlalchemy import Column, String

from .base import Base, Document, EntityMixin

USER_TYPES = ('STUDENT', 'TEACHER', 'ADMIN')


class User(EntityMixin, Base):
    __tablename__ = 'user'

    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    avatar = Column(String(2048), nullable=True)
    type = Column(String(16), nullable=False)

    classes = Column(Document, nullable=False, default=list)
    extra_courses = Column(Document, nullable=False, default=list)
    blackboards = Column(Document, nullable=False, default=list)
    clubs = Column(Document, nullable=False, default=list)
    chats = Column(Document, nullable=False, default=list)


class UserAccount(EntityMixin, Base):
    __tablename__ = 'user_account'

    user = Column(String(36), nullable=True)
    username = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    settings = Column(Document, nullable=False, default=list)
    permissions = Column(Document, nullable=False, default=list)
