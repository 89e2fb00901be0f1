from sqlalchemy import BigInteger, Column, String

from .base import Base, Document, EntityMixin

CHAT_TYPES = ('PRIVATE', 'GROUP', 'COURSE', 'CLUB')


class Chat(EntityMixin, Base):
    __tablename__ = 'chat'

    type = Column(String(16), nullable=False)
    name = Column(String(255), nullable=False)
    avatar = Column(String(2048), nullable=True)

    targets = Column(Document, nullable=False, default=list)
    courses = Column(Document, nullable=False, default=list)
    clubs = Column(Document, nullable=False, default=list)
    messages = Column(Document, nullable=False, default=list)


class Message(EntityMixin, Base):
    __tablename__ = 'message'

    chat = Column(String(36), nullable=True)
    author = Column(String(36), nullable=True)

    # Content parts: text, image, file, video or poll objects
    content = Column(Document, nullable=False, default=list)
    reactions = Column(Document, nullable=False, default=list)
    edits = Column(Document, nullable=False, default=list)
    date = Column(BigInteger, nullable=True)
