from typing import Optional
from pydantic import Field

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class GradeCreate(EntityCreate):
    level: int = Field(ge=0, description="Grade level")
    classes: RefList = Field(default_factory=list)


class GradeUpdate(EntityUpdate):
    level: Optional[int] = Field(None, ge=0)
    classes: Optional[RefList] = None


class GradeInterface(EntityInterface):
    create = GradeCreate
    update = GradeUpdate
    entity_type = "grades"
    endpoint = "grades"


class ClassCreate(EntityCreate):
    specified_grade: str = Field(min_length=1, max_length=32, description="Class label within its grade, e.g. '7b'")
    grade: Ref = None
    courses: RefList = Field(default_factory=list)
    members: RefList = Field(default_factory=list)


class ClassUpdate(EntityUpdate):
    nullable = frozenset({'grade'})

    specified_grade: Optional[str] = Field(None, min_length=1, max_length=32)
    grade: Ref = None
    courses: Optional[RefList] = None
    members: Optional[RefList] = None


class ClassInterface(EntityInterface):
    create = ClassCreate
    update = ClassUpdate
    entity_type = "classes"
    endpoint = "classes"


class CourseCreate(EntityCreate):
    name: Optional[str] = Field(None, max_length=255)
    members: RefList = Field(default_factory=list)
    classes: RefList = Field(default_factory=list)
    teacher: Ref = None
    chat: Ref = None
    subject: Ref = None


class CourseUpdate(EntityUpdate):
    nullable = frozenset({'name', 'teacher', 'chat', 'subject'})

    name: Optional[str] = Field(None, max_length=255)
    members: Optional[RefList] = None
    classes: Optional[RefList] = None
    teacher: Ref = None
    chat: Ref = None
    subject: Ref = None


class CourseInterface(EntityInterface):
    create = CourseCreate
    update = CourseUpdate
    entity_type = "courses"
    endpoint = "courses"


class SubjectCreate(EntityCreate):
    type: str = Field(min_length=1, max_length=255, description="Subject type, e.g. 'Mathematics'")
    courses: RefList = Field(default_factory=list)


class SubjectUpdate(EntityUpdate):
    type: Optional[str] = Field(None, min_length=1, max_length=255)
    courses: Optional[RefList] = None


class SubjectInterface(EntityInterface):
    create = SubjectCreate
    update = SubjectUpdate
    entity_type = "subjects"
    endpoint = "subjects"


class BlackboardCreate(EntityCreate):
    title: str = Field(min_length=1, max_length=255)
    author: Ref = None
    cover_image: Optional[str] = Field(None, max_length=2048)
    text: str = Field(min_length=1)


class BlackboardUpdate(EntityUpdate):
    nullable = frozenset({'author', 'cover_image'})

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Ref = None
    cover_image: Optional[str] = Field(None, max_length=2048)
    text: Optional[str] = Field(None, min_length=1)


class BlackboardInterface(EntityInterface):
    create = BlackboardCreate
    update = BlackboardUpdate
    entity_type = "blackboards"
    endpoint = "blackboards"
