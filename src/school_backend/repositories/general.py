from school_backend.model import Blackboard, Course, Grade, SchoolClass, Subject
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class GradeRepository(EntityRepository):
    entity_type = "grades"
    model = Grade
    ttl = 10 * 60
    population_paths = (P("classes", "classes"),)


class ClassRepository(EntityRepository):
    entity_type = "classes"
    model = SchoolClass
    ttl = 10 * 60
    population_paths = (
        P("grade", "grades"),
        P("courses", "courses"),
        P("members", "users"),
    )


class CourseRepository(EntityRepository):
    entity_type = "courses"
    model = Course
    ttl = 10 * 60
    population_paths = (
        P("members", "users"),
        P("classes", "classes"),
        P("teacher", "users"),
        P("chat", "chats"),
        P("subject", "subjects"),
    )


class SubjectRepository(EntityRepository):
    entity_type = "subjects"
    model = Subject
    ttl = 10 * 60
    population_paths = (P("courses", "courses"),)


class BlackboardRepository(EntityRepository):
    entity_type = "blackboards"
    model = Blackboard
    ttl = 10 * 60
    population_paths = (P("author", "users"),)
