"""
Tests for reference population against the sqlite record store.
"""

import pytest

from school_backend.model import Course, Subject, User
from school_backend.population import PopulationPath, Populator
from school_backend.exceptions import DatabaseError


async def seed(record_store):
    await record_store.create_document(User, {
        "id": "u-teacher", "first_name": "Ada", "last_name": "Lovelace", "type": "TEACHER",
        "classes": ["c-missing"],
    })
    await record_store.create_document(User, {
        "id": "u-student", "first_name": "Alan", "last_name": "Turing", "type": "STUDENT",
    })
    await record_store.create_document(Course, {
        "id": "course-1", "name": "Algebra", "teacher": "u-teacher",
        "members": ["u-student", "u-gone"], "subject": "s-1",
    })
    await record_store.create_document(Subject, {"id": "s-1", "type": "Mathematics", "courses": ["course-1"]})


@pytest.mark.unit
class TestPopulator:

    @pytest.mark.asyncio
    async def test_expands_single_and_list_references(self, registry, record_store):
        await seed(record_store)
        course = await record_store.get_document(Course, "course-1")

        populated = await registry.populator.populate("courses", course)

        assert populated["teacher"]["first_name"] == "Ada"
        assert [member["id"] for member in populated["members"]] == ["u-student"]
        assert populated["subject"]["type"] == "Mathematics"
        # input untouched
        assert course["teacher"] == "u-teacher"

    @pytest.mark.asyncio
    async def test_dangling_single_reference_becomes_none(self, registry, record_store):
        await seed(record_store)
        await record_store.update_document(Course, "course-1", {"teacher": "u-gone"})
        course = await record_store.get_document(Course, "course-1")

        populated = await registry.populator.populate("courses", course)

        assert populated["teacher"] is None

    @pytest.mark.asyncio
    async def test_second_level_is_expanded_third_level_keeps_ids(self, registry, record_store):
        await seed(record_store)
        subject = await record_store.get_document(Subject, "s-1")

        populated = await registry.populator.populate("subjects", subject)

        course = populated["courses"][0]
        assert course["name"] == "Algebra"
        assert course["teacher"]["id"] == "u-teacher"
        assert course["teacher"]["classes"] == ["c-missing"]
        assert course["subject"]["courses"] == ["course-1"]

    @pytest.mark.asyncio
    async def test_unset_references_are_left_alone(self, registry, record_store):
        await record_store.create_document(Course, {"id": "course-2", "name": "Empty"})
        course = await record_store.get_document(Course, "course-2")

        populated = await registry.populator.populate("courses", course)

        assert populated["teacher"] is None
        assert populated["members"] == []

    @pytest.mark.asyncio
    async def test_batches_lookups_per_path(self, record_store):
        await seed(record_store)
        calls = []
        original = record_store.get_documents_by_ids

        async def spy(model, ids):
            calls.append((model.__tablename__, list(ids)))
            return await original(model, ids)

        record_store.get_documents_by_ids = spy
        populator = Populator(
            record_store,
            models={"courses": Course, "users": User},
            paths={"courses": (PopulationPath("teacher", "users"), PopulationPath("members", "users"))},
            depth=1,
        )
        courses = await record_store.get_all_documents(Course)

        await populator.populate_many("courses", courses + courses)

        assert calls == [("user", ["u-teacher"]), ("user", ["u-student", "u-gone"])]

    @pytest.mark.asyncio
    async def test_failed_lookup_raises_database_error(self, record_store):
        async def failing(model, ids):
            return None

        record_store.get_documents_by_ids = failing
        populator = Populator(
            record_store,
            models={"users": User},
            paths={"courses": (PopulationPath("teacher", "users"),)},
        )

        with pytest.raises(DatabaseError) as exc_info:
            await populator.populate("courses", {"id": "x", "teacher": "u"})
        assert exc_info.value.operation == "query"
