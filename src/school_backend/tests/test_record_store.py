"""
Tests for the record store: column types per dialect and rule queries.
"""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.elements import BooleanClauseList

from school_backend.model import Chat, Message
from school_backend.repositories.record_store import rule_query


@pytest.mark.unit
class TestPostgresDialect:

    def test_reference_and_document_column_types(self):
        ddl = str(CreateTable(Message.__table__).compile(dialect=postgresql.dialect()))

        assert "chat VARCHAR(36)" in ddl
        assert "author VARCHAR(36)" in ddl
        assert "content JSONB" in ddl
        assert " JSON," not in ddl

    @pytest.mark.parametrize("model, rule", [
        (Message, {"chat": "chat-1"}),
        (Message, {"content": [{"type": "text", "text": "hi"}]}),
        (Chat, {"targets": ["u-1", "u-2"], "type": "GROUP"}),
    ])
    def test_rule_compares_matching_types(self, model, rule):
        dialect = postgresql.dialect()
        statement = rule_query(model, rule)

        criteria = statement.whereclause
        clauses = criteria.clauses if isinstance(criteria, BooleanClauseList) else [criteria]
        assert len(clauses) == len(rule)
        for clause in clauses:
            column_type = clause.left.type.dialect_impl(dialect)
            value_type = clause.right.type.dialect_impl(dialect)
            # postgres has no equality operator for plain json
            assert type(column_type).__name__ != "JSON"
            assert type(column_type) is type(value_type)

        sql = str(statement.compile(dialect=dialect))
        for field in rule:
            assert f"{model.__tablename__}.{field} = " in sql


@pytest.mark.integration
class TestRuleQueries:

    @pytest.mark.asyncio
    async def test_rule_on_single_reference(self, record_store):
        await record_store.create_document(Message, {"id": "m-1", "chat": "chat-1"})
        await record_store.create_document(Message, {"id": "m-2", "chat": "chat-2"})

        found = await record_store.get_documents_by_rule(Message, {"chat": "chat-1"})

        assert [message["id"] for message in found] == ["m-1"]

    @pytest.mark.asyncio
    async def test_rule_on_reference_list(self, record_store):
        await record_store.create_document(Chat, {"id": "c-1", "type": "GROUP", "name": "A", "targets": ["u-1"]})
        await record_store.create_document(Chat, {"id": "c-2", "type": "GROUP", "name": "B", "targets": ["u-2"]})

        found = await record_store.get_documents_by_rule(Chat, {"targets": ["u-2"]})

        assert [chat["id"] for chat in found] == ["c-2"]
