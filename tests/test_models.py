"""ORM metadata checks that keep the models aligned with the initial migration."""

import pytest

from eduassist.db.models import Base


def _foreign_key(table: str, column: str):
    (fk,) = Base.metadata.tables[table].c[column].foreign_keys
    return fk


@pytest.mark.parametrize(
    "table, column, target, ondelete",
    [
        ("chat_sessions", "user_id", "users.id", "CASCADE"),
        ("chat_messages", "session_id", "chat_sessions.id", "CASCADE"),
        ("uploaded_files", "user_id", "users.id", "CASCADE"),
        ("uploaded_files", "session_id", "chat_sessions.id", "SET NULL"),
        ("performance_analytics", "user_id", "users.id", "CASCADE"),
        ("performance_analytics", "session_id", "chat_sessions.id", "SET NULL"),
        ("support_tickets", "user_id", "users.id", "SET NULL"),
    ],
)
def test_foreign_key_delete_rules(table, column, target, ondelete):
    fk = _foreign_key(table, column)

    assert fk.target_fullname == target
    assert fk.ondelete == ondelete
