"""
Unit tests for UserRepository

Author: TM3
Date: 2026-10-19
"""
import uuid

from app.domain.user import UserCreate
from app.repositories.user_repository import UserRepository


def user_row(email):
    return {
        'id': uuid.uuid4(),
        'name': "Bob",
        'email': email,
        'password_hash': "hash",
        'phone': "",
        'is_admin': False,
        'street': "",
        'apartment': "",
        'zip': "",
        'city': "",
        'country': "",
    }


class TestUserRepository:
    """Test UserRepository methods"""

    def test_find_by_email_ignores_case(self, mock_db, mock_cursor):
        """Registration stores the normalised address; login sends it as typed"""
        # Arrange: what register stores for "Bob@Example.COM"
        stored_email = UserCreate(name="Bob", email="Bob@Example.COM", password="x").email
        mock_cursor.fetchone.return_value = user_row(stored_email)

        # Act
        record = UserRepository(mock_db).find_by_email("Bob@Example.COM")

        # Assert
        query, params = mock_cursor.execute.call_args.args
        assert "lower(email) = lower(%s)" in query
        assert params == ("Bob@Example.COM",)
        assert record.email.lower() == "bob@example.com"

    def test_find_by_email_not_found(self, mock_db, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert UserRepository(mock_db).find_by_email("nobody@example.com") is None

    def test_delete_reports_missing_user(self, mock_db, mock_cursor):
        mock_cursor.rowcount = 0

        assert UserRepository(mock_db).delete(uuid.uuid4()) is False
