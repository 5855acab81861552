"""SQL composed by the repositories, with the db helpers mocked out."""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from src.admin_api import db
from src.admin_api.listing import ListQuery
from src.admin_api.passwords import verify_password
from src.admin_api.repositories import Repository, SessionRepository, UserRepository, build_update_statement


@pytest.fixture
def mock_db(monkeypatch):
    mocks = {
        "fetch_one": MagicMock(return_value={"total": 0}),
        "fetch_all": MagicMock(return_value=[]),
        "execute": MagicMock(return_value=1),
        "execute_returning_one": MagicMock(return_value={"id": 1}),
        "execute_returning_all": MagicMock(return_value=[]),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(db, name, mock)
    return mocks


@pytest.fixture
def colors():
    return Repository("colors", ("id", "name", "color_code"), search_columns=("name",))


class TestBuildUpdateStatement:
    def test_only_given_columns_are_written(self):
        sql, params = build_update_statement("users", {"firstname": "Jane", "phone": None}, 7, ("id", "firstname"))

        assert sql == "UPDATE users SET firstname=%s, phone=%s WHERE id=%s RETURNING id, firstname"
        assert params == ["Jane", None, 7]

    def test_single_column(self):
        sql, params = build_update_statement("colors", {"name": "Red"}, 3, ("id",))

        assert sql == "UPDATE colors SET name=%s WHERE id=%s RETURNING id"
        assert params == ["Red", 3]

    def test_no_changes_is_an_error(self):
        with pytest.raises(ValueError):
            build_update_statement("colors", {}, 3, ("id",))


class TestRepository:
    def test_list_builds_page_and_count(self, colors, mock_db):
        mock_db["fetch_all"].return_value = [{"id": 2, "name": "Red", "color_code": None}]
        mock_db["fetch_one"].return_value = {"total": 5}
        query = ListQuery(sort_column="name", sort_order="DESC", start=1, end=1)

        rows, total = colors.list(query)

        assert total == 5
        assert rows == [{"id": 2, "name": "Red", "color_code": None}]
        sql, params = mock_db["fetch_all"].call_args.args
        assert "ORDER BY name DESC, id LIMIT %s OFFSET %s" in sql
        assert params == [1, 1]

    def test_list_filters_and_search(self, colors, mock_db):
        query = ListQuery(filters={"id": [1, 2], "color_code": None}, search="re")

        colors.list(query)

        sql, params = mock_db["fetch_all"].call_args.args
        assert "WHERE id = ANY(%s) AND color_code IS NULL AND (name ILIKE %s)" in sql
        assert sql.endswith("ORDER BY id ASC")
        assert params == [[1, 2], "%re%"]
        count_sql, count_params = mock_db["fetch_one"].call_args.args
        assert count_sql.startswith("SELECT COUNT(*) AS total FROM colors WHERE")
        assert count_params == [[1, 2], "%re%"]

    def test_unknown_columns_never_reach_sql(self, colors, mock_db):
        with pytest.raises(ValueError):
            colors.list(ListQuery(sort_column="name; DROP TABLE colors"))
        with pytest.raises(ValueError):
            colors.create({"nope": 1})
        mock_db["fetch_all"].assert_not_called()
        mock_db["execute_returning_one"].assert_not_called()

    def test_create_inserts_given_columns(self, colors, mock_db):
        colors.create({"name": "Red", "color_code": "#FF0000"})

        sql, params = mock_db["execute_returning_one"].call_args.args
        assert sql == "INSERT INTO colors (name, color_code) VALUES (%s, %s) RETURNING id, name, color_code"
        assert params == ["Red", "#FF0000"]

    def test_update_without_changes_returns_current_row(self, colors, mock_db):
        mock_db["fetch_one"].return_value = {"id": 4, "name": "Red", "color_code": None}

        assert colors.update(4, {}) == {"id": 4, "name": "Red", "color_code": None}
        mock_db["execute_returning_one"].assert_not_called()

    def test_update_stamps_touch_column(self, mock_db):
        products = Repository("products", ("id", "name", "modified"), touch_column="modified")

        products.update(9, {"name": "Shirt"})

        sql, params = mock_db["execute_returning_one"].call_args.args
        assert sql.startswith("UPDATE products SET name=%s, modified=%s WHERE id=%s")
        assert params[0] == "Shirt"
        assert params[2] == 9

    def test_delete_returns_deleted_row(self, colors, mock_db):
        mock_db["execute_returning_all"].return_value = [{"id": 4, "name": "Red", "color_code": None}]

        assert colors.delete(4) == {"id": 4, "name": "Red", "color_code": None}
        assert colors.delete(4)["id"] == 4
        mock_db["execute_returning_all"].return_value = []
        assert colors.delete(5) is None

    def test_delete_by(self, mock_db):
        addresses = Repository("addresses", ("id", "id_user"))

        addresses.delete_by("id_user", 3)

        sql, params = mock_db["execute_returning_all"].call_args.args
        assert sql == "DELETE FROM addresses WHERE id_user=%s RETURNING id, id_user"
        assert params == [3]


class TestUserRepository:
    def test_create_hashes_password(self, mock_db):
        UserRepository().create(
            {"firstname": "Jane", "lastname": "Doe", "email": "jane@example.com", "password": "s3cret-pass"}
        )

        sql, params = mock_db["execute_returning_one"].call_args.args
        assert "password" in sql
        assert "RETURNING id, firstname, lastname, email, phone, admin, created, modified" in sql
        stored = params[-1]
        assert stored != "s3cret-pass"
        assert verify_password("s3cret-pass", stored)

    def test_update_skips_empty_password_and_stamps_modified(self, mock_db):
        UserRepository().update(2, {"firstname": "Janet", "password": ""})

        sql, params = mock_db["execute_returning_one"].call_args.args
        assert "password" not in sql.split("RETURNING")[0]
        assert sql.startswith("UPDATE users SET firstname=%s, modified=%s WHERE id=%s")
        assert params[0] == "Janet"

    def test_update_rehashes_password(self, mock_db):
        UserRepository().update(2, {"password": "new-password"})

        sql, params = mock_db["execute_returning_one"].call_args.args
        assert sql.startswith("UPDATE users SET password=%s, modified=%s")
        assert verify_password("new-password", params[0])

    def test_credentials_lookup_lowercases_email(self, mock_db):
        UserRepository().get_credentials("Jane@Example.COM")

        sql, params = mock_db["fetch_one"].call_args.args
        assert sql.endswith("password FROM users WHERE email=%s")
        assert params == ["jane@example.com"]


class TestSessionRepository:
    def test_open_inserts_random_id(self, mock_db):
        SessionRepository().open(5, timedelta(minutes=30))
        SessionRepository().open(5, timedelta(minutes=30))

        first, second = [c.args[1] for c in mock_db["execute_returning_one"].call_args_list]
        assert first[0] != second[0]
        assert first[1] == 5

    def test_active_lookup_ignores_expired(self, mock_db):
        SessionRepository().get_active("sid")

        sql, params = mock_db["fetch_one"].call_args.args
        assert "s.expires > NOW()" in sql
        assert params == ["sid"]

    def test_purge_expired(self, mock_db):
        mock_db["execute"].return_value = 3

        assert SessionRepository().purge_expired() == 3
        assert mock_db["execute"].call_args.args[0] == "DELETE FROM sessions WHERE expires <= NOW()"
