import os
from unittest.mock import MagicMock, patch

import pytest

import rentroll.db as db_module


class TestGetUrl:
    def test_explicit_db_url(self):
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///custom.db"
            mock_settings.db_backend = "sqlite"
            assert db_module._get_url() == "sqlite:///custom.db"

    def test_sqlite_default(self):
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = ""
            mock_settings.db_backend = "sqlite"
            mock_settings.db_path = "rentroll.db"
            result = db_module._get_url()
            assert result.startswith("sqlite:///")
            assert result.endswith("rentroll.db")

    def test_unsupported_backend(self):
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = ""
            mock_settings.db_backend = "oracle"
            with pytest.raises(ValueError, match="Unsupported DB backend"):
                db_module._get_url()


class TestGetEngine:
    def test_creates_sqlite_engine_with_pragmas(self, monkeypatch):
        monkeypatch.setattr(db_module, "_engine", None)
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///:memory:"
            engine = db_module.get_engine()
        assert db_module._engine is engine
        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        monkeypatch.setattr(db_module, "_engine", None)

    def test_returns_cached_engine(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_engine", sentinel)
        assert db_module.get_engine() is sentinel


class TestGetConnection:
    def test_creates_connection(self, monkeypatch):
        monkeypatch.setattr(db_module, "_connection", None)
        mock_engine = MagicMock()
        with patch.object(db_module, "get_engine", return_value=mock_engine):
            conn = db_module.get_connection()
        assert conn is mock_engine.connect.return_value
        monkeypatch.setattr(db_module, "_connection", None)

    def test_returns_cached_connection(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_connection", sentinel)
        assert db_module.get_connection() is sentinel


class TestAlembicConfig:
    def test_points_at_project_alembic(self):
        with patch.object(db_module, "_get_url", return_value="sqlite:////tmp/a%20b.db"):
            cfg = db_module._get_alembic_config()
        assert cfg.get_main_option("script_location").endswith(os.path.join("", "alembic"))
        assert cfg.get_main_option("sqlalchemy.url") == "sqlite:////tmp/a%20b.db"
        assert cfg.attributes["configured_by_app"] is True


class TestInitializeDb:
    @patch("rentroll.db.command")
    @patch("rentroll.db._get_alembic_config")
    def test_calls_alembic_upgrade(self, mock_config, mock_command):
        db_module.initialize_db()
        mock_command.upgrade.assert_called_once_with(mock_config.return_value, "head")

    def test_migrations_build_schema(self, monkeypatch, tmp_path):
        db_file = tmp_path / "rentroll.db"
        monkeypatch.setattr(db_module, "_get_url", lambda: f"sqlite:///{db_file}")
        db_module.initialize_db()

        from sqlalchemy import create_engine, inspect

        tables = set(inspect(create_engine(f"sqlite:///{db_file}")).get_table_names())
        assert {
            "properties",
            "rooms",
            "invoices",
            "invoice_line_items",
            "notifications",
            "payment_proofs",
            "payment_history",
        } <= tables
