"""Tests for engine construction."""

from unittest.mock import patch

from sqlalchemy.pool import NullPool

from authgate.database import build_engine


def test_sqlite_connections_may_cross_threads():
    with patch("authgate.database.create_engine") as create_engine:
        build_engine("sqlite:///./authgate.db", echo=True)
    create_engine.assert_called_once_with(
        "sqlite:///./authgate.db", echo=True, connect_args={"check_same_thread": False}
    )


def test_other_databases_get_no_sqlite_args():
    with patch("authgate.database.create_engine") as create_engine:
        build_engine("postgresql://user:pw@db/authgate", poolclass=NullPool)
    create_engine.assert_called_once_with("postgresql://user:pw@db/authgate", echo=False, poolclass=NullPool)


def test_explicit_connect_args_win():
    with patch("authgate.database.create_engine") as create_engine:
        build_engine("sqlite://", connect_args={"timeout": 5})
    create_engine.assert_called_once_with("sqlite://", echo=False, connect_args={"timeout": 5})
