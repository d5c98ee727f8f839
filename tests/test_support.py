"""Tests for database, logging, hashing and time helpers."""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from certflow.core.database import create_tables, ping
from certflow.core.logging import JsonFormatter
from certflow.handlers.certificates import build_auto_certificate_url
from certflow.utils.hashing import hash_payload
from certflow.utils.time import epoch_millis


def test_hash_is_independent_of_key_order():
    assert hash_payload({"a": 1, "b": 2}) == hash_payload({"b": 2, "a": 1})
    assert hash_payload({"a": 1}) != hash_payload({"a": 2})


def test_epoch_millis_treats_naive_as_utc():
    aware = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert epoch_millis(aware) == epoch_millis(aware.replace(tzinfo=None)) == 1735689600000


def test_auto_certificate_url_shape():
    url = build_auto_certificate_url(42)
    _, _, project_id, millis = url[: -len(".pdf")].split("_")
    assert url.startswith("auto_cert_42_")
    assert url.endswith(".pdf")
    assert project_id == "42"
    assert millis.isdigit()


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="certflow.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Project decided",
        args=(),
        exc_info=None,
    )
    record.project_id = 7

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Project decided"
    assert payload["level"] == "INFO"
    assert payload["project_id"] == 7


async def test_ping_reports_database_state(db_session, monkeypatch):
    assert await ping(db_session) is True

    async def _fail(*args, **kwargs):
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr(db_session, "execute", _fail)
    assert await ping(db_session) is False


async def test_create_tables_is_idempotent(db_engine, session_factory):
    await create_tables(db_engine)

    async with session_factory() as session:
        assert await ping(session) is True
