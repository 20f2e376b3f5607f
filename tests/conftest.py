from __future__ import annotations

import io

import pandas as pd
import pytest

from src.rollcall.rollcall.database.extensions import db
from src.rollcall.rollcall.main import create_app

ADMIN_PASSWORD = "test-admin"


@pytest.fixture
def app():
    app = create_app("config.testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    res = client.post("/api/attendance/auth", json={"password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return client


@pytest.fixture
def make_xlsx():
    """Build an in-memory workbook from {sheet_name: [row dicts]}."""

    def _make(sheets: dict[str, list[dict]]) -> bytes:
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            for name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, index=False, sheet_name=name)
        return output.getvalue()

    return _make
