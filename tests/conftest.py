"""Shared fixtures for tariff tests."""

import pytest
from typer.testing import CliRunner

from tumbling_tariff.routine import RoutineMeta
from tumbling_tariff.web_app import app as flask_app


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def client():
    flask_app.config.update(TESTING=True)
    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def international_male():
    return RoutineMeta.from_raw("international", None, "M")


@pytest.fixture
def national():
    return RoutineMeta.from_raw("national")
