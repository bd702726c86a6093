import pytest

from app import create_app
from config import Config
from store import ExpenseStore


class TestingConfig(Config):
    TESTING = True
    PARTICIPANTS = {"Alice": "AL", "Bob": "BO", "Cara": "CA"}
    CURRENCY_SYMBOL = "$"
    RECENT_EXPENSES_LIMIT = 3
    LOG_LEVEL = "DEBUG"


@pytest.fixture
def store():
    return ExpenseStore()


@pytest.fixture
def app(store):
    return create_app(TestingConfig, store=store)


@pytest.fixture
def client(app):
    return app.test_client()
