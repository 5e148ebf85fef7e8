import pytest
from cookbook.app.app import create_app, db
from cookbook.app.config import Config


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        from cookbook.app.recipes import model  # noqa: F401
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions["recipe_store"]


@pytest.fixture
def write(client):
    def _write(**fields):
        payload = {
            "title": "Pancakes",
            "instructions": "Mix and fry",
            "creatorName": "sam",
            "ingredients": [],
            "amount": [],
            "tags": [],
        }
        payload.update(fields)
        res = client.post("/writeRecipe", json=payload)
        assert res.status_code == 201
        return res.get_json()["id"]
    return _write
