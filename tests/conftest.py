import os

os.environ.setdefault("BULKMOD_CREATE_SCHEMA", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from bulkmod.config import settings
from bulkmod.database import Base, build_engine
from bulkmod.dependencies import get_db
from bulkmod.main import app
from bulkmod.models import ModList, ModListMod, User

test_engine = build_engine(settings.test_database_url)
TestSession = sessionmaker(bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestSession(bind=connection)
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, username, email, password="secret123"):
    user = User(username=username, email=email, password_hash="x")
    user.set_password(password)
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def alice(db):
    return make_user(db, "alice", "alice@test.com")


@pytest.fixture
def bob(db):
    return make_user(db, "bob", "bob@test.com")


@pytest.fixture
def alice_token(alice):
    return app.state.token_issuer.issue(alice.id)


@pytest.fixture
def bob_token(bob):
    return app.state.token_issuer.issue(bob.id)


@pytest.fixture
def alice_headers(alice_token):
    return {"Authorization": f"Bearer {alice_token}"}


@pytest.fixture
def bob_headers(bob_token):
    return {"Authorization": f"Bearer {bob_token}"}


@pytest.fixture
def mod_list(db, alice):
    mod_list = ModList(name="Performance", description="FPS boosters", user_id=alice.id)
    db.add(mod_list)
    db.flush()
    return mod_list


@pytest.fixture
def sodium(db, mod_list):
    mod = ModListMod(
        mod_list_id=mod_list.id,
        mod_slug="sodium",
        mod_title="Sodium",
        mod_icon_url="https://cdn.example.com/sodium.png",
        mod_author="jellysquid3",
    )
    db.add(mod)
    db.flush()
    db.expire(mod_list)
    return mod


@pytest.fixture
def public_list(db, bob):
    mod_list = ModList(
        name="Bob's Essentials",
        description="Everything I install",
        is_public=True,
        user_id=bob.id,
    )
    db.add(mod_list)
    db.flush()
    for slug, title, author in [
        ("sodium", "Sodium", "jellysquid3"),
        ("lithium", "Lithium", "jellysquid3"),
        ("iris", "Iris Shaders", "coderbot"),
    ]:
        db.add(
            ModListMod(
                mod_list_id=mod_list.id,
                mod_slug=slug,
                mod_title=title,
                mod_author=author,
            )
        )
    db.flush()
    db.expire(mod_list)
    return mod_list
