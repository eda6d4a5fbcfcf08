import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-signing-secret-that-is-long-enough')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler  # noqa: E402
from backend.auth.password import derive_credential  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.user import User, UserRole  # noqa: E402


@pytest.fixture
def db_session():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db_session):
    def _make_user(
        email: str = 'learner@example.com',
        password: str = 'correct-horse',
        name: str = 'Lea Learner',
        role: str = UserRole.LEARNER.value,
    ) -> User:
        credential = derive_credential(password)
        user = User(
            email=email,
            name=name,
            role=role,
            password_hash=credential.hash,
            salt=credential.salt,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def learner(make_user) -> User:
    return make_user()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(learner) -> dict[str, str]:
    token = jwt_handler.issue_token(learner.id, learner.role)
    return {'Authorization': f'Bearer {token}'}
