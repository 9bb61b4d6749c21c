import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth.passwords import hash_password  # noqa: E402
from backend.database import ensure_storage_schema  # noqa: E402
from backend.models.institution import Address, Institution, WorkingHours  # noqa: E402
from backend.models.user import User, UserRole  # noqa: E402
from backend.repositories.users import UserRepository  # noqa: E402
from backend.services.app_state import AppState  # noqa: E402
from backend.storage.file_system import FileSystemStore  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    ensure_storage_schema(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(db) -> FileSystemStore:
    return FileSystemStore(db, quota_bytes=0)


@pytest.fixture
def app_state(session_factory) -> AppState:
    return AppState(session_factory)


@pytest.fixture
def donor(store) -> User:
    return UserRepository(store).save(User(
        name='Maria Silva',
        email='maria@example.com',
        password=hash_password('segredo123'),
        cpf='123.456.789-00',
    ))


@pytest.fixture
def admin_user(store) -> User:
    return UserRepository(store).save(User(
        name='Administrador',
        email='admin@benigna.com',
        password=hash_password('admin123'),
        type=UserRole.ADMIN,
    ))


@pytest.fixture
def institution(app_state) -> Institution:
    # Open Monday to Friday, 08:00-17:00.
    working_hours = [WorkingHours(day_of_week=0)]
    working_hours += [
        WorkingHours(day_of_week=day, is_open=True, open_time='08:00', close_time='17:00')
        for day in range(1, 6)
    ]
    working_hours.append(WorkingHours(day_of_week=6))

    return app_state.add_institution(Institution(
        name='Casa de Apoio',
        email='contato@casadeapoio.org',
        cnpj='12.345.678/0001-90',
        address=Address(city='São Paulo', state='SP', latitude=-23.5505, longitude=-46.6333),
        working_hours=working_hours,
        accepted_categories=['Roupas', 'Alimentos'],
    ))
