import pytest

from database.connection import create_engine, create_session_pool, create_tables
from database.models import Exercise
from database.store import SqlAlchemyStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'exercises.db'}"


@pytest.fixture
async def engine(database_url):
    engine = create_engine(database_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_pool(engine):
    return create_session_pool(engine)


@pytest.fixture
def store(session_pool):
    return SqlAlchemyStore(session_pool)


@pytest.fixture
def seed_exercises(session_pool):
    async def _seed(*names: str) -> list[str]:
        async with session_pool() as session:
            exercises = [
                Exercise(name=name, muscle_groups=["Chest"], equipment=[])
                for name in names
            ]
            session.add_all(exercises)
            await session.commit()
            return [exercise.id for exercise in exercises]

    return _seed
