"""Repository tests against an in-memory SQLite definition store."""
from __future__ import annotations

import pytest

from sequence_timer.db import create_db_engine, create_session_factory, init_models, to_async_url
from sequence_timer.db.seed import seed_default_categories
from sequence_timer.features.categories.repository import CategoryRepository
from sequence_timer.features.playback.definitions import RepositoryDefinitionSource
from sequence_timer.features.sequences.repository import SequenceRepository
from sequence_timer.features.timers.repository import TimerRepository
from sequence_timer.models import (
    CategoryCreate,
    GENERAL_CATEGORY_ID,
    NotificationKind,
    SequenceCreate,
    SequenceStepCreate,
    SequenceUpdate,
    TimerCreate,
    TimerUpdate,
)


@pytest.fixture
async def session_factory():
    engine = create_db_engine("sqlite:///:memory:")
    await init_models(engine)
    factory = create_session_factory(engine)
    async with factory() as session:
        await seed_default_categories(session)
    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


def steps(*durations):
    return [
        SequenceStepCreate(label=f"Pose {index + 1}", duration_seconds=duration)
        for index, duration in enumerate(durations)
    ]


class TestDatabaseUrl:
    """Driver selection for database URLs."""

    def test_sqlite_uses_aiosqlite(self):
        assert to_async_url("sqlite:///./timers.db") == "sqlite+aiosqlite:///./timers.db"

    def test_postgres_uses_psycopg(self):
        assert to_async_url("postgresql://u:p@host/db") == "postgresql+psycopg://u:p@host/db"
        assert to_async_url("postgresql+asyncpg://u:p@host/db") == "postgresql+psycopg://u:p@host/db"

    def test_unsupported_url(self):
        with pytest.raises(ValueError):
            to_async_url("mysql://host/db")


class TestCategories:
    """Seeding and category rules."""

    async def test_default_categories_seeded_once(self, db):
        categories = await CategoryRepository(db).get_all()
        assert [c.name for c in categories] == ["General", "Yoga", "Workout", "Cooking", "Pomodoro"]
        assert all(c.is_default for c in categories)

        assert await seed_default_categories(db) == 0

    async def test_create_appends_to_end(self, db):
        category = await CategoryRepository(db).create(CategoryCreate(name="Baking", icon="cake"))

        assert category.sort_order == 5
        assert not category.is_default

    async def test_default_category_cannot_be_deleted(self, db):
        with pytest.raises(ValueError):
            await CategoryRepository(db).delete(GENERAL_CATEGORY_ID)

    async def test_delete_moves_items_to_general(self, db):
        repo = CategoryRepository(db)
        category = await repo.create(CategoryCreate(name="Tea"))
        timer = await TimerRepository(db).create(
            TimerCreate(label="Green", duration_seconds=120, category_id=category.id)
        )
        sequence = await SequenceRepository(db).create(
            SequenceCreate(name="Brew", category_id=category.id, steps=steps(30))
        )

        assert await repo.delete(category.id)

        assert (await TimerRepository(db).get_by_id(timer.id)).category_id == GENERAL_CATEGORY_ID
        assert (await SequenceRepository(db).get_with_steps(sequence.id)).category_id == GENERAL_CATEGORY_ID
        assert await repo.get_by_id(category.id) is None

    async def test_delete_unknown_category(self, db):
        assert await CategoryRepository(db).delete(999) is False

    async def test_reorder_sets_sort_order_by_position(self, db):
        repo = CategoryRepository(db)

        categories = await repo.reorder([5, 4, 3, 2, 1])

        assert [c.name for c in categories] == ["Pomodoro", "Cooking", "Workout", "Yoga", "General"]
        assert [c.sort_order for c in categories] == [0, 1, 2, 3, 4]

    async def test_reorder_skips_unknown_ids(self, db):
        categories = await CategoryRepository(db).reorder([999, 5])

        assert len(categories) == 5
        assert (await CategoryRepository(db).get_by_id(5)).sort_order == 1
        assert (await CategoryRepository(db).get_by_id(1)).sort_order == 0


class TestTimers:
    """Timer definitions."""

    async def test_create_and_get(self, db):
        repo = TimerRepository(db)
        timer = await repo.create(
            TimerCreate(label="Pasta", duration_seconds=540, notification_kind=NotificationKind.ALARM)
        )

        loaded = await repo.get_by_id(timer.id)
        assert loaded.label == "Pasta"
        assert loaded.notification_kind == NotificationKind.ALARM
        assert loaded.category_id == GENERAL_CATEGORY_ID
        assert loaded.created_at is not None

    async def test_list_filters_by_category(self, db):
        repo = TimerRepository(db)
        await repo.create(TimerCreate(label="Plank", duration_seconds=60, category_id=3))
        await repo.create(TimerCreate(label="Tea", duration_seconds=180, category_id=4))

        workout = await repo.get_all(category_id=3)
        assert [t.label for t in workout] == ["Plank"]
        assert await repo.count() == 2

    async def test_list_ordered_by_sort_order(self, db):
        repo = TimerRepository(db)
        first = await repo.create(TimerCreate(label="A", duration_seconds=10))
        second = await repo.create(TimerCreate(label="B", duration_seconds=10))
        await repo.update(first.id, TimerUpdate(sort_order=second.sort_order + 1))

        assert [t.label for t in await repo.get_all()] == ["B", "A"]

    async def test_update_partial(self, db):
        repo = TimerRepository(db)
        timer = await repo.create(TimerCreate(label="Tea", duration_seconds=180))

        updated = await repo.update(timer.id, TimerUpdate(duration_seconds=240))

        assert updated.label == "Tea"
        assert updated.duration_seconds == 240

    async def test_update_and_delete_unknown(self, db):
        repo = TimerRepository(db)
        assert await repo.update(42, TimerUpdate(label="x")) is None
        assert await repo.delete(42) is False


class TestSequences:
    """Sequences and their ordered steps."""

    async def test_create_keeps_step_order(self, db):
        sequence = await SequenceRepository(db).create(
            SequenceCreate(name="Sun salutation", category_id=2, steps=steps(30, 45, 60))
        )

        assert [s.label for s in sequence.sorted_steps] == ["Pose 1", "Pose 2", "Pose 3"]
        assert [s.step_order for s in sequence.sorted_steps] == [0, 1, 2]
        assert sequence.total_duration_seconds == 135
        assert sequence.step_count == 3

    async def test_explicit_step_order_wins_over_list_position(self, db):
        sequence = await SequenceRepository(db).create(SequenceCreate(name="Warmup", steps=[
            SequenceStepCreate(label="third", duration_seconds=30, step_order=2),
            SequenceStepCreate(label="first", duration_seconds=10, step_order=0),
            SequenceStepCreate(label="second", duration_seconds=20, step_order=1),
        ]))

        assert [s.label for s in sequence.sorted_steps] == ["first", "second", "third"]
        assert [s.step_order for s in sequence.sorted_steps] == [0, 1, 2]

    async def test_replace_steps(self, db):
        repo = SequenceRepository(db)
        sequence = await repo.create(SequenceCreate(name="HIIT", steps=steps(20, 10)))

        updated = await repo.replace_steps(sequence.id, steps(40))

        assert [s.duration_seconds for s in updated.steps] == [40]

    async def test_update_without_steps_keeps_them(self, db):
        repo = SequenceRepository(db)
        sequence = await repo.create(SequenceCreate(name="HIIT", steps=steps(20, 10)))

        updated = await repo.update(sequence.id, SequenceUpdate(name="Tabata"))

        assert updated.name == "Tabata"
        assert updated.step_count == 2

    async def test_delete_cascades_steps(self, db):
        repo = SequenceRepository(db)
        sequence = await repo.create(SequenceCreate(name="Cycle", steps=steps(5)))

        assert await repo.delete(sequence.id)
        assert await repo.get_with_steps(sequence.id) is None
        assert await repo.get_all() == []


class TestDefinitionSource:
    """Lookups used by the playback layer."""

    async def test_loads_definitions_in_own_session(self, session_factory, db):
        timer = await TimerRepository(db).create(TimerCreate(label="Eggs", duration_seconds=420))
        sequence = await SequenceRepository(db).create(SequenceCreate(name="Pomodoro", steps=steps(1500, 300)))
        source = RepositoryDefinitionSource(session_factory)

        assert (await source.get_timer_definition(timer.id)).label == "Eggs"
        assert (await source.get_sequence_with_steps(sequence.id)).step_count == 2
        assert await source.get_timer_definition(999) is None
        assert await source.get_sequence_with_steps(999) is None
