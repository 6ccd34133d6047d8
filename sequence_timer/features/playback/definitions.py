"""Definition source consumed by the playback layer"""

from typing import Optional, Protocol
from sqlalchemy.ext.asyncio import async_sessionmaker

from sequence_timer.features.sequences.repository import SequenceRepository
from sequence_timer.features.timers.repository import TimerRepository
from sequence_timer.models.sequence import SequenceWithSteps
from sequence_timer.models.timer import Timer


class DefinitionSource(Protocol):
    """Supplies immutable timer and sequence definitions by ID"""

    async def get_timer_definition(self, timer_id: int) -> Optional[Timer]: ...

    async def get_sequence_with_steps(self, sequence_id: int) -> Optional[SequenceWithSteps]: ...


class RepositoryDefinitionSource:
    """DefinitionSource backed by the SQLAlchemy repositories, one session per lookup"""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get_timer_definition(self, timer_id: int) -> Optional[Timer]:
        async with self._session_factory() as session:
            return await TimerRepository(session).get_by_id(timer_id)

    async def get_sequence_with_steps(self, sequence_id: int) -> Optional[SequenceWithSteps]:
        async with self._session_factory() as session:
            return await SequenceRepository(session).get_with_steps(sequence_id)
