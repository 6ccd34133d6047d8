import logging

from sequence_timer.config import LOG_LEVEL

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from contextlib import asynccontextmanager  # noqa: E402
from typing import List, Optional  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from sequence_timer.api.base import api_router  # noqa: E402
from sequence_timer.config import EXPO_PUSH_TOKENS, TICK_INTERVAL_SECONDS  # noqa: E402
from sequence_timer.db.seed import seed_default_categories  # noqa: E402
from sequence_timer.db.session import create_db_engine, create_session_factory, init_models  # noqa: E402
from sequence_timer.services.notification import (  # noqa: E402
    ExpoPushNotificationSink,
    LoggingNotificationSink,
    NotificationDispatcher,
)
from sequence_timer.services.playback import (  # noqa: E402
    EventBus,
    SequencePlaybackEngine,
    Ticker,
    TimerPlaybackEngine,
)

logger = logging.getLogger(__name__)


def create_app(
    database_url: Optional[str] = None,
    ticker: Optional[Ticker] = None,
    push_tokens: Optional[List[str]] = None,
) -> FastAPI:
    """
    Build the API application.

    The playback engines are created once per app in the lifespan and live on
    app.state until shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = create_db_engine(database_url)
        await init_models(db_engine)
        session_factory = create_session_factory(db_engine)
        async with session_factory() as session:
            await seed_default_categories(session)

        bus = EventBus()
        tick_source = ticker or Ticker(TICK_INTERVAL_SECONDS)
        timer_engine = TimerPlaybackEngine(bus=bus, ticker=tick_source)
        sequence_engine = SequencePlaybackEngine(bus=bus, ticker=tick_source)

        sinks = [LoggingNotificationSink()]
        tokens = EXPO_PUSH_TOKENS if push_tokens is None else push_tokens
        if tokens:
            sinks.append(ExpoPushNotificationSink(tokens))
        dispatcher = NotificationDispatcher(bus, sinks)
        dispatcher.start()

        app.state.db_engine = db_engine
        app.state.session_factory = session_factory
        app.state.event_bus = bus
        app.state.timer_engine = timer_engine
        app.state.sequence_engine = sequence_engine
        app.state.notification_dispatcher = dispatcher
        logger.info("Sequence Timer backend started")

        try:
            yield
        finally:
            dispatcher.stop()
            timer_engine.shutdown()
            sequence_engine.shutdown()
            await dispatcher.drain()
            await db_engine.dispose()
            logger.info("Sequence Timer backend stopped")

    app = FastAPI(
        title="Sequence Timer API",
        description="Countdown timers and multi-step sequences with live playback",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Specify your frontend URL in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include all API routes
    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {
            "message": "Sequence Timer API",
            "docs": "/docs",
            "version": "1.0.0"
        }

    return app


app = create_app()
