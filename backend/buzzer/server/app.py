"""Wire the registry, message router, reader commands and presence monitor together."""

from dataclasses import dataclass

import structlog

from buzzer.commands.reader import ReaderCommandHandler
from buzzer.messaging.router import MessageRouter
from buzzer.server.settings import BuzzerSettings
from buzzer.session.manager import GameStateManager
from buzzer.session.presence import ReaderPresenceMonitor
from shared.logging import setup_logging

logger = structlog.get_logger()


@dataclass
class Tracker:
    """Entry points a chat integration calls into."""

    settings: BuzzerSettings
    manager: GameStateManager
    router: MessageRouter
    commands: ReaderCommandHandler
    presence: ReaderPresenceMonitor


def create_tracker(
    settings: BuzzerSettings | None = None,
    manager: GameStateManager | None = None,
) -> Tracker:
    if settings is None:  # pragma: no cover
        settings = BuzzerSettings()

    if manager is None:
        manager = GameStateManager(max_games=settings.max_games)

    tracker = Tracker(
        settings=settings,
        manager=manager,
        router=MessageRouter.from_settings(manager, settings),
        commands=ReaderCommandHandler(manager),
        presence=ReaderPresenceMonitor(manager),
    )
    logger.info("score tracker ready", max_games=settings.max_games, accepted_points=settings.accepted_points)
    return tracker


def get_tracker() -> Tracker:  # pragma: no cover
    """Factory for production use: read settings from the environment and configure logging."""
    settings = BuzzerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_tracker(settings=settings)
