"""End games whose reader has gone away."""

import structlog

from buzzer.session.manager import GameStateManager

logger = structlog.get_logger()


class ReaderPresenceMonitor:
    def __init__(self, manager: GameStateManager) -> None:
        self._manager = manager

    def games_read_by(self, reader_id: int) -> list[int]:
        return [channel_id for channel_id, game in self._manager.list_all() if game.reader_id == reader_id]

    def reader_left(self, reader_id: int) -> list[int]:
        """Clear and remove every game read by reader_id.

        Returns the affected channel ids so the caller can announce the end
        of each game.
        """
        ended: list[int] = []
        for channel_id in self.games_read_by(reader_id):
            game = self._manager.try_get(channel_id)
            if game is None:
                continue
            with game.transaction():
                # a new reader may have taken over since the sweep
                if game.reader_id != reader_id:
                    continue
                game.clear_all()
            self._manager.remove(channel_id)
            ended.append(channel_id)

        if ended:
            logger.info("reader left, ending games", reader_id=reader_id, channel_ids=ended)
        return ended
