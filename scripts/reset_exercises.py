import asyncio
import sys
from pathlib import Path

# Добавляем корневую папку проекта в sys.path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from config.logging import get_logger, setup_logging
from config.settings import settings
from database.connection import open_store
from maintenance.reset_runner import ResetRunner, ResetStatus

logger = get_logger(__name__)


async def main() -> ResetStatus:
    """
    Полностью очищает таблицу exercises перед повторным импортом.
    Ошибки только логируются, процесс всегда завершается с кодом 0.
    """
    try:
        setup_logging()
        async with open_store(settings) as store:
            return await ResetRunner(store).run()
    except Exception as e:
        logger.exception(f"❌ Не удалось подготовить запуск: {e}")
        return ResetStatus.error


if __name__ == "__main__":
    asyncio.run(main())
