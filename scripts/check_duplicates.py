import asyncio
import sys
from pathlib import Path

# Добавляем корневую папку проекта в sys.path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from config.logging import get_logger, setup_logging
from config.settings import settings
from database.connection import open_store
from maintenance.duplicates import DuplicateChecker
from maintenance.schemas import DuplicateGroup

logger = get_logger(__name__)


async def main() -> list[DuplicateGroup] | None:
    """Выводит в лог все упражнения с повторяющимися названиями."""
    try:
        setup_logging()
        async with open_store(settings) as store:
            return await DuplicateChecker(store).run()
    except Exception as e:
        logger.exception(f"❌ Не удалось подготовить запуск: {e}")
        return None


if __name__ == "__main__":
    asyncio.run(main())
