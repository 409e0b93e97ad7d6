import asyncio
import logging
import sys
from pathlib import Path

# Добавляем корневую папку проекта в sys.path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from config.logging import get_logger, setup_logging
from config.settings import settings
from database.connection import open_store
from maintenance.importer import CSVFormatError, ExerciseImporter, parse_exercises_csv
from maintenance.schemas import ImportResult

logger = get_logger(__name__)


async def main(csv_path: Path) -> list[ImportResult]:
    """Загружает упражнения из CSV-файла в таблицу exercises."""
    try:
        setup_logging()
    except Exception as e:
        logging.basicConfig(level=logging.INFO)
        logger.exception(f"⚠️ Не удалось настроить логирование: {e}")

    try:
        content = csv_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        logger.error(f"❌ Файл '{csv_path}' не найден.")
        return []

    try:
        rows = parse_exercises_csv(content)
    except CSVFormatError as e:
        logger.error(f"❌ Неверный формат CSV:\n{e}")
        return []

    if not rows:
        logger.warning("⚠️ В файле нет упражнений для импорта.")
        return []

    logger.info(f"Найдено {len(rows)} упражнений для импорта.")

    try:
        async with open_store(settings) as store:
            results = await ExerciseImporter(store).import_rows(rows)
    except Exception as e:
        logger.exception(f"❌ Не удалось подключиться к хранилищу: {e}")
        return []

    imported = sum(1 for r in results if r.success)
    logger.info(f"Импорт завершен: {imported} из {len(results)} упражнений добавлено.")
    return results


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("exercises.csv")
    asyncio.run(main(path))
