import logging

from maintenance.reset_runner import EXERCISES_TABLE
from maintenance.schemas import DuplicateGroup

logger = logging.getLogger(__name__)


class DuplicateLookupError(RuntimeError):
    pass


async def find_duplicate_exercises(store) -> list[DuplicateGroup]:
    """
    Ищет упражнения с одинаковым названием (без учета регистра и пробелов по краям).
    Бросает DuplicateLookupError, если хранилище вернуло ошибку.
    """
    response = await store.table(EXERCISES_TABLE).select("name, id").order("name").execute()
    if response.error:
        raise DuplicateLookupError(str(response.error))

    # dict сохраняет порядок вставки, а строки уже отсортированы по имени
    groups: dict[str, list[str]] = {}
    for row in response.data:
        name = row["name"].lower().strip()
        groups.setdefault(name, []).append(str(row["id"]))

    return [
        DuplicateGroup(name=name, ids=ids)
        for name, ids in groups.items()
        if len(ids) > 1
    ]


class DuplicateChecker:
    def __init__(self, store):
        self.store = store

    async def run(self) -> list[DuplicateGroup] | None:
        """Печатает отчет о дубликатах. Возвращает None, если проверка не удалась."""
        try:
            logger.info("Проверяю упражнения на дубликаты...")

            try:
                duplicates = await find_duplicate_exercises(self.store)
            except DuplicateLookupError as e:
                logger.error(f"❌ Ошибка при получении упражнений: {e}")
                return None

            if not duplicates:
                logger.info("✅ Дубликатов не найдено.")
                return duplicates

            logger.info(f"Найдено дубликатов: {len(duplicates)}")
            for group in duplicates:
                logger.info(f'Упражнение "{group.name}": {group.count} экземпляра(ов)')
                for exercise_id in group.ids:
                    logger.info(f"  - ID: {exercise_id}")
            return duplicates

        except Exception as e:
            logger.exception(f"❌ Ошибка при проверке дубликатов: {e}")
            return None
