import enum
import logging

logger = logging.getLogger(__name__)

EXERCISES_TABLE = "exercises"

# Ни одна реальная запись не имеет такого id: фильтр id != SENTINEL_ID
# выбирает всю таблицу (PostgREST не принимает DELETE без фильтра).
SENTINEL_ID = "00000000-0000-0000-0000-000000000000"


class ResetStatus(str, enum.Enum):
    success = "success"
    delete_failed = "delete_failed"
    error = "error"


class ResetRunner:
    """Одноразовая очистка таблицы exercises перед повторным импортом."""

    def __init__(self, store):
        self.store = store

    async def run(self) -> ResetStatus:
        """
        Удаляет все упражнения одним запросом.
        Никогда не бросает исключений: результат только в логах и статусе.
        """
        try:
            logger.info("Удаляю все упражнения...")

            response = await (
                self.store.table(EXERCISES_TABLE)
                .delete()
                .neq("id", SENTINEL_ID)
                .execute()
            )

            if response.error:
                logger.error(f"❌ Ошибка при удалении упражнений: {response.error}")
                return ResetStatus.delete_failed

            logger.debug(f"Удалено записей: {len(response.data)}")
            logger.info("✅ Все упражнения успешно удалены.")
            logger.info("👉 Теперь можно заново импортировать упражнения.")
            return ResetStatus.success

        except Exception as e:
            logger.exception(f"❌ Ошибка при сбросе упражнений: {e}")
            return ResetStatus.error
