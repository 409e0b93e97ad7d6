import logging
import logging.handlers
from pathlib import Path

from config.settings import settings


def setup_logging():
    """
    Настройка системы логирования.
    Неизвестный LOG_LEVEL заменяется на INFO, недоступный LOG_DIR отключает
    запись в файл: скрипт обслуживания не должен падать из-за логов.
    """
    problems = []

    level = logging.getLevelName(str(settings.LOG_LEVEL).upper())
    if not isinstance(level, int):
        problems.append(f"неизвестный LOG_LEVEL {settings.LOG_LEVEL!r}, использую INFO")
        level = logging.INFO

    # Настройка корневого логгера
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Очищаем существующие обработчики
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Файл с ротацией
    logs_dir = Path(settings.LOG_DIR)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "maintenance.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as e:
        problems.append(f"не удалось открыть лог-файл в '{logs_dir}': {e}")
    else:
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Библиотеки слишком разговорчивы на INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

    for problem in problems:
        logging.warning(f"⚠️ Логирование: {problem}")
    logging.info("📝 Система логирования настроена")


def get_logger(name: str) -> logging.Logger:
    """Получить логгер для модуля"""
    return logging.getLogger(name)
