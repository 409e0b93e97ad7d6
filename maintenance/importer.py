import csv
import io
import logging
import re

from maintenance.reset_runner import EXERCISES_TABLE
from maintenance.schemas import ExerciseCreate, ExerciseRow, ImportResult

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = [
    "exercise",
    "youtube_short",
    "youtube_long",
    "muscle_group",
    "equipment",
    "body_region",
    "thumbnail",
]

DEFAULT_INSTRUCTIONS = ["Watch the video guide for detailed instructions"]


class CSVFormatError(ValueError):
    pass


class ExerciseValidationError(ValueError):
    pass


def normalize_header(header: str) -> str:
    """Приводит заголовок к виду 'muscle_group': нижний регистр, только a-z и _."""
    return re.sub(r"[^a-z_]", "", header.lower()).strip()


def detect_delimiter(content: str) -> str:
    first_line = content.split("\n")[0]
    return ";" if first_line.count(";") > first_line.count(",") else ","


def parse_exercises_csv(content: str) -> list[ExerciseRow]:
    """
    Разбирает CSV с упражнениями. Разделитель (запятая или точка с запятой)
    определяется по первой строке, пустые строки пропускаются.
    """
    delimiter = detect_delimiter(content)
    reader = csv.reader(io.StringIO(content), delimiter=delimiter)

    raw_headers = [h.strip() for h in next(reader, [])]
    headers = [normalize_header(h) for h in raw_headers]

    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise CSVFormatError(
            f"Missing required headers: {', '.join(missing)}.\n"
            f"Found headers: {delimiter.join(raw_headers)}\n"
            f"Normalized headers: {', '.join(headers)}"
        )

    positions = {h: headers.index(h) for h in REQUIRED_HEADERS}
    rows = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        values = [v.strip() for v in values]
        rows.append(
            ExerciseRow(**{
                h: values[i] if i < len(values) else ""
                for h, i in positions.items()
            })
        )
    return rows


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_exercise(row: ExerciseRow) -> ExerciseCreate:
    if not row.exercise:
        raise ExerciseValidationError("Exercise name is required")
    if not row.muscle_group:
        raise ExerciseValidationError("Muscle group is required")
    if not row.thumbnail:
        raise ExerciseValidationError("Thumbnail URL is required")

    return ExerciseCreate(
        name=row.exercise,
        description=f"{row.body_region} exercise targeting {row.muscle_group}",
        muscle_groups=_split_list(row.muscle_group),
        equipment=_split_list(row.equipment),
        video_url=row.youtube_long or row.youtube_short or None,
        thumbnail_url=row.thumbnail,
        instructions=list(DEFAULT_INSTRUCTIONS),
    )


class ExerciseImporter:
    def __init__(self, store):
        self.store = store

    async def import_row(self, row: ExerciseRow) -> ImportResult:
        try:
            exercise = build_exercise(row)
        except ExerciseValidationError as e:
            return ImportResult(success=False, name=row.exercise, error=str(e))

        existing = await (
            self.store.table(EXERCISES_TABLE)
            .select("id")
            .eq("name", exercise.name)
            .limit(1)
            .execute()
        )
        if existing.error:
            return ImportResult(success=False, name=exercise.name, error=str(existing.error))
        if existing.data:
            return ImportResult(
                success=False,
                name=exercise.name,
                error="Exercise with this name already exists",
            )

        inserted = await self.store.table(EXERCISES_TABLE).insert(exercise.model_dump()).execute()
        if inserted.error:
            return ImportResult(success=False, name=exercise.name, error=str(inserted.error))

        return ImportResult(success=True, name=exercise.name)

    async def import_rows(self, rows: list[ExerciseRow]) -> list[ImportResult]:
        """Импортирует строки по одной; ошибка в строке не останавливает импорт."""
        results = []
        for row in rows:
            try:
                result = await self.import_row(row)
            except Exception as e:
                logger.exception(f"[!] Ошибка при импорте '{row.exercise}': {e}")
                result = ImportResult(success=False, name=row.exercise, error=str(e))

            if result.success:
                logger.info(f"[+] Импортировано: {result.name}")
            else:
                logger.warning(f"[!] Пропущено '{result.name}': {result.error}")
            results.append(result)
        return results
