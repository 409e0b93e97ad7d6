from pydantic import BaseModel, Field


class ExerciseRow(BaseModel):
    """Строка CSV-файла с упражнением, как она пришла из файла."""

    exercise: str = ""
    youtube_short: str = ""
    youtube_long: str = ""
    muscle_group: str = ""
    equipment: str = ""
    body_region: str = ""
    thumbnail: str = ""


class ExerciseCreate(BaseModel):
    name: str
    description: str
    muscle_groups: list[str]
    equipment: list[str] = Field(default_factory=list)
    video_url: str | None = None
    thumbnail_url: str
    instructions: list[str] = Field(default_factory=list)


class ImportResult(BaseModel):
    success: bool
    name: str
    error: str | None = None


class DuplicateGroup(BaseModel):
    name: str
    ids: list[str]

    @property
    def count(self) -> int:
        return len(self.ids)
