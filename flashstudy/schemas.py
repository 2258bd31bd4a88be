# flashstudy/schemas.py
from enum import Enum
from typing import Tuple, Union, TypedDict
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_FONT_SIZE = 30
ALL_SCOPE = "ALL"


class Outcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class SnapshotDTO(BaseModel):
    """
    The portable, human-readable form of a study session.
    Field names travel as camelCase (sessionIds, currentIndex, ...).
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # Identity of the full deck the session was taken on
    paths: Tuple[str, ...]

    session_ids: Tuple[str, ...]
    original_order: Tuple[str, ...]
    current_order: Tuple[str, ...]
    incorrect_ids: Tuple[str, ...]
    scope: str

    current_index: int = Field(default=0, ge=0)
    is_shuffled: bool = False
    front_first: bool = True
    font_size: Union[int, str] = DEFAULT_FONT_SIZE
    finished: bool = False


class Progress(TypedDict):
    answered: int
    correct: int
    wrong: int
    total: int
