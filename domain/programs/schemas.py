from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from domain.base import CamelModel


class ProgramKind(str, Enum):
    WORKOUT = "workout"
    NUTRITION = "nutrition"
    SUPPLEMENT = "supplement"


class ProgramRow(CamelModel):
    """A stored program row as returned by the program store."""

    id: int
    client_id: int
    title: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    payload: Any = None


class SupplementEntry(CamelModel):
    id: str
    program_id: int
    template_id: str
    name: str
    category: Optional[str] = None
    brand: Optional[str] = None
    dosage: Optional[str] = None
    timing: Optional[str] = None
    default_dosage: Optional[str] = None
    default_timing: Optional[str] = None
    benefits: List[str] = []
    timing_options: List[str] = []
    notes: Optional[str] = None
    price: Optional[float] = None


class ProgramSummary(CamelModel):
    id: int
    client_id: int
    kind: ProgramKind
    title: str
    template_id: Optional[str] = None
    created_at: datetime
    is_active: bool = True
    supplements: Optional[List[SupplementEntry]] = None


class ExerciseRef(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    video_url: Optional[str] = None
    target_muscles: List[str] = []


class WorkoutExercise(CamelModel):
    id: Optional[str] = None
    order: Optional[int] = None
    sets: Optional[int] = None
    reps: Optional[str] = None
    rest: Optional[int] = None
    weight: Optional[str] = None
    notes: Optional[str] = None
    exercise: Optional[ExerciseRef] = None


class WorkoutDay(CamelModel):
    id: Optional[str] = None
    order: int = 0
    label: Optional[str] = None
    video_url: Optional[str] = None
    notes: Optional[str] = None
    exercises: List[WorkoutExercise] = []


class WorkoutProgramDetail(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    assigned_at: datetime
    template_id: Optional[str] = None
    duration: Optional[int] = None
    difficulty: Optional[str] = None
    muscle_groups: List[str] = []
    days: List[WorkoutDay] = []


class MealItem(CamelModel):
    id: Optional[str] = None
    order: int
    content: str = ""


class Meal(CamelModel):
    id: Optional[str] = None
    order: int
    title: str
    items: List[MealItem] = []


class NutritionDay(CamelModel):
    id: Optional[str] = None
    order: int
    title: str
    notes: Optional[str] = None
    meals: List[Meal] = []


class NutritionProgramDetail(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    goal: Optional[str] = None
    assigned_at: datetime
    template_id: Optional[str] = None
    general_notes: Optional[str] = None
    days: List[NutritionDay] = []


class SupplementProgramDetail(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    assigned_at: datetime
    supplements: List[SupplementEntry] = []
