import enum


class Difficulty(str, enum.Enum):
    """How demanding a subject is to study."""

    easy = "easy"
    medium = "medium"
    hard = "hard"


class Priority(str, enum.Enum):
    """How important a subject is to the user."""

    low = "low"
    medium = "medium"
    high = "high"


class SessionStatus(str, enum.Enum):
    """Lifecycle status of a scheduled study session."""

    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    skipped = "skipped"


class SessionEventType(str, enum.Enum):
    """Automatic transitions reported by a state evaluation pass."""

    activated = "activated"
    skipped = "skipped"


class ScoringStrategy(str, enum.Enum):
    """Named scoring formulas, one per ranking purpose."""

    generation = "generation"
    recommendation = "recommendation"
    adaptive = "adaptive"


class ScheduleFailure(str, enum.Enum):
    """Reasons a schedule could not be generated."""

    no_subjects = "no_subjects"
    unknown_weekday = "unknown_weekday"
    invalid_start_time = "invalid_start_time"
