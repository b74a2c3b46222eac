from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class AssessmentStatus(str, enum.Enum):
    """Assessment lifecycle, forward only"""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return list(AssessmentStatus).index(self)

    def can_advance_to(self, target: "AssessmentStatus") -> bool:
        return target.rank > self.rank


class ExtractionMethod(str, enum.Enum):
    """Material extraction methods"""
    OPEN_PIT = "open_pit"
    UNDERGROUND = "underground"
    RECYCLED = "recycled"
