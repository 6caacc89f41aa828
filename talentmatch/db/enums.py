from enum import Enum

class Recommendation(str, Enum):
    HIGHLY_RECOMMENDED = "highly_recommended"
    RECOMMENDED = "recommended"
    CONSIDER = "consider"
    NOT_RECOMMENDED = "not_recommended"

class JobStatus(str, Enum):
    OPEN = "open"
    ACTIVE = "active"
    DRAFT = "draft"
    CLOSED = "closed"
    FILLED = "filled"

class InterviewStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"
