"""Domain enumerations"""
import enum


class PlanTier(str, enum.Enum):
    """Subscription tiers, lowest first"""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class PriorityTier(str, enum.Enum):
    """Support queue priority granted by a plan"""
    NORMAL = "Normal"
    HIGH = "High"
    HIGHEST = "Highest"


class RequestStatus(str, enum.Enum):
    """Lifecycle status of a tracked support/change request"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class RequestType(str, enum.Enum):
    """Kind of tracked request"""
    SUPPORT = "support"
    CHANGE = "change"


class InvoiceFormat(str, enum.Enum):
    """Downloadable invoice artifact formats"""
    HTML = "html"
    PDF = "pdf"


class SubmissionOutcome(str, enum.Enum):
    """Result of gating a new support request"""
    ALLOWED = "allowed"
    LIMIT_REACHED = "limit_reached"
    ON_COOLDOWN = "on_cooldown"
