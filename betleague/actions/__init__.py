from .audit import EvaluationAuditLogger, sanitize_metadata
from .auth import Principal, load_principal, require_admin
from .cache import CATEGORY_TAGS, TagCache, get_cache, leaderboard_tag
from .evaluate import INTERNAL_ERROR_MESSAGE, EvaluationService, failure
from .validation import EvaluateRequest

__all__ = [
    "EvaluationAuditLogger",
    "sanitize_metadata",
    "Principal",
    "load_principal",
    "require_admin",
    "CATEGORY_TAGS",
    "TagCache",
    "get_cache",
    "leaderboard_tag",
    "EvaluationService",
    "INTERNAL_ERROR_MESSAGE",
    "failure",
    "EvaluateRequest",
]
