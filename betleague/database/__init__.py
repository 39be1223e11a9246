from .dbm import DBM
from .errors import is_serialization_failure

__all__ = ["DBM", "is_serialization_failure"]
