"""Domain enums for the page protocol engine."""
from enum import Enum


class PropKind(Enum):
    """Discriminant of the prop variants."""
    PLAIN = "PLAIN"
    LAZY = "LAZY"
    ALWAYS = "ALWAYS"
    MERGE = "MERGE"
    DEFER = "DEFER"
    ONCE = "ONCE"
    OPTIONAL = "OPTIONAL"
    SCROLL = "SCROLL"
