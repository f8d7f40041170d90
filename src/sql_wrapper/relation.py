"""
relation.py - Foreign key relationship kinds.
"""

import logging
from enum import Enum

logger = logging.getLogger("sql_wrapper.relation")


class Relation(Enum):
    """How a field refers to records of another table."""
    NONE = ""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"

    @property
    def is_reference(self) -> bool:
        """True for relations stored as a foreign identity column."""
        return self in (Relation.ONE_TO_ONE, Relation.MANY_TO_ONE)

    @property
    def is_collection(self) -> bool:
        """True for relations stored in a junction table."""
        return self in (Relation.ONE_TO_MANY, Relation.MANY_TO_MANY)


def classify(annotation: str | None) -> Relation:
    """
    Map a `rel` annotation to a Relation.

    Missing and unrecognized annotations both map to Relation.NONE.
    """
    if not annotation:
        return Relation.NONE
    try:
        return Relation(annotation.strip().lower())
    except ValueError:
        logger.debug("Unrecognized relation annotation %r, treating as none", annotation)
        return Relation.NONE
