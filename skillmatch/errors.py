"""Exception types raised by the scoring core and the ontology gateway."""


class SkillMatchError(Exception):
    """Base class for all skillmatch errors."""
    pass


class InvalidInputError(SkillMatchError, ValueError):
    """Raised when caller-supplied data cannot be scored (empty offer, non-string tokens, ...)."""
    pass


class OntologyUnavailableError(SkillMatchError, RuntimeError):
    """Raised when the ontology cannot be loaded at all.

    Distinct from an unknown skill, which simply has no relations.
    """
    pass
