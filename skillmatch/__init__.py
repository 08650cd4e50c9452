"""SkillMatch: ontology-aware scoring of candidate skills against job offers."""

__version__ = "0.1.0"
