# career_errors.py
# Error taxonomy for the skill-gap and course-recommendation pipeline.
# Only InvalidInputError (and subclasses) ever escapes a pipeline operation.


class SkillGapError(Exception):
    """Base class for pipeline errors."""


class InvalidInputError(SkillGapError, ValueError):
    """A required argument was blank or missing."""


class MissingTargetRoleError(InvalidInputError):
    def __init__(self, message: str = "Target role is required"):
        super().__init__(message)


class ConfigurationError(SkillGapError, RuntimeError):
    """A collaborator is missing its API key or credentials (fatal at startup)."""


class GenerativeResponseError(SkillGapError):
    """Generative output could not be parsed or did not match the expected shape."""
