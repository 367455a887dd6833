"""
Exception classes for the matching engine
Each carries an HTTP status and error code so the API can render it directly
"""
from typing import Any, Dict, Optional


class MatchingError(Exception):
    """
    Base matching exception.
    All engine errors inherit from this.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(MatchingError):
    """Raised when a project or profile is missing"""

    def __init__(self, resource: str, identifier: Optional[Any] = None, error_code: str = "NOT_FOUND"):
        super().__init__(
            message=f"{resource} not found" + (f": {identifier}" if identifier is not None else ""),
            status_code=404,
            error_code=error_code,
            details={"resource": resource, "identifier": identifier}
        )


class ProjectNotFound(NotFoundError):
    def __init__(self, project_id: Any):
        super().__init__("Project", project_id, error_code="PROJECT_NOT_FOUND")
        self.project_id = project_id


class ProfileNotFound(NotFoundError):
    def __init__(self, profile_id: Any):
        super().__init__("Profile", profile_id, error_code="PROFILE_NOT_FOUND")
        self.profile_id = profile_id


class ValidationError(MatchingError):
    """Raised when a requirement set or request is malformed"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict] = None,
        error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details={"field": field, **(details or {})}
        )


class NoRequirements(ValidationError):
    """Raised when a project has no required skills, so no score is defined"""

    def __init__(self, project_id: Optional[Any] = None):
        message = "Requirement set is empty; match score is undefined"
        if project_id is not None:
            message = f"Project {project_id} has no required skills; match score is undefined"
        super().__init__(
            message,
            field="required_skills",
            details={"project_id": project_id},
            error_code="NO_REQUIREMENTS"
        )
        self.project_id = project_id


class UnknownSkill(MatchingError):
    """Raised when a skill reference matches no catalog entry"""

    def __init__(self, skill_ref: Any):
        super().__init__(
            message=f"Unknown skill: {skill_ref!r}",
            status_code=422,
            error_code="UNKNOWN_SKILL",
            details={"skill_ref": skill_ref}
        )
        self.skill_ref = skill_ref
