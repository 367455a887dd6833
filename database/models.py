"""
Data models for the Talent Allocation directory
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class ProficiencyLevel(str, Enum):
    """Skill mastery tier, ordered beginner < intermediate < expert"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return PROF_ORDER[self.value]

    @classmethod
    def parse(cls, value) -> "ProficiencyLevel":
        """Accept an enum member or a case-insensitive string"""
        if isinstance(value, cls):
            return value
        level = str(value or "").strip().lower()
        try:
            return cls(level)
        except ValueError:
            raise ValueError(
                f"Invalid proficiency_level: {value}. Allowed: {[m.value for m in cls]}"
            ) from None


# "none" ranks below every real level (candidate lacks the skill)
PROF_ORDER = {"none": 0, "beginner": 1, "intermediate": 2, "expert": 3}


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    PARTIALLY_AVAILABLE = "partially_available"
    ON_PROJECT = "on_project"
    ON_LEAVE = "on_leave"


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class UserRole(str, Enum):
    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    EMPLOYEE = "employee"


@dataclass
class Skill:
    """Catalog skill (reference data)"""
    name: str
    category: str
    description: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
        }


@dataclass
class Profile:
    """Employee profile"""
    full_name: str
    email: str
    company_id: Optional[int] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    years_of_experience: Optional[float] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'company_id': self.company_id,
            'full_name': self.full_name,
            'email': self.email,
            'designation': self.designation,
            'department': self.department,
            'location': self.location,
            'availability_status': self.availability_status.value,
            'years_of_experience': self.years_of_experience,
            'is_active': self.is_active,
        }


@dataclass
class EmployeeSkill:
    """A skill held by an employee; (profile_id, skill_id) is unique"""
    profile_id: int
    skill_id: int
    proficiency_level: ProficiencyLevel = ProficiencyLevel.BEGINNER
    years_experience: Optional[float] = None
    is_primary: bool = False
    last_used_date: Optional[date] = None
    endorsements: int = 0
    skill_name: Optional[str] = None  # Joined from skills
    id: Optional[int] = None


@dataclass
class Project:
    """Client project that needs staffing"""
    name: str
    company_id: Optional[int] = None
    client_name: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.DRAFT
    priority: ProjectPriority = ProjectPriority.MEDIUM
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'company_id': self.company_id,
            'name': self.name,
            'client_name': self.client_name,
            'description': self.description,
            'status': self.status.value,
            'priority': self.priority.value,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
        }


@dataclass
class ProjectRequiredSkill:
    """A skill a project needs; (project_id, skill_id) is unique"""
    project_id: int
    skill_id: int
    required_proficiency: ProficiencyLevel = ProficiencyLevel.BEGINNER
    is_mandatory: bool = False
    min_experience_years: Optional[float] = None
    skill_name: Optional[str] = None  # Joined from skills
    id: Optional[int] = None


@dataclass
class ProjectAllocation:
    """Assignment of a profile to a project"""
    project_id: int
    profile_id: int
    role_in_project: str
    allocation_percentage: int = 100
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'project_id': self.project_id,
            'profile_id': self.profile_id,
            'role_in_project': self.role_in_project,
            'allocation_percentage': self.allocation_percentage,
        }


@dataclass
class SkillGap:
    """Gap between a profile's skill and a project requirement"""
    profile_id: int
    skill_id: int
    required_level: ProficiencyLevel
    current_level: Optional[ProficiencyLevel] = None
    gap_score: int = 0
    recommended_action: Optional[str] = None
    project_id: Optional[int] = None
    skill_name: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self):
        return {
            'profile_id': self.profile_id,
            'project_id': self.project_id,
            'skill_id': self.skill_id,
            'skill_name': self.skill_name,
            'current_level': self.current_level.value if self.current_level else None,
            'required_level': self.required_level.value,
            'gap_score': self.gap_score,
            'recommended_action': self.recommended_action,
        }
