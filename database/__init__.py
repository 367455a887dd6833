"""Database package for the Talent Allocation directory"""
from .db_manager import DatabaseManager
from .models import (
    AvailabilityStatus,
    EmployeeSkill,
    Profile,
    ProficiencyLevel,
    Project,
    ProjectAllocation,
    ProjectPriority,
    ProjectRequiredSkill,
    ProjectStatus,
    Skill,
    SkillGap,
    UserRole,
)

__all__ = [
    'DatabaseManager',
    'AvailabilityStatus',
    'EmployeeSkill',
    'Profile',
    'ProficiencyLevel',
    'Project',
    'ProjectAllocation',
    'ProjectPriority',
    'ProjectRequiredSkill',
    'ProjectStatus',
    'Skill',
    'SkillGap',
    'UserRole',
]
