"""
Shared fixtures: a temporary SQLite directory with a small skill catalog,
one project and a handful of profiles.
"""
import pytest

from database.db_manager import DatabaseManager
from database.models import (
    AvailabilityStatus,
    EmployeeSkill,
    Profile,
    Project,
    ProjectRequiredSkill,
    ProjectStatus,
    Skill,
)


@pytest.fixture
def db(tmp_path):
    """Empty database in a temporary directory"""
    return DatabaseManager(db_path=str(tmp_path / "data" / "test.db"))


def add_profile(db, name, company_id=None, availability=AvailabilityStatus.AVAILABLE, skills=()):
    """Insert a profile with (skill_id, level, years) tuples and return its id"""
    email = name.lower().replace(" ", ".") + "@sample.com"
    profile_id = db.insert_profile(
        Profile(full_name=name, email=email, company_id=company_id, availability_status=availability)
    )
    for skill_id, level, years in skills:
        db.upsert_employee_skill(
            EmployeeSkill(profile_id=profile_id, skill_id=skill_id, proficiency_level=level, years_experience=years)
        )
    return profile_id


@pytest.fixture
def world(db):
    """
    Project "Web Platform" requires React:expert (mandatory) and
    Node.js:intermediate (optional).
    """
    company_id = db.insert_company("Sample Consulting")
    skills = {
        name: db.insert_skill(Skill(name=name, category=category))
        for name, category in [
            ("React", "Frontend"),
            ("Node.js", "Backend"),
            ("TypeScript", "Frontend"),
            ("AWS", "Cloud"),
        ]
    }

    project_id = db.insert_project(
        Project(name="Web Platform", company_id=company_id, status=ProjectStatus.ACTIVE)
    )
    db.upsert_project_required_skill(
        ProjectRequiredSkill(project_id=project_id, skill_id=skills["React"],
                             required_proficiency="expert", is_mandatory=True)
    )
    db.upsert_project_required_skill(
        ProjectRequiredSkill(project_id=project_id, skill_id=skills["Node.js"],
                             required_proficiency="intermediate", is_mandatory=False)
    )

    empty_project_id = db.insert_project(Project(name="Unscoped", company_id=company_id))

    profiles = {
        # React expert, Node beginner -> 67
        "alice": add_profile(db, "Alice", company_id, skills=[
            (skills["React"], "expert", 5), (skills["Node.js"], "beginner", 2)]),
        # both satisfied -> 100
        "bob": add_profile(db, "Bob", company_id, skills=[
            (skills["React"], "expert", 3), (skills["Node.js"], "expert", 4)]),
        # no skills -> 0
        "carol": add_profile(db, "Carol", company_id),
        # identical to alice -> ties on every key except id
        "dave": add_profile(db, "Dave", company_id, skills=[
            (skills["React"], "expert", 5), (skills["Node.js"], "beginner", 2)]),
        "erin": add_profile(db, "Erin", company_id, availability=AvailabilityStatus.ON_LEAVE, skills=[
            (skills["React"], "intermediate", 1)]),
    }

    return {
        "company_id": company_id,
        "skills": skills,
        "project_id": project_id,
        "empty_project_id": empty_project_id,
        "profiles": profiles,
    }
