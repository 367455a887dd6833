"""
Create mock talent-allocation data for local testing
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from database.db_manager import DatabaseManager
from database.models import (
    AvailabilityStatus,
    EmployeeSkill,
    Profile,
    Project,
    ProjectPriority,
    ProjectRequiredSkill,
    ProjectStatus,
    Skill,
)


SKILLS = [
    ("React", "Frontend"),
    ("TypeScript", "Frontend"),
    ("CSS", "Frontend"),
    ("Node.js", "Backend"),
    ("GraphQL", "Backend"),
    ("PostgreSQL", "Database"),
    ("AWS", "Cloud"),
    ("Python", "Backend"),
    ("Machine Learning", "Data"),
    ("Kotlin", "Mobile"),
]

EMPLOYEES = [
    {
        "name": "Sarah Chen",
        "email": "sarah.chen@sample.com",
        "designation": "Senior React Developer",
        "location": "San Francisco",
        "availability": AvailabilityStatus.AVAILABLE,
        "experience": 6,
        "skills": [("React", "expert", 6), ("TypeScript", "expert", 5),
                   ("Node.js", "intermediate", 3), ("GraphQL", "intermediate", 2)],
    },
    {
        "name": "Marcus Johnson",
        "email": "marcus.johnson@sample.com",
        "designation": "Full Stack Developer",
        "location": "New York",
        "availability": AvailabilityStatus.AVAILABLE,
        "experience": 4,
        "skills": [("React", "intermediate", 3), ("Node.js", "expert", 4),
                   ("PostgreSQL", "intermediate", 3), ("AWS", "beginner", 1)],
    },
    {
        "name": "Lisa Wang",
        "email": "lisa.wang@sample.com",
        "designation": "Frontend Developer",
        "location": "Los Angeles",
        "availability": AvailabilityStatus.PARTIALLY_AVAILABLE,
        "experience": 3,
        "skills": [("React", "expert", 3), ("TypeScript", "intermediate", 2),
                   ("Node.js", "beginner", 1), ("CSS", "expert", 3)],
    },
    {
        "name": "David Kim",
        "email": "david.kim@sample.com",
        "designation": "Backend Engineer",
        "location": "Chicago",
        "availability": AvailabilityStatus.ON_PROJECT,
        "experience": 7,
        "skills": [("Node.js", "expert", 7), ("PostgreSQL", "expert", 6),
                   ("React", "beginner", 1), ("AWS", "intermediate", 4)],
    },
    {
        "name": "Priya Patel",
        "email": "priya.patel@sample.com",
        "designation": "ML Engineer",
        "location": "Remote",
        "availability": AvailabilityStatus.ON_LEAVE,
        "experience": 5,
        "skills": [("Python", "expert", 5), ("Machine Learning", "expert", 4), ("AWS", "intermediate", 2)],
    },
]

PROJECTS = [
    {
        "name": "E-Commerce Platform Redesign",
        "client": "RetailMax Inc.",
        "priority": ProjectPriority.HIGH,
        "requirements": [("React", "expert", True, 3), ("TypeScript", "intermediate", True, None),
                         ("Node.js", "intermediate", True, None), ("GraphQL", "beginner", False, None)],
    },
    {
        "name": "Mobile Banking App",
        "client": "FinServe Bank",
        "priority": ProjectPriority.CRITICAL,
        "requirements": [("Kotlin", "intermediate", True, 2), ("PostgreSQL", "intermediate", False, None),
                         ("AWS", "intermediate", False, None)],
    },
    {
        "name": "AI Customer Service Bot",
        "client": "TechCorp Solutions",
        "priority": ProjectPriority.MEDIUM,
        "requirements": [("Python", "expert", True, None), ("Machine Learning", "intermediate", True, 2),
                         ("Node.js", "beginner", False, None)],
    },
]


def create_mock_data(db_path: str = config.DATABASE_PATH):
    """Create mock talent-allocation data for testing"""

    print("🔧 Creating mock talent-allocation data...")

    db = DatabaseManager(db_path=db_path)

    # Clear existing data
    print("🗑️  Clearing existing data...")
    with db.get_connection() as conn:
        for table in (
            "skill_gap_analysis", "project_allocations", "project_required_skills",
            "employee_skills", "projects", "profiles", "skills", "companies",
        ):
            conn.execute(f"DELETE FROM {table}")
    print("  ✅ Database cleared")

    company_id = db.insert_company("Sample Consulting Ltd")

    skill_ids = {}
    for name, category in SKILLS:
        skill_ids[name] = db.insert_skill(Skill(name=name, category=category))
    print(f"  ✅ {len(skill_ids)} skills")

    for emp in EMPLOYEES:
        profile_id = db.insert_profile(
            Profile(
                company_id=company_id,
                full_name=emp["name"],
                email=emp["email"],
                designation=emp["designation"],
                department="Engineering",
                location=emp["location"],
                availability_status=emp["availability"],
                years_of_experience=emp["experience"],
            )
        )
        for i, (skill, level, years) in enumerate(emp["skills"]):
            db.upsert_employee_skill(
                EmployeeSkill(
                    profile_id=profile_id,
                    skill_id=skill_ids[skill],
                    proficiency_level=level,
                    years_experience=years,
                    is_primary=(i == 0),
                )
            )
    print(f"  ✅ {len(EMPLOYEES)} employees")

    for proj in PROJECTS:
        project_id = db.insert_project(
            Project(
                company_id=company_id,
                name=proj["name"],
                client_name=proj["client"],
                status=ProjectStatus.ACTIVE,
                priority=proj["priority"],
            )
        )
        for skill, level, mandatory, min_years in proj["requirements"]:
            db.upsert_project_required_skill(
                ProjectRequiredSkill(
                    project_id=project_id,
                    skill_id=skill_ids[skill],
                    required_proficiency=level,
                    is_mandatory=mandatory,
                    min_experience_years=min_years,
                )
            )
    print(f"  ✅ {len(PROJECTS)} projects")

    stats = db.get_statistics()
    print(f"\n📊 Statistics: {stats}")


if __name__ == "__main__":
    create_mock_data()
