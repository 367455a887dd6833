"""
Database manager for the Talent Allocation directory

Owns the profiles / skills / projects store read by the matching engine.
"""
import sqlite3
from typing import List, Optional, Dict, Any, Iterable, Tuple
from contextlib import contextmanager
from pathlib import Path
from datetime import date

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
)


class DatabaseManager:
    """Manages SQLite database operations"""

    def __init__(self, db_path: str = "data/talent_allocation.db"):
        self.db_path = db_path
        self._ensure_db_directory()
        self._initialize_database()

    def _ensure_db_directory(self):
        """Create database directory if it doesn't exist"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self):
        """Context manager for database connections"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            # enforce FK constraints
            conn.execute("PRAGMA foreign_keys = ON;")
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise e
        finally:
            conn.close()

    def _initialize_database(self):
        """Initialize database schema"""
        schema_path = Path(__file__).parent / "schema.sql"
        with self.get_connection() as conn:
            with open(schema_path, "r") as f:
                conn.executescript(f.read())

    # ============================================
    # Companies
    # ============================================

    def insert_company(self, name: str) -> int:
        with self.get_connection() as conn:
            cursor = conn.execute("INSERT INTO companies(name) VALUES (?)", (name,))
            return int(cursor.lastrowid)

    # ============================================
    # Skill catalog
    # ============================================

    def insert_skill(self, skill: Skill) -> int:
        """Insert a catalog skill and return its ID"""
        name = (skill.name or "").strip()
        if not name:
            raise ValueError("skill name must be non-empty")

        with self.get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO skills(name, category, description) VALUES (?, ?, ?)",
                (name, skill.category, skill.description),
            )
            return int(cursor.lastrowid)

    def get_or_create_skill_id(self, name: str, category: str = "General") -> int:
        """Ensure a skill exists in the catalog and return its id."""
        name = (name or "").strip()
        if not name:
            raise ValueError("skill name must be non-empty")

        with self.get_connection() as conn:
            row = conn.execute("SELECT id FROM skills WHERE name = ?", (name,)).fetchone()
            if row:
                return int(row["id"])

            cur = conn.execute(
                "INSERT INTO skills(name, category) VALUES (?, ?)", (name, category)
            )
            return int(cur.lastrowid)

    def get_skill_catalog(self) -> List[Skill]:
        """Return every catalog skill ordered by id"""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM skills ORDER BY id")
            return [
                Skill(
                    id=row["id"],
                    name=row["name"],
                    category=row["category"],
                    description=row["description"],
                )
                for row in cursor.fetchall()
            ]

    # ============================================
    # Profiles
    # ============================================

    def insert_profile(self, profile: Profile) -> int:
        """Insert a new profile and return the ID"""
        with self.get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO profiles (
                    company_id, full_name, email, designation, department,
                    location, availability_status, years_of_experience, is_active
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    profile.company_id,
                    profile.full_name,
                    profile.email,
                    profile.designation,
                    profile.department,
                    profile.location,
                    AvailabilityStatus(profile.availability_status).value,
                    profile.years_of_experience,
                    profile.is_active,
                ),
            )
            return int(cursor.lastrowid)

    def get_profile_by_id(self, profile_id: int) -> Optional[Profile]:
        """Get an active profile by ID"""
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM profiles WHERE id = ? AND is_active = 1",
                (profile_id,),
            ).fetchone()
            return self._row_to_profile(row) if row else None

    def get_profile_by_email(self, email: str) -> Optional[Profile]:
        """Get an active profile by email (case-insensitive)"""
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM profiles WHERE lower(email) = lower(?) AND is_active = 1",
                ((email or "").strip(),),
            ).fetchone()
            return self._row_to_profile(row) if row else None

    def get_profiles_by_ids(self, profile_ids: Iterable[int]) -> Dict[int, Profile]:
        """Fetch several active profiles in one query, keyed by id"""
        ids = list(profile_ids)
        if not ids:
            return {}

        placeholders = ", ".join("?" for _ in ids)
        with self.get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM profiles WHERE is_active = 1 AND id IN ({placeholders})",
                ids,
            )
            return {row["id"]: self._row_to_profile(row) for row in cursor.fetchall()}

    def get_candidate_pool(self, company_id: Optional[int], include_on_leave: bool = False) -> List[int]:
        """Active profile ids of a company, optionally including people on leave"""
        query = "SELECT id FROM profiles WHERE is_active = 1"
        params: List[Any] = []

        if company_id is not None:
            query += " AND company_id = ?"
            params.append(company_id)

        if not include_on_leave:
            query += " AND availability_status != ?"
            params.append(AvailabilityStatus.ON_LEAVE.value)

        query += " ORDER BY id"

        with self.get_connection() as conn:
            return [int(row["id"]) for row in conn.execute(query, params).fetchall()]

    # ============================================
    # Employee skills
    # ============================================

    def upsert_employee_skill(self, skill: EmployeeSkill) -> int:
        """
        Attach/update a skill for a profile.
        Returns employee_skills.id.
        """
        level = ProficiencyLevel.parse(skill.proficiency_level)
        last_used = skill.last_used_date.isoformat() if isinstance(skill.last_used_date, date) else None

        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO employee_skills(
                    profile_id, skill_id, proficiency_level, years_experience,
                    is_primary, last_used_date, endorsements, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP, NULL)
                ON CONFLICT(profile_id, skill_id)
                DO UPDATE SET
                    proficiency_level = excluded.proficiency_level,
                    years_experience = excluded.years_experience,
                    is_primary = excluded.is_primary,
                    last_used_date = excluded.last_used_date,
                    endorsements = excluded.endorsements,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    skill.profile_id,
                    skill.skill_id,
                    level.value,
                    skill.years_experience,
                    1 if skill.is_primary else 0,
                    last_used,
                    skill.endorsements,
                ),
            )

            row = conn.execute(
                "SELECT id FROM employee_skills WHERE profile_id = ? AND skill_id = ?",
                (skill.profile_id, skill.skill_id),
            ).fetchone()
            return int(row["id"])

    def get_skills_for_profiles(self, profile_ids: Iterable[int]) -> Dict[int, List[EmployeeSkill]]:
        """
        Return the skills of several profiles in a single query.
        Profiles without skills map to an empty list.
        """
        ids = list(profile_ids)
        result: Dict[int, List[EmployeeSkill]] = {pid: [] for pid in ids}
        if not ids:
            return result

        placeholders = ", ".join("?" for _ in ids)
        with self.get_connection() as conn:
            cursor = conn.execute(
                f"""
                SELECT es.*, s.name AS skill_name
                FROM employee_skills es
                JOIN skills s ON s.id = es.skill_id
                WHERE es.profile_id IN ({placeholders})
                ORDER BY es.profile_id, es.skill_id
                """,
                ids,
            )
            for row in cursor.fetchall():
                result.setdefault(row["profile_id"], []).append(self._row_to_employee_skill(row))
        return result

    def get_skills_for_profile(self, profile_id: int) -> List[EmployeeSkill]:
        return self.get_skills_for_profiles([profile_id])[profile_id]

    # ============================================
    # Projects
    # ============================================

    def insert_project(self, project: Project) -> int:
        """Insert a new project and return the ID"""
        with self.get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO projects (
                    company_id, name, client_name, description, status,
                    priority, start_date, end_date
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    project.company_id,
                    project.name,
                    project.client_name,
                    project.description,
                    ProjectStatus(project.status).value,
                    ProjectPriority(project.priority).value,
                    project.start_date.isoformat() if project.start_date else None,
                    project.end_date.isoformat() if project.end_date else None,
                ),
            )
            return int(cursor.lastrowid)

    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        with self.get_connection() as conn:
            row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
            return self._row_to_project(row) if row else None

    def upsert_project_required_skill(self, requirement: ProjectRequiredSkill) -> int:
        """Add or update a required skill for a project"""
        level = ProficiencyLevel.parse(requirement.required_proficiency)

        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO project_required_skills(
                    project_id, skill_id, required_proficiency, is_mandatory, min_experience_years
                )
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(project_id, skill_id)
                DO UPDATE SET
                    required_proficiency = excluded.required_proficiency,
                    is_mandatory = excluded.is_mandatory,
                    min_experience_years = excluded.min_experience_years
                """,
                (
                    requirement.project_id,
                    requirement.skill_id,
                    level.value,
                    1 if requirement.is_mandatory else 0,
                    requirement.min_experience_years,
                ),
            )
            row = conn.execute(
                "SELECT id FROM project_required_skills WHERE project_id = ? AND skill_id = ?",
                (requirement.project_id, requirement.skill_id),
            ).fetchone()
            return int(row["id"])

    def get_required_skill_rows(self, project_id: int) -> List[Dict[str, Any]]:
        """
        Raw required-skill rows for a project (mandatory first, then by skill name).
        Values are returned unvalidated; the requirement extractor owns validation.
        """
        with self.get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT
                    prs.skill_id,
                    s.name AS skill_name,
                    prs.required_proficiency,
                    prs.is_mandatory,
                    prs.min_experience_years
                FROM project_required_skills prs
                JOIN skills s ON s.id = prs.skill_id
                WHERE prs.project_id = ?
                ORDER BY prs.is_mandatory DESC, s.name COLLATE NOCASE, prs.skill_id
                """,
                (project_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    # ============================================
    # Allocations
    # ============================================

    def get_total_allocation(self, profile_id: int, exclude_project_id: Optional[int] = None) -> int:
        """Sum of allocation percentages for a profile across projects"""
        with self.get_connection() as conn:
            return self._total_allocation(conn, profile_id, exclude_project_id)

    def upsert_allocation(self, allocation: ProjectAllocation) -> int:
        """Allocate a profile to a project (one row per project/profile pair)"""
        with self.get_connection() as conn:
            return self._write_allocation(conn, allocation)

    def allocate_within_capacity(self, allocation: ProjectAllocation, capacity: int = 100) -> Tuple[Optional[int], int]:
        """
        Check the profile's committed share on other projects and write the
        allocation in one transaction.

        Returns (allocation id, committed). The id is None when the new share
        would push the profile past capacity; nothing is written then.
        """
        with self.get_connection() as conn:
            # take the write lock before reading so concurrent allocations serialize
            conn.execute("BEGIN IMMEDIATE")
            committed = self._total_allocation(conn, allocation.profile_id, allocation.project_id)
            if committed + allocation.allocation_percentage > capacity:
                return None, committed
            return self._write_allocation(conn, allocation), committed

    def _total_allocation(self, conn, profile_id: int, exclude_project_id: Optional[int] = None) -> int:
        query = "SELECT COALESCE(SUM(allocation_percentage), 0) AS total FROM project_allocations WHERE profile_id = ?"
        params: List[Any] = [profile_id]
        if exclude_project_id is not None:
            query += " AND project_id != ?"
            params.append(exclude_project_id)
        return int(conn.execute(query, params).fetchone()["total"])

    def _write_allocation(self, conn, allocation: ProjectAllocation) -> int:
        conn.execute(
            """
            INSERT INTO project_allocations(
                project_id, profile_id, role_in_project, allocation_percentage
            )
            VALUES (?, ?, ?, ?)
            ON CONFLICT(project_id, profile_id)
            DO UPDATE SET
                role_in_project = excluded.role_in_project,
                allocation_percentage = excluded.allocation_percentage,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                allocation.project_id,
                allocation.profile_id,
                allocation.role_in_project,
                allocation.allocation_percentage,
            ),
        )
        row = conn.execute(
            "SELECT id FROM project_allocations WHERE project_id = ? AND profile_id = ?",
            (allocation.project_id, allocation.profile_id),
        ).fetchone()
        return int(row["id"])

    def get_allocations_for_project(self, project_id: int) -> List[ProjectAllocation]:
        with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM project_allocations WHERE project_id = ? ORDER BY profile_id",
                (project_id,),
            )
            return [
                ProjectAllocation(
                    id=row["id"],
                    project_id=row["project_id"],
                    profile_id=row["profile_id"],
                    role_in_project=row["role_in_project"],
                    allocation_percentage=row["allocation_percentage"],
                )
                for row in cursor.fetchall()
            ]

    # ============================================
    # Skill gap analysis
    # ============================================

    def replace_skill_gaps(self, profile_id: int, project_id: int, gaps: List[SkillGap]) -> int:
        """Replace the stored gap analysis of a profile for one project"""
        with self.get_connection() as conn:
            conn.execute(
                "DELETE FROM skill_gap_analysis WHERE profile_id = ? AND project_id = ?",
                (profile_id, project_id),
            )
            conn.executemany(
                """
                INSERT INTO skill_gap_analysis(
                    profile_id, project_id, skill_id, current_level,
                    required_level, gap_score, recommended_action
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        profile_id,
                        project_id,
                        gap.skill_id,
                        gap.current_level.value if gap.current_level else None,
                        gap.required_level.value,
                        gap.gap_score,
                        gap.recommended_action,
                    )
                    for gap in gaps
                ],
            )
            return len(gaps)

    def get_skill_gaps(self, profile_id: int, project_id: int) -> List[SkillGap]:
        with self.get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT g.*, s.name AS skill_name
                FROM skill_gap_analysis g
                JOIN skills s ON s.id = g.skill_id
                WHERE g.profile_id = ? AND g.project_id = ?
                ORDER BY g.id
                """,
                (profile_id, project_id),
            )
            return [
                SkillGap(
                    id=row["id"],
                    profile_id=row["profile_id"],
                    project_id=row["project_id"],
                    skill_id=row["skill_id"],
                    skill_name=row["skill_name"],
                    current_level=ProficiencyLevel(row["current_level"]) if row["current_level"] else None,
                    required_level=ProficiencyLevel(row["required_level"]),
                    gap_score=row["gap_score"],
                    recommended_action=row["recommended_action"],
                )
                for row in cursor.fetchall()
            ]

    # ============================================
    # Helper Methods
    # ============================================

    def _row_to_profile(self, row: sqlite3.Row) -> Profile:
        """Convert database row to Profile object"""
        return Profile(
            id=row["id"],
            company_id=row["company_id"],
            full_name=row["full_name"],
            email=row["email"],
            designation=row["designation"],
            department=row["department"],
            location=row["location"],
            availability_status=AvailabilityStatus(row["availability_status"]),
            years_of_experience=row["years_of_experience"],
            is_active=bool(row["is_active"]),
        )

    def _row_to_employee_skill(self, row: sqlite3.Row) -> EmployeeSkill:
        last_used = row["last_used_date"]
        return EmployeeSkill(
            id=row["id"],
            profile_id=row["profile_id"],
            skill_id=row["skill_id"],
            skill_name=row["skill_name"],
            proficiency_level=ProficiencyLevel(row["proficiency_level"]),
            years_experience=row["years_experience"],
            is_primary=bool(row["is_primary"]),
            last_used_date=date.fromisoformat(last_used) if last_used else None,
            endorsements=row["endorsements"] or 0,
        )

    def _row_to_project(self, row: sqlite3.Row) -> Project:
        return Project(
            id=row["id"],
            company_id=row["company_id"],
            name=row["name"],
            client_name=row["client_name"],
            description=row["description"],
            status=ProjectStatus(row["status"]),
            priority=ProjectPriority(row["priority"]),
            start_date=date.fromisoformat(row["start_date"]) if row["start_date"] else None,
            end_date=date.fromisoformat(row["end_date"]) if row["end_date"] else None,
        )

    def get_statistics(self, company_id: Optional[int] = None) -> Dict[str, Any]:
        """Dashboard statistics, optionally scoped to one company"""
        scope = ""
        params: List[Any] = []
        if company_id is not None:
            scope = " AND company_id = ?"
            params.append(company_id)

        with self.get_connection() as conn:
            stats: Dict[str, Any] = {}

            cursor = conn.execute(
                f"SELECT COUNT(*) AS count FROM profiles WHERE is_active = 1{scope}", params
            )
            stats["total_profiles"] = cursor.fetchone()["count"]

            cursor = conn.execute(
                f"""
                SELECT availability_status, COUNT(*) AS count
                FROM profiles WHERE is_active = 1{scope}
                GROUP BY availability_status
                """,
                params,
            )
            by_availability = {status.value: 0 for status in AvailabilityStatus}
            by_availability.update({row["availability_status"]: row["count"] for row in cursor.fetchall()})
            stats["profiles_by_availability"] = by_availability

            cursor = conn.execute(
                f"SELECT status, COUNT(*) AS count FROM projects WHERE 1 = 1{scope} GROUP BY status",
                params,
            )
            by_status = {status.value: 0 for status in ProjectStatus}
            by_status.update({row["status"]: row["count"] for row in cursor.fetchall()})
            stats["projects_by_status"] = by_status
            stats["total_projects"] = sum(by_status.values())

            cursor = conn.execute(
                f"""
                SELECT s.category, COUNT(*) AS count
                FROM employee_skills es
                JOIN skills s ON s.id = es.skill_id
                JOIN profiles p ON p.id = es.profile_id
                WHERE p.is_active = 1{scope.replace('company_id', 'p.company_id')}
                GROUP BY s.category
                ORDER BY count DESC, s.category
                """,
                params,
            )
            stats["skill_distribution"] = {row["category"]: row["count"] for row in cursor.fetchall()}

            cursor = conn.execute(
                f"""
                SELECT COUNT(*) AS count FROM profiles
                WHERE is_active = 1{scope}
                  AND id NOT IN (SELECT profile_id FROM project_allocations)
                """,
                params,
            )
            stats["bench_count"] = cursor.fetchone()["count"]

            return stats
