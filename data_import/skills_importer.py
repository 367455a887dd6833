"""
Employee skills importer
Loads a CSV / Excel skill matrix into employee_skills.

Notes:
- Skill names go through the SkillNormalizer; rows naming a skill that is
  not in the catalog are skipped and reported, never auto-created.
- Profiles are matched by email and must already exist.
"""

import pandas as pd
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from database.db_manager import DatabaseManager
from database.models import EmployeeSkill, ProficiencyLevel
from matching.exceptions import UnknownSkill
from matching.normalizer import SkillNormalizer

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['Email', 'Skill', 'Proficiency']
_TRUE_VALUES = {'true', 'yes', 'y', '1', 'x'}


class SkillsImporter:
    """Import an employee skill matrix into the directory database."""

    def __init__(self, db_manager: DatabaseManager, normalizer: Optional[SkillNormalizer] = None):
        self.db = db_manager
        self.normalizer = normalizer or SkillNormalizer.from_db(db_manager)
        self.profile_cache: Dict[str, int] = {}  # email -> id mapping

    def import_file(self, path: str) -> Dict[str, Any]:
        """
        Import skills from a .csv, .xls or .xlsx file.

        Expected columns:
        - Email
        - Skill
        - Proficiency (beginner / intermediate / expert)
        - Years Experience (optional)
        - Primary (optional)
        - Last Used (optional, ISO date)
        """
        logger.info(f"Starting skills import from {path}")

        if Path(path).suffix.lower() == '.csv':
            df = pd.read_csv(path)
        else:
            df = pd.read_excel(path)
        return self.import_dataframe(df)

    def import_dataframe(self, df: pd.DataFrame) -> Dict[str, Any]:
        # Normalize column names
        df.columns = df.columns.str.strip()

        missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Missing required columns: {missing_cols}")

        stats: Dict[str, Any] = {
            'total_rows': len(df),
            'imported_skills': 0,
            'unknown_profiles': [],
            'unknown_skills': [],
            'errors': 0,
        }

        for idx, row in df.iterrows():
            email = str(row.get('Email', '')).strip().lower()
            skill_ref = str(row.get('Skill', '')).strip()

            profile_id = self._profile_id(email)
            if profile_id is None:
                stats['unknown_profiles'].append({'row': idx, 'email': email})
                continue

            try:
                skill_id = self.normalizer.normalize(skill_ref)
            except UnknownSkill:
                stats['unknown_skills'].append({'row': idx, 'skill': skill_ref})
                continue

            try:
                self.db.upsert_employee_skill(
                    EmployeeSkill(
                        profile_id=profile_id,
                        skill_id=skill_id,
                        proficiency_level=ProficiencyLevel.parse(row.get('Proficiency')),
                        years_experience=self._optional_float(row.get('Years Experience')),
                        is_primary=str(row.get('Primary', '')).strip().lower() in _TRUE_VALUES,
                        last_used_date=self._optional_date(row.get('Last Used')),
                    )
                )
                stats['imported_skills'] += 1
            except ValueError as e:
                logger.error(f"Error importing row {idx}: {e}")
                stats['errors'] += 1

        logger.info(
            f"Skills import completed: {stats['imported_skills']}/{stats['total_rows']} rows, "
            f"{len(stats['unknown_skills'])} unknown skills, "
            f"{len(stats['unknown_profiles'])} unknown profiles, {stats['errors']} errors"
        )
        return stats

    def _profile_id(self, email: str) -> Optional[int]:
        if not email:
            return None
        if email not in self.profile_cache:
            profile = self.db.get_profile_by_email(email)
            if profile is None:
                return None
            self.profile_cache[email] = profile.id
        return self.profile_cache[email]

    @staticmethod
    def _optional_float(value) -> Optional[float]:
        if value is None or pd.isna(value) or str(value).strip() == '':
            return None
        years = float(value)
        if years < 0:
            raise ValueError(f"Years Experience must be >= 0, got {years}")
        return years

    @staticmethod
    def _optional_date(value):
        if value is None or pd.isna(value) or str(value).strip() == '':
            return None
        return pd.to_datetime(value).date()
