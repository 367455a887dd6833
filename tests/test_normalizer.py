"""Tests for the skill normalizer."""

import pytest

from database.models import Skill
from matching.exceptions import UnknownSkill
from matching.normalizer import SkillNormalizer


CATALOG = [
    Skill(id=1, name="React", category="Frontend"),
    Skill(id=2, name="Node.js", category="Backend"),
    Skill(id=3, name="Machine Learning", category="Data"),
    Skill(id=4, name="Amazon Web Services", category="Cloud"),
]


class TestExactMatching:
    """Exact (case / whitespace insensitive) resolution."""

    def test_name_lookup_ignores_case_and_spacing(self):
        normalizer = SkillNormalizer(CATALOG)

        assert normalizer.normalize("react") == 1
        assert normalizer.normalize("  machine   LEARNING ") == 3

    def test_ids_and_numeric_strings(self):
        normalizer = SkillNormalizer(CATALOG)

        assert normalizer.normalize(2) == 2
        assert normalizer.normalize("4") == 4

    @pytest.mark.parametrize("ref", ["Reactjs", "", None, 99, "99", True])
    def test_unknown_references(self, ref):
        normalizer = SkillNormalizer(CATALOG)

        with pytest.raises(UnknownSkill) as exc:
            normalizer.normalize(ref)
        assert exc.value.error_code == "UNKNOWN_SKILL"

    def test_aliases(self):
        normalizer = SkillNormalizer(CATALOG, aliases={"AWS": "Amazon Web Services", "ML": "machine learning"})

        assert normalizer.normalize("aws") == 4
        assert normalizer.normalize("ml") == 3

    def test_alias_to_unknown_skill_is_rejected(self):
        with pytest.raises(ValueError):
            SkillNormalizer(CATALOG, aliases={"vue": "Vue.js"})


class TestFuzzyMatching:
    """Token-overlap fallback."""

    def test_disabled_by_default(self):
        with pytest.raises(UnknownSkill):
            SkillNormalizer(CATALOG).normalize("node")

    def test_token_overlap_above_threshold(self):
        normalizer = SkillNormalizer(CATALOG, fuzzy=True, threshold=0.5)

        assert normalizer.normalize("node") == 2
        assert normalizer.normalize("learning machine") == 3

    def test_below_threshold_is_unknown(self):
        normalizer = SkillNormalizer(CATALOG, fuzzy=True, threshold=0.5)

        with pytest.raises(UnknownSkill):
            normalizer.normalize("web")

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            SkillNormalizer(CATALOG, fuzzy=True, threshold=0)


def test_normalize_many_dedupes_and_reports_unknown():
    normalizer = SkillNormalizer(CATALOG)

    ids, unknown = normalizer.normalize_many(["React", "react", 2, "Cobol"])

    assert ids == [1, 2]
    assert unknown == ["Cobol"]


def test_from_db_uses_catalog(world, db):
    normalizer = SkillNormalizer.from_db(db)

    assert normalizer.normalize("typescript") == world['skills']['TypeScript']
    assert normalizer.name_of(world['skills']['AWS']) == "AWS"
