"""
Skill normalizer

Maps raw skill references (catalog ids, names, aliases) to canonical
catalog skill ids. Exact matching only unless fuzzy matching is enabled.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from database.models import Skill

from .exceptions import UnknownSkill

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")
_TOKEN_SPLIT = re.compile(r"\W+")


def _norm(s: str) -> str:
    return _WS.sub(" ", (s or "").strip()).lower()


def _tokens(s: str) -> set:
    return set(t for t in _TOKEN_SPLIT.split(_norm(s)) if t)


class SkillNormalizer:
    """Resolves skill references against a catalog snapshot"""

    def __init__(
        self,
        catalog: Sequence[Skill],
        aliases: Optional[Dict[str, str]] = None,
        fuzzy: bool = False,
        threshold: float = 0.5,
    ):
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"threshold must be in (0, 1], got {threshold}")

        self.fuzzy = fuzzy
        self.threshold = threshold

        self._names: Dict[int, str] = {}
        self._by_name: Dict[str, int] = {}
        for skill in sorted(catalog, key=lambda s: s.id):
            self._names[skill.id] = skill.name
            self._by_name.setdefault(_norm(skill.name), skill.id)

        # aliases resolve to canonical names, e.g. {"node": "Node.js"}
        for alias, target in (aliases or {}).items():
            target_id = self._by_name.get(_norm(target))
            if target_id is None:
                raise ValueError(f"Alias {alias!r} points at unknown skill {target!r}")
            self._by_name.setdefault(_norm(alias), target_id)

        self._token_index: List[Tuple[int, set]] = [
            (skill_id, _tokens(name)) for skill_id, name in self._names.items()
        ]

    @classmethod
    def from_db(cls, db, **kwargs) -> "SkillNormalizer":
        return cls(db.get_skill_catalog(), **kwargs)

    @property
    def skill_ids(self) -> List[int]:
        return list(self._names)

    def name_of(self, skill_id: int) -> str:
        return self._names[skill_id]

    def normalize(self, skill_ref: Any) -> int:
        """
        Return the canonical skill id for a catalog id or skill name.
        Raises UnknownSkill when nothing matches.
        """
        # bool is an int subclass but never a valid id
        if isinstance(skill_ref, bool) or skill_ref is None:
            raise UnknownSkill(skill_ref)

        if isinstance(skill_ref, int):
            if skill_ref in self._names:
                return skill_ref
            raise UnknownSkill(skill_ref)

        text = _norm(str(skill_ref))
        if not text:
            raise UnknownSkill(skill_ref)

        if text.isdigit():
            skill_id = int(text)
            if skill_id in self._names:
                return skill_id
            raise UnknownSkill(skill_ref)

        skill_id = self._by_name.get(text)
        if skill_id is not None:
            return skill_id

        if self.fuzzy:
            skill_id = self._fuzzy_lookup(text)
            if skill_id is not None:
                logger.debug(f"Fuzzy-matched skill {skill_ref!r} -> {self._names[skill_id]!r}")
                return skill_id

        raise UnknownSkill(skill_ref)

    def normalize_many(self, skill_refs: Iterable[Any]) -> Tuple[List[int], List[Any]]:
        """
        Normalize several references.
        Returns (canonical ids deduped in order, unknown references).
        """
        ids: List[int] = []
        unknown: List[Any] = []
        seen = set()
        for ref in skill_refs:
            try:
                skill_id = self.normalize(ref)
            except UnknownSkill:
                unknown.append(ref)
                continue
            if skill_id in seen:
                continue
            seen.add(skill_id)
            ids.append(skill_id)
        return ids, unknown

    def _fuzzy_lookup(self, text: str) -> Optional[int]:
        """Token-overlap (Jaccard) match; ties go to the lowest skill id"""
        tokens = _tokens(text)
        if not tokens:
            return None

        best: Optional[int] = None
        best_score = 0.0
        for skill_id, skill_tokens in self._token_index:
            if not skill_tokens:
                continue
            score = len(tokens & skill_tokens) / len(tokens | skill_tokens)
            if score > best_score:
                best_score = score
                best = skill_id

        if best is not None and best_score >= self.threshold:
            return best
        return None
