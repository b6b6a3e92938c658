"""
Skill listings: discovery filters and owner-gated mutations
"""

from typing import List, Optional

from ..auth.dependencies import Principal, ensure_owner_or_admin
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..enums.skill import SkillType
from ..repository import Repository, SkillRecord
from ..schemas.skill import SkillCreate, SkillUpdate, SkillWithOwner
from .users import user_summaries

logger = get_logger(__name__)

DEFAULT_DISCOVER_LIMIT = 20


def find_skills(
    repository: Repository,
    category: Optional[str] = None,
    skill_type: Optional[SkillType] = None,
    tags: Optional[List[str]] = None,
) -> List[SkillRecord]:
    """
    Discover listings.

    The most selective filter runs in the store (tags, then category, then
    type); the remaining ones are applied to that result in memory. With no
    filters the most recent listings are returned.
    """
    if tags:
        skills = repository.get_skills_by_tags(tags)
    elif category:
        skills = repository.get_skills_by_category(category)
    elif skill_type == SkillType.OFFERING:
        skills = repository.get_offering_skills()
    elif skill_type == SkillType.REQUESTING:
        skills = repository.get_requesting_skills()
    else:
        return repository.get_recent_skills(DEFAULT_DISCOVER_LIMIT)

    if category:
        skills = [s for s in skills if s.category.lower() == category.lower()]
    if skill_type is not None:
        wants_offering = skill_type == SkillType.OFFERING
        skills = [s for s in skills if s.is_offering == wants_offering]
    return skills


def with_owners(repository: Repository, skills: List[SkillRecord]) -> List[SkillWithOwner]:
    owners = user_summaries(repository, (s.user_id for s in skills))
    return [
        SkillWithOwner(**skill.model_dump(), user=owners.get(skill.user_id))
        for skill in skills
    ]


def get_skill_or_404(repository: Repository, skill_id: int) -> SkillRecord:
    skill = repository.get_skill(skill_id)
    if not skill:
        raise NotFoundError("Skill not found")
    return skill


def create_skill(repository: Repository, principal: Principal, command: SkillCreate) -> SkillRecord:
    skill = repository.create_skill({**command.model_dump(), "user_id": principal.user_id})
    logger.info(f"User {principal.user_id} created skill {skill.id}")
    return skill


def update_skill(repository: Repository, principal: Principal, skill_id: int, command: SkillUpdate) -> SkillRecord:
    skill = get_skill_or_404(repository, skill_id)
    ensure_owner_or_admin(principal, skill.user_id, "Not authorized to update this skill")

    updates = command.model_dump(exclude_unset=True)
    for required in ("title", "description", "category", "tags", "is_offering"):
        if required in updates and updates[required] is None:
            raise ValidationError(f"{required} cannot be empty")

    updated = repository.update_skill(skill_id, updates)
    if updated is None:
        raise NotFoundError("Skill not found")
    return updated


def delete_skill(repository: Repository, principal: Principal, skill_id: int) -> None:
    skill = get_skill_or_404(repository, skill_id)
    ensure_owner_or_admin(principal, skill.user_id, "Not authorized to delete this skill")
    if not repository.delete_skill(skill_id):
        raise NotFoundError("Skill not found")
    logger.info(f"User {principal.user_id} deleted skill {skill_id}")
