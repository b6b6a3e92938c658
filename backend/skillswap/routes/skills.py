"""
Skill listing routes
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ..auth.dependencies import Principal, get_current_principal
from ..enums.skill import SkillType
from ..repository import Repository, get_repository
from ..schemas.skill import SkillCreate, SkillResponse, SkillUpdate, SkillWithOwner
from ..services import skills as skill_service

router = APIRouter()


@router.get("/skills", response_model=List[SkillWithOwner])
def list_skills(
    category: Optional[str] = None,
    skill_type: Optional[SkillType] = Query(None, alias="type"),
    tags: Optional[str] = Query(None, description="Comma-separated; matches skills sharing any tag"),
    repository: Repository = Depends(get_repository),
):
    """
    Discover skills.

    - **category**: case-insensitive exact match
    - **type**: `offering` or `requesting`
    - **tags**: comma-separated list, a skill matches if it has any of them

    Without filters the 20 most recent listings are returned.
    """
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    skills = skill_service.find_skills(repository, category=category, skill_type=skill_type, tags=tag_list)
    return skill_service.with_owners(repository, skills)


@router.get("/skills/recent", response_model=List[SkillWithOwner])
def recent_skills(
    limit: int = Query(6, ge=1, le=100),
    repository: Repository = Depends(get_repository),
):
    return skill_service.with_owners(repository, repository.get_recent_skills(limit))


@router.get("/skills/user/{user_id}", response_model=List[SkillResponse])
def skills_by_user(user_id: int, repository: Repository = Depends(get_repository)):
    return [SkillResponse.model_validate(s) for s in repository.get_skills_by_user(user_id)]


@router.get("/skills/{skill_id}", response_model=SkillWithOwner)
def get_skill(skill_id: int, repository: Repository = Depends(get_repository)):
    skill = skill_service.get_skill_or_404(repository, skill_id)
    return skill_service.with_owners(repository, [skill])[0]


@router.post("/skills", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
def create_skill(
    command: SkillCreate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    return SkillResponse.model_validate(skill_service.create_skill(repository, principal, command))


@router.put("/skills/{skill_id}", response_model=SkillResponse)
def update_skill(
    skill_id: int,
    command: SkillUpdate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    skill = skill_service.update_skill(repository, principal, skill_id, command)
    return SkillResponse.model_validate(skill)


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    skill_id: int,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    skill_service.delete_skill(repository, principal, skill_id)
