"""
Admin-only routes
"""

from fastapi import APIRouter, Depends, status
from typing import List

from ..auth.dependencies import Principal, require_admin
from ..repository import Repository, get_repository
from ..schemas.skill import SkillWithOwner
from ..schemas.user import UserResponse
from ..services import skills as skill_service
from ..services import users as user_service

router = APIRouter()


@router.get("/admin/users", response_model=List[UserResponse])
def list_users(
    admin: Principal = Depends(require_admin),
    repository: Repository = Depends(get_repository),
):
    return [UserResponse.model_validate(u) for u in repository.list_users()]


@router.get("/admin/skills", response_model=List[SkillWithOwner])
def list_skills(
    admin: Principal = Depends(require_admin),
    repository: Repository = Depends(get_repository),
):
    return skill_service.with_owners(repository, repository.list_skills())


@router.delete("/admin/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    repository: Repository = Depends(get_repository),
):
    """Remove a user together with their skills, exchanges, messages and reviews"""
    user_service.delete_user(repository, admin, user_id)
