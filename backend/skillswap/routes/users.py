"""
Public profiles and profile edits
"""

from fastapi import APIRouter, Depends

from ..auth.dependencies import Principal, get_current_principal
from ..repository import Repository, get_repository
from ..schemas.user import UserResponse, UserUpdate
from ..services import users as user_service

router = APIRouter()


@router.get("/user/{user_id}", response_model=UserResponse)
def get_user(user_id: int, repository: Repository = Depends(get_repository)):
    return UserResponse.model_validate(user_service.get_user_or_404(repository, user_id))


@router.put("/user/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    command: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """Edit a profile; only the user themselves or an admin"""
    user = user_service.update_profile(repository, principal, user_id, command)
    return UserResponse.model_validate(user)
