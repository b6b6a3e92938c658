"""
Review routes
"""

from fastapi import APIRouter, Depends, status
from typing import List

from ..auth.dependencies import Principal, get_current_principal
from ..repository import Repository, get_repository
from ..schemas.review import AverageRatingResponse, ReviewCreate, ReviewResponse, ReviewWithReviewer
from ..services import reviews as review_service

router = APIRouter()


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    command: ReviewCreate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """Review the other participant of a completed exchange"""
    return ReviewResponse.model_validate(review_service.create_review(repository, principal, command))


@router.get("/reviews/user/{user_id}", response_model=List[ReviewWithReviewer])
def get_reviews_for_user(user_id: int, repository: Repository = Depends(get_repository)):
    return review_service.reviews_with_reviewers(repository, user_id)


@router.get("/reviews/user/{user_id}/average", response_model=AverageRatingResponse)
def get_average_rating(user_id: int, repository: Repository = Depends(get_repository)):
    return AverageRatingResponse(average_rating=repository.get_average_rating_for_user(user_id))
