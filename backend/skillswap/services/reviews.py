"""
Reviews left by exchange participants once an exchange is completed
"""

from typing import List

from ..auth.dependencies import Principal
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..core.logging import get_logger
from ..enums.exchange import ExchangeStatus
from ..repository import Repository, ReviewRecord
from ..schemas.review import ReviewCreate, ReviewWithReviewer
from .exchanges import get_exchange_or_404
from .users import user_summaries

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def create_review(repository: Repository, principal: Principal, command: ReviewCreate) -> ReviewRecord:
    """
    Preconditions are checked in order and the first failure wins:
    exchange exists, exchange is completed, caller took part in it,
    rating is within range.
    """
    exchange = get_exchange_or_404(repository, command.exchange_id)
    if exchange.status != ExchangeStatus.COMPLETED:
        raise ValidationError("You can only review completed exchanges")
    if not exchange.is_participant(principal.user_id):
        raise AuthorizationError("Only exchange participants can leave a review")
    if not MIN_RATING <= command.rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    receiver_id = exchange.other_participant(principal.user_id)
    if command.reviewer_id is not None and command.reviewer_id != principal.user_id:
        raise ValidationError("Reviewer ID must match the authenticated user")
    if command.receiver_id is not None and command.receiver_id != receiver_id:
        raise ValidationError("Receiver must be the other participant of the exchange")
    if repository.get_review_for_exchange_by_reviewer(exchange.id, principal.user_id):
        raise ConflictError("You have already reviewed this exchange")

    review = repository.create_review({
        "exchange_id": exchange.id,
        "reviewer_id": principal.user_id,
        "receiver_id": receiver_id,
        "rating": command.rating,
        "comment": command.comment,
    })
    logger.info(
        f"User {principal.user_id} reviewed user {receiver_id} for exchange {exchange.id} ({review.rating}/5)"
    )
    return review


def reviews_with_reviewers(repository: Repository, user_id: int) -> List[ReviewWithReviewer]:
    reviews = repository.get_reviews_by_user(user_id)
    reviewers = user_summaries(repository, (r.reviewer_id for r in reviews))
    return [
        ReviewWithReviewer(**review.model_dump(), reviewer=reviewers.get(review.reviewer_id))
        for review in reviews
    ]
