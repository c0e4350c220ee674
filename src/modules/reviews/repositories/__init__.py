from modules.reviews.repositories.django_repository import ReviewDjangoRepository
from modules.reviews.repositories.interfaces import IReviewRepository

__all__ = ["IReviewRepository", "ReviewDjangoRepository"]
