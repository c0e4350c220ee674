"""Review domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import Forbidden, NotFound, ValidationFailed


class ReviewNotFound(NotFound):
    default_message = "Review not found."


class AlreadyReviewed(ValidationFailed):
    default_message = "You have already reviewed this product."


class ReviewNotAllowed(Forbidden):
    default_message = "Only customers who purchased this product can leave a review."


class AlreadyMarkedHelpful(ValidationFailed):
    default_message = "You have already marked this review as helpful."
