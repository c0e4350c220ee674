"""Banner service layer: public listing plus admin CRUD."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.utils import timezone

from modules.banners.exceptions import BannerNotFound
from modules.banners.models import Banner
from modules.core.exceptions import Forbidden

if TYPE_CHECKING:
    from modules.banners.dtos import CreateBannerDTO, UpdateBannerDTO
    from modules.banners.repositories.interfaces import IBannerRepository
    from modules.core.actors import Actor

logger = structlog.get_logger(__name__)


class BannerService:
    def __init__(self, repository: IBannerRepository) -> None:
        self._repo = repository

    def list_active(self):
        """Banners shown right now, by ``position`` then newest (public)."""
        return self._repo.currently_active(timezone.now())

    def list_all(self, actor: Actor):
        self._require_admin(actor)
        return self._repo.list()

    def get_banner(self, id: str, actor: Actor) -> Banner:
        self._require_admin(actor)
        return self._get_or_raise(id)

    def create_banner(self, dto: CreateBannerDTO, actor: Actor) -> Banner:
        self._require_admin(actor)
        banner = self._repo.save(Banner(**dto.to_fields()))
        logger.info("banner.created", banner_id=str(banner.id))
        return banner

    def update_banner(self, id: str, dto: UpdateBannerDTO, actor: Actor) -> Banner:
        self._require_admin(actor)
        banner = self._get_or_raise(id)
        for field, value in dto.changes().items():
            setattr(banner, field, value)
        banner = self._repo.save(banner)
        logger.info("banner.updated", banner_id=str(id), fields=sorted(dto.model_fields_set))
        return banner

    def toggle_banner(self, id: str, actor: Actor) -> Banner:
        self._require_admin(actor)
        banner = self._get_or_raise(id)
        banner.is_active = not banner.is_active
        banner = self._repo.save(banner)
        logger.info("banner.toggled", banner_id=str(id), is_active=banner.is_active)
        return banner

    def delete_banner(self, id: str, actor: Actor) -> None:
        self._require_admin(actor)
        if not self._repo.delete(id):
            raise BannerNotFound(f"Banner {id} not found.")
        logger.info("banner.deleted", banner_id=str(id))

    def _get_or_raise(self, id: str) -> Banner:
        banner = self._repo.get_by_id(id)
        if not banner:
            raise BannerNotFound(f"Banner {id} not found.")
        return banner

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise Forbidden("Only administrators can manage banners.")
