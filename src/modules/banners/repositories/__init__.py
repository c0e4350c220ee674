from modules.banners.repositories.django_repository import BannerDjangoRepository
from modules.banners.repositories.interfaces import IBannerRepository

__all__ = ["BannerDjangoRepository", "IBannerRepository"]
