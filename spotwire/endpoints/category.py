"""Browse category endpoints."""

from ..models import Categories, Category, Page
from ..url_parser import path_segment
from .base import Builder, CountryMixin, LocaleMixin, PagingMixin


class BrowseCategoryBuilder(CountryMixin, LocaleMixin, Builder):
    def __init__(self, http, category_id: str):
        super().__init__(http)
        self._id = path_segment(category_id)

    async def get(self) -> Category:
        return await self._send("GET", f"/browse/categories/{self._id}", Category)


class BrowseCategoriesBuilder(CountryMixin, LocaleMixin, PagingMixin, Builder):
    async def get(self) -> Page[Category]:
        result = await self._send("GET", "/browse/categories", Categories)
        return result.categories
