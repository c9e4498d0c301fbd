"""Catalog Store Interface

Product lookup owned by the catalog service. Orders read price and tenant
only at creation time.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.cart import ProductSnapshot


class CollaboratorError(Exception):
    """An external collaborator (catalog, account directory) failed"""


class CatalogStore(ABC):
    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        """
        Returns:
            ProductSnapshot, or None if the product does not exist

        Raises:
            CollaboratorError: catalog unreachable
        """
        pass
