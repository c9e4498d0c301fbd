"""HTTP client for the catalog service"""

import logging
from typing import Optional
import httpx
from src.app.services.catalog_store import CatalogStore, CollaboratorError
from src.domain.cart import ProductSnapshot

logger = logging.getLogger(__name__)


class HttpCatalogStore(CatalogStore):
    """Reads products from GET {base_url}/products/{product_id}"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{self.base_url}/products/{product_id}")
        except httpx.HTTPError as e:
            logger.error(f"Catalog lookup for product {product_id} failed: {e}")
            raise CollaboratorError(f"Catalog unavailable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise CollaboratorError(f"Catalog answered HTTP {response.status_code}")

        data = response.json()
        return ProductSnapshot(
            id=str(data["id"]),
            name=data.get("name") or "Product",
            price=int(data["price"]),
            tenant_id=str(data["tenant_id"]),
        )
