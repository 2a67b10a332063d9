"""Document paths of the single restaurant tenant."""

from dataclasses import dataclass

from qrmenu.services.store import join_path


@dataclass(frozen=True)
class TenantPaths:
    """
    Persisted layout:

        restaurants/{tenant}                                  info, adminPassword, markers
        restaurants/{tenant}/categories/{category}            name, description, order
        restaurants/{tenant}/categories/{category}/items/{item}

    Raises ValueError for an empty id or an id containing "/".
    """
    tenant_id: str = "main-restaurant"

    @property
    def tenant(self) -> str:
        return join_path("restaurants", self.tenant_id)

    @property
    def categories(self) -> str:
        return join_path("restaurants", self.tenant_id, "categories")

    def category(self, category_id: str) -> str:
        return join_path("restaurants", self.tenant_id, "categories", category_id)

    def items(self, category_id: str) -> str:
        return join_path("restaurants", self.tenant_id, "categories", category_id, "items")

    def item(self, category_id: str, item_id: str) -> str:
        return join_path(
            "restaurants", self.tenant_id, "categories", category_id, "items", item_id
        )
