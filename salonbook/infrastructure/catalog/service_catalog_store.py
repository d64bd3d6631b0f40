from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from salonbook.application.exceptions import StoreFailure
from salonbook.application.ports.service_catalog import ServiceCatalogPort
from salonbook.domain.entities.service_catalog import ServiceEntry


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceEntry] | None = None) -> None:
        self._catalog = dict(catalog or {})

    def add(self, entry: ServiceEntry) -> None:
        self._catalog[entry.service_id] = entry

    def get_service(self, service_id: str) -> ServiceEntry | None:
        return self._catalog.get(service_id.strip())


class DynamoServiceCatalog(ServiceCatalogPort):
    def __init__(self, table: Any) -> None:
        self._table = table

    def get_service(self, service_id: str) -> ServiceEntry | None:
        try:
            item = self._table.get_item(Key={"id": service_id}).get("Item")
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"Service lookup failed for {service_id}: {e}") from e
        if not item:
            return None
        price = item.get("price")
        return ServiceEntry(
            service_id=str(item["id"]),
            name=str(item.get("name") or ""),
            duration_minutes=int(item.get("duration") or 60),
            provider_id=item.get("stylistId") or item.get("salonId"),
            price=float(price) if price is not None else None,
            category=item.get("category"),
        )
