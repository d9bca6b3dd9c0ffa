# fanbase/services/geolocation_service.py
import ipaddress
import logging
from typing import Optional
import httpx
from fanbase.config import settings
from fanbase.models import GeoLocation

logger = logging.getLogger(__name__)

LOOKUP_FIELDS = "status,country,city,countryCode"

class GeolocationService:
    """Resolves a client address to a coarse location via ip-api.

    Never raises. Any skipped or failed lookup comes back as an all-null
    GeoLocation whose `degraded` field names the reason.
    """

    def __init__(
        self,
        base_url: str = settings.geolocation_url,
        timeout: float = settings.geolocation_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, ip: Optional[str]) -> GeoLocation:
        if not ip or ip == "unknown":
            return GeoLocation.unknown("unknown address")

        try:
            address = ipaddress.ip_address(ip)
        except ValueError:
            return GeoLocation.unknown("unparsable address")

        if not address.is_global:
            # Loopback, private and reserved ranges never leave the process
            return GeoLocation.unknown("non-public address")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}/{ip}",
                    params={"fields": LOOKUP_FIELDS}
                )

            if response.status_code != 200:
                logger.warning(f"Geolocation lookup for {ip} returned HTTP {response.status_code}")
                return GeoLocation.unknown(f"http {response.status_code}")

            data = response.json()
            if data.get("status") != "success":
                return GeoLocation.unknown("lookup failed")

            return GeoLocation(
                country=data.get("country"),
                city=data.get("city"),
                country_code=data.get("countryCode"),
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geolocation lookup failed for {ip}: {e}")
            return GeoLocation.unknown(type(e).__name__)

geolocation_service = GeolocationService()

def get_geolocation_service() -> GeolocationService:
    return geolocation_service
