"""IP geolocation for UI language selection.

Uses ipapi.co (free tier, no key required). Lookups never fail from the
caller's point of view: local addresses get the default locale and any
upstream problem yields the error fallback.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

IPAPI_URL = "https://ipapi.co/{ip}/json/"
USER_AGENT = "prophetic-front/1.0"

DEFAULT_COUNTRY = "FR"
DEFAULT_LANGUAGE = "fr"
FALLBACK_LANGUAGE = "en"
LOCAL_ADDRESSES = {"unknown", "127.0.0.1", "::1"}

# Multilingual countries default to French where it is an official language
COUNTRY_TO_LANGUAGE = {
    "FR": "fr",
    "BE": "fr",
    "CH": "fr",
    "CA": "fr",
    "US": "en",
    "GB": "en",
    "AU": "en",
    "NZ": "en",
    "IE": "en",
    "ES": "es",
    "MX": "es",
    "AR": "es",
    "CO": "es",
    "CL": "es",
    "PE": "es",
    "DE": "de",
    "AT": "de",
    "IT": "it",
    "PT": "pt",
    "BR": "pt",
    "NL": "nl",
    "JP": "ja",
    "CN": "zh",
    "TW": "zh",
    "HK": "zh",
}


def client_ip(headers) -> str:
    """Pick the caller IP from proxy headers: X-Forwarded-For first, then X-Real-IP."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or "unknown"


def language_for(country_code: str) -> str:
    return COUNTRY_TO_LANGUAGE.get(country_code.upper(), FALLBACK_LANGUAGE)


class GeolocationService:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def locate(self, ip: str) -> dict:
        if ip in LOCAL_ADDRESSES:
            return {
                "country": DEFAULT_COUNTRY,
                "language": DEFAULT_LANGUAGE,
                "ip": ip,
                "source": "default",
            }

        try:
            async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
                resp = await client.get(IPAPI_URL.format(ip=ip), headers={"User-Agent": USER_AGENT})
                resp.raise_for_status()
                data = resp.json()
            if not isinstance(data, dict):
                raise ValueError(f"unexpected geolocation payload: {data!r}")
            country = data.get("country_code") or DEFAULT_COUNTRY
            if not isinstance(country, str):
                raise ValueError(f"unexpected country code: {country!r}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Geolocation lookup failed for %s: %s", ip, e)
            return {
                "country": DEFAULT_COUNTRY,
                "language": DEFAULT_LANGUAGE,
                "ip": "unknown",
                "source": "error_fallback",
            }

        return {
            "country": country,
            "language": language_for(country),
            "ip": ip,
            "source": "ipapi",
        }
