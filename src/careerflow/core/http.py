import httpx

from careerflow.core.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Build the shared outbound client used for geocoding and job feeds."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.geocoding_timeout_seconds),
        headers={"User-Agent": settings.geocoding_user_agent},
        follow_redirects=True,
    )
