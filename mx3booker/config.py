from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mx3booker.exceptions import ConfigurationError
from mx3booker.models import Credentials


class LoginDetails(BaseSettings):
    model_config = SettingsConfigDict(env_file=Path(__file__).parent / ".env")

    mx3_username: str = Field(default="", alias="MX3_USERNAME")
    mx3_password: str = Field(default="", alias="MX3_PASSWORD", repr=False)

    def credentials(self) -> Credentials:
        """Return validated credentials, raising ConfigurationError if unset."""
        if not self.mx3_username or not self.mx3_password:
            raise ConfigurationError(
                "MX3_USERNAME and MX3_PASSWORD environment variables are required"
            )
        return Credentials(username=self.mx3_username, password=self.mx3_password)


class BookingConstants:
    """Centralized constants for booking operations."""

    DEFAULT_TIMEOUT = 15
    MAX_SESSION_RETRIES = 1
    MIN_SESSION_COOKIES = 2

    # HTTP Headers
    USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.3.1 Safari/605.1.15"
    ACCEPT_LANGUAGE = "en-US,en;q=0.9"
    ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    CONTENT_TYPE = "application/x-www-form-urlencoded"


class BookingDetails(BaseModel):
    base_url: str = "https://mx3fitness.com"
    location_path: str = "/reserve-noe-station"
    location_id: str = "51550"

    # The site's login page script copies the session cookie under a second
    # name and the server rejects requests that lack the copy.
    session_cookie_name: str = "AccelSite_mx3fitness_com"
    mirror_cookie_name: str = "as_mx3fitness_com"
    login_form_origin: str = "memberLoginForm.php"

    @property
    def location_url(self) -> str:
        return self.base_url.rstrip("/") + self.location_path
