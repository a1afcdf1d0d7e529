"""PiTools MCP server configuration."""
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings.

    Credentials are optional: a missing token fails only the tools that
    need it, at call time.
    """

    # LinkedIn credentials
    LINKEDIN_ACCESS_TOKEN: Optional[SecretStr] = Field(
        default=None,
        description="LinkedIn member access token with the w_member_social scope"
    )

    # LinkedIn API endpoints
    LINKEDIN_USERINFO_URL: HttpUrl = Field(
        default="https://api.linkedin.com/v2/userinfo",
        description="LinkedIn user info endpoint"
    )
    LINKEDIN_API_BASE_URL: HttpUrl = Field(
        default="https://api.linkedin.com/rest",
        description="Base URL of the versioned LinkedIn REST API (posts, images, videos)"
    )

    # API Version Headers
    LINKEDIN_VERSION: str = "202504"  # LinkedIn API version
    RESTLI_PROTOCOL_VERSION: str = "2.0.0"  # Rest.li protocol version

    # Instagram credentials
    INSTAGRAM_ACCESS_TOKEN: Optional[SecretStr] = Field(
        default=None,
        description="Instagram Graph API access token"
    )
    INSTAGRAM_USER_ID_FOR_POSTING: Optional[str] = Field(
        default=None,
        description="Instagram professional account id that owns published media"
    )
    INSTAGRAM_GRAPH_URL: HttpUrl = Field(
        default="https://graph.instagram.com",
        description="Instagram Graph API base URL"
    )
    INSTAGRAM_PUBLISH_DELAY_SECONDS: float = Field(
        default=7.0,
        ge=0,
        description="Seconds to wait between creating a media container and publishing it"
    )

    # Search
    SEARCH_DEFAULT_REGION: str = "us-en"

    # HTTP client
    HTTP_TIMEOUT: float = Field(default=30.0, gt=0, description="Timeout in seconds for upstream calls")

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    # Server Configuration
    MCP_TRANSPORT: str = "stdio"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        validate_default=True,
        extra="ignore"  # Ignore extra environment variables
    )

    @property
    def linkedin_api_base(self) -> str:
        """LinkedIn REST base URL without a trailing slash."""
        return str(self.LINKEDIN_API_BASE_URL).rstrip("/")

    @property
    def instagram_graph_base(self) -> str:
        """Instagram Graph base URL without a trailing slash."""
        return str(self.INSTAGRAM_GRAPH_URL).rstrip("/")


# Initialize settings
settings = Settings()
