"""Pydantic schemas for API requests."""

from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    The URL is validated by the service so that a malformed URL is reported
    as a 400 rather than a schema error.
    """

    url: str = Field(..., description="The absolute http(s) URL to shorten")
    name: Optional[str] = Field(None, description="Optional user-chosen short code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "name": "myrepo"},
            ]
        }
    }
