"""Response model for POST /api/upload."""

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Public URL and metadata of a stored file."""
    model_config = ConfigDict(populate_by_name=True)

    url: str
    file_name: str = Field(alias="fileName")
    size: int
