from pydantic import BaseModel, Field


class ResolvedDocumentDTO(BaseModel):
    url: str
    signed: bool = Field(description="Whether ``url`` is a time-limited signed URL")
    available: bool = Field(description="False when the stored object is missing")
