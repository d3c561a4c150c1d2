from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str


class CorsRequest(BaseModel):
    origins: list[str] = ["*"]


class CorsResponse(BaseModel):
    configured: bool
    origins: list[str]
