"""Pydantic request models for API endpoints."""

from pydantic import BaseModel


class ActionBody(BaseModel):
    action: str


class CheckConnectionBody(BaseModel):
    provider_url: str
    api_key: str = ""
    provider_format: str = "koboldcpp"
