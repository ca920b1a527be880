from pydantic import BaseModel
from typing import Optional
import enum


class DnsMode(str, enum.Enum):
    CUSTOM = "CUSTOM"
    DEFAULT = "DEFAULT"
    UNMANAGED = "UNMANAGED"


class DnsStatus(BaseModel):
    status: DnsMode
    ip: str


class ErrorDetail(BaseModel):
    message: str
    code: str


class DnsStatusResponse(BaseModel):
    ok: bool = True
    data: DnsStatus


class ErrorResponse(BaseModel):
    ok: bool = False
    error: ErrorDetail


class ServiceInfo(BaseModel):
    service: str
    version: str
    custom_dns: str
    ui: str = "Visit / for the web interface"
    endpoints: dict[str, str]
