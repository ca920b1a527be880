from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# RouterOS REST replies use hyphenated keys, ".id" identifiers and
# "true"/"false" strings for booleans.
_ROUTEROS_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


class Lease(BaseModel):
    id: str = Field(alias=".id")
    address: str
    mac_address: str = Field(default="", alias="mac-address")
    dynamic: bool = False
    comment: str = ""
    dhcp_option: str = Field(default="", alias="dhcp-option")
    server: str = ""

    model_config = _ROUTEROS_CONFIG


class LeaseCreate(BaseModel):
    address: str
    mac_address: str = Field(alias="mac-address")
    comment: str
    dhcp_option: str = Field(alias="dhcp-option")
    server: Optional[str] = None

    model_config = _ROUTEROS_CONFIG


class DhcpOption(BaseModel):
    id: str = Field(alias=".id")
    name: str
    code: int
    value: str
    comment: str = ""

    model_config = _ROUTEROS_CONFIG


class DhcpOptionCreate(BaseModel):
    name: str
    code: int
    value: str
    comment: str

    model_config = _ROUTEROS_CONFIG


class ArpEntry(BaseModel):
    id: str = Field(default="", alias=".id")
    address: str
    mac_address: str = Field(default="", alias="mac-address")
    interface: str = ""

    model_config = _ROUTEROS_CONFIG
