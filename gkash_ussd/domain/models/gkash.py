from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    # GKash API speaks camelCase; accept both spellings
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class User(_ApiModel):
    id: str
    name: str = ""
    phone_number: str = Field(default="", alias="phoneNumber")
    id_number: str = Field(default="", alias="idNumber")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class LoginResult(_ApiModel):
    user: User
    token: Optional[str] = None


class Account(_ApiModel):
    id: str
    user_id: str = Field(default="", alias="userId")
    type: str
    balance: Decimal = Field(default=Decimal("0"))
    account_number: str = Field(alias="accountNumber")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class Transaction(_ApiModel):
    id: str
    account_id: str = Field(default="", alias="accountId")
    type: Literal["deposit", "withdraw"]
    amount: Decimal
    balance: Decimal
    timestamp: datetime
