"""
Store settings Pydantic schemas
"""
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class BankAccount(BaseModel):
    bank: str
    number: str
    name: str


class EWallet(BaseModel):
    provider: Literal["DANA", "OVO", "GOPAY", "SHOPEEPAY", "LINKAJA"]
    number: str
    name: str


class StoreSettings(BaseModel):
    """Store-wide configuration kept in the settings table"""
    store_name: str = "Digital Store"
    store_description: str = "Pusat Produk Digital Terbaik"
    whatsapp_number: str = ""
    email_contact: str = ""
    address: str = ""
    affiliate_commission_rate: float = Field(0, ge=0, le=100, description="Percentage of net profit")
    payment_instructions: str = ""
    bank_accounts: List[BankAccount] = Field(default_factory=list)
    e_wallets: List[EWallet] = Field(default_factory=list)
    qris_url: Optional[str] = ""
