"""
Formatting helpers shared by the API and services
"""
import random
import re
import string
from typing import Optional
from urllib.parse import quote


def format_rupiah(amount: Optional[int]) -> str:
    """150000 -> 'Rp 150.000'"""
    amount = int(amount or 0)
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(amount):,}".replace(",", ".")


def normalize_phone(phone: str) -> str:
    """Keep digits only and turn a local 0 prefix into the 62 country code"""
    clean = re.sub(r"\D", "", phone or "")
    if clean.startswith("0"):
        clean = "62" + clean[1:]
    return clean


def generate_whatsapp_link(phone: str, message: str) -> str:
    """Link that opens a WhatsApp chat with the message pre-filled"""
    return f"https://wa.me/{normalize_phone(phone)}?text={quote(message, safe='')}"


def generate_affiliate_code(length: int = 6) -> str:
    """Random uppercase alphanumeric code"""
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


def normalize_code(code: Optional[str]) -> str:
    """Codes are compared trimmed and uppercase"""
    return (code or "").strip().upper()


def format_product_name(name: Optional[str]) -> str:
    """Shorten long product names to their first two words"""
    if not name or not name.strip():
        return "Produk"

    if len(name) > 20:
        words = name.split(" ")
        if len(words) >= 2:
            return f"{words[0]} {words[1]}..."
    return name
