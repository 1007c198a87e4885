"""Custody service config."""

from pydantic import BaseModel


class CustodyConfig(BaseModel):
    """Custody config."""

    paper_mode: bool = True
    currency: str = "IOTA"
    transfer_fee: int = 1
    initial_treasury: int = 0
    address_alphabet: str = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    max_address_length: int = 128
