"""Funds custody service."""

from .client import CustodyClient, PaperCustodyClient, create_custody_client
from .codec import AddressCodec, Base58AddressCodec
from .config import CustodyConfig
from .exceptions import (
    AddressDecodeError,
    CustodyError,
    InsufficientFundsError,
    TransferRejectedError,
)
from .models import Address, DepositReceipt, TransferReceipt

__all__ = [
    "CustodyClient",
    "PaperCustodyClient",
    "create_custody_client",
    "AddressCodec",
    "Base58AddressCodec",
    "CustodyConfig",
    "Address",
    "DepositReceipt",
    "TransferReceipt",
    "CustodyError",
    "AddressDecodeError",
    "InsufficientFundsError",
    "TransferRejectedError",
]
