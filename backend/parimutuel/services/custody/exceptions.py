"""Custody service exceptions."""


class CustodyError(Exception):
    """Base custody exception."""

    def __init__(self, message: str, bettor: str | None = None):
        super().__init__(message)
        self.bettor = bettor


class InsufficientFundsError(CustodyError):
    """Treasury cannot cover the transfer."""

    pass


class TransferRejectedError(CustodyError):
    """Transfer request is invalid."""

    pass


class AddressDecodeError(CustodyError):
    """Identity cannot be decoded into a transfer address."""

    pass
