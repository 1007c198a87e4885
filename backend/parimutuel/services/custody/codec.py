"""Translate stored bettor identities into transfer addresses."""

from typing import Protocol

from .config import CustodyConfig
from .exceptions import AddressDecodeError
from .models import Address


class AddressCodec(Protocol):
    def decode(self, identity: str) -> Address: ...

    def encode(self, address: Address) -> str: ...


class Base58AddressCodec:
    """Accepts identities written in the base58 alphabet."""

    def __init__(self, config: CustodyConfig | None = None):
        self.config = config or CustodyConfig()
        self._alphabet = frozenset(self.config.address_alphabet)

    def decode(self, identity: str) -> Address:
        if not identity:
            raise AddressDecodeError("Empty bettor identity", bettor=identity)
        if len(identity) > self.config.max_address_length:
            raise AddressDecodeError(
                f"Identity longer than {self.config.max_address_length} characters",
                bettor=identity,
            )

        invalid = sorted(set(identity) - self._alphabet)
        if invalid:
            raise AddressDecodeError(
                f"Identity {identity!r} contains characters outside the address alphabet: "
                f"{''.join(invalid)!r}",
                bettor=identity,
            )
        return Address(value=identity)

    def encode(self, address: Address) -> str:
        return address.value
