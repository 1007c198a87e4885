"""Unit tests for the paper custody client and address codec."""

import pytest

from parimutuel.services.custody import (
    Address,
    AddressDecodeError,
    Base58AddressCodec,
    CustodyConfig,
    InsufficientFundsError,
    PaperCustodyClient,
    TransferRejectedError,
    create_custody_client,
)


def test_receive_credits_treasury():
    custody = PaperCustodyClient()

    receipt = custody.receive("Ada", 40)

    assert receipt.amount == 40
    assert receipt.currency == "IOTA"
    assert custody.treasury == 40


def test_transfer_deducts_flat_fee():
    custody = PaperCustodyClient(CustodyConfig(transfer_fee=1), treasury=100)

    receipt = custody.transfer(Address(value="Bob"), 60, "IOTA")

    assert receipt.fee == 1
    assert receipt.net_amount == 59
    assert receipt.transfer_id.startswith("paper_")
    assert custody.balance_of("Bob") == 59
    assert custody.treasury == 40


def test_transfer_of_one_unit_keeps_nothing_after_fee():
    custody = PaperCustodyClient(CustodyConfig(transfer_fee=1), treasury=1)

    assert custody.transfer(Address(value="Bob"), 1, "IOTA").net_amount == 0


def test_transfer_rejections():
    custody = PaperCustodyClient(treasury=10)

    with pytest.raises(TransferRejectedError):
        custody.transfer(Address(value="Bob"), 0, "IOTA")
    with pytest.raises(TransferRejectedError):
        custody.transfer(Address(value="Bob"), 5, "SMR")
    with pytest.raises(InsufficientFundsError):
        custody.transfer(Address(value="Bob"), 11, "IOTA")
    with pytest.raises(TransferRejectedError):
        custody.receive("Bob", -1)

    assert custody.treasury == 10


def test_codec_accepts_base58_identity():
    codec = Base58AddressCodec()
    identity = "13Q3ZRdzXpF6CjYvHqXxb2nEpjWJGV7pTd"

    address = codec.decode(identity)

    assert codec.encode(address) == identity


@pytest.mark.parametrize("identity", ["", "Alice", "0abc", "has space", "x" * 129])
def test_codec_rejects_invalid_identity(identity):
    with pytest.raises(AddressDecodeError):
        Base58AddressCodec().decode(identity)


def test_live_mode_is_not_built_in():
    with pytest.raises(NotImplementedError):
        create_custody_client(CustodyConfig(paper_mode=False))
