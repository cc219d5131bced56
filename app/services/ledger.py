"""RentalAgreement contract client (web3.py)."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.logs import DISCARD
from web3.types import TxReceipt

from app.core.config import AppSettings, get_settings
from app.services.errors import LedgerRejectedError, LedgerUnavailableError, ValidationError

logger = logging.getLogger("app.services.ledger")

# Only the members the backend calls or parses.
RENTAL_AGREEMENT_ABI: list[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "createAgreement",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_tenant", "type": "address"},
            {"name": "_propertyId", "type": "string"},
            {"name": "_monthlyRent", "type": "uint256"},
            {"name": "_startDate", "type": "uint256"},
            {"name": "_endDate", "type": "uint256"},
            {"name": "_ipfsCID", "type": "string"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "verifyAgreement",
        "stateMutability": "view",
        "inputs": [
            {"name": "_id", "type": "uint256"},
            {"name": "_ipfsCID", "type": "string"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "event",
        "name": "AgreementCreated",
        "anonymous": False,
        "inputs": [
            {"name": "id", "type": "uint256", "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "tenant", "type": "address", "indexed": True},
            {"name": "propertyId", "type": "string", "indexed": False},
            {"name": "monthlyRent", "type": "uint256", "indexed": False},
            {"name": "ipfsCID", "type": "string", "indexed": False},
        ],
    },
]


def to_minor_units(amount: Decimal | int | str, decimals: int) -> int:
    """Scale a currency amount to the ledger's smallest denomination."""

    scaled = Decimal(str(amount)).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValidationError(f"Amount {amount} has more than {decimals} decimal places")
    return int(scaled)


def to_epoch_seconds(day: date) -> int:
    """Seconds since the epoch at UTC midnight of a calendar day."""

    return calendar.timegm(day.timetuple())


@dataclass(frozen=True)
class LedgerReceipt:
    """Outcome of a confirmed createAgreement transaction."""

    on_chain_id: Optional[int]
    tx_hash: str
    block_number: Optional[int] = None


class LedgerClient:
    """
    Submits notarization transactions to the RentalAgreement contract.

    Submission signs locally with the configured key and blocks until the
    transaction is mined. Nothing is retried; retry policy belongs to callers.
    """

    def __init__(self, settings: Optional[AppSettings] = None, *, w3: Optional[Web3] = None) -> None:
        settings = settings or get_settings()
        self._rpc_url = settings.ledger_rpc_url
        self._private_key = settings.ledger_private_key
        self._contract_address = settings.ledger_contract_address
        self._chain_id = settings.ledger_chain_id
        self._confirmation_timeout = settings.ledger_confirmation_timeout
        self._w3 = w3

    def _web3(self) -> Web3:
        if self._w3 is None:
            if not self._rpc_url:
                raise LedgerUnavailableError("Ledger RPC URL is not configured")
            self._w3 = Web3(Web3.HTTPProvider(self._rpc_url))
        return self._w3

    def _contract(self) -> Contract:
        if not self._contract_address:
            raise LedgerUnavailableError("Ledger contract address is not configured")
        return self._web3().eth.contract(
            address=Web3.to_checksum_address(self._contract_address),
            abi=RENTAL_AGREEMENT_ABI,
        )

    def _account(self) -> LocalAccount:
        if not self._private_key:
            raise LedgerUnavailableError("Ledger signing key is not configured")
        return Account.from_key(self._private_key)

    def submit(
        self,
        *,
        tenant_address: str,
        property_id: str,
        rent_minor_units: int,
        start_epoch_seconds: int,
        end_epoch_seconds: int,
        content_id: str,
    ) -> LedgerReceipt:
        """
        Create the agreement on-chain and wait for confirmation.

        Returns:
            Receipt summary; ``on_chain_id`` is None when the confirmation
            carried no AgreementCreated event.

        Raises:
            LedgerUnavailableError: RPC/network failure or confirmation timeout
            LedgerRejectedError: The transaction reverted
        """
        call = self._contract().functions.createAgreement(
            Web3.to_checksum_address(tenant_address),
            property_id,
            rent_minor_units,
            start_epoch_seconds,
            end_epoch_seconds,
            content_id,
        )

        logger.info(
            "ledger_submit",
            extra={
                "property_id": property_id,
                "tenant_address": tenant_address,
                "rent_minor_units": str(rent_minor_units),
                "content_id": content_id,
            },
        )

        try:
            receipt = self._send_transaction(call)
        except ContractLogicError as exc:
            logger.error("ledger_submit_reverted", extra={"property_id": property_id, "error": str(exc)})
            raise LedgerRejectedError(f"createAgreement reverted: {exc}") from exc
        except TimeExhausted as exc:
            logger.error("ledger_confirmation_timeout", extra={"property_id": property_id})
            raise LedgerUnavailableError(f"Transaction not confirmed in time: {exc}") from exc
        except (Web3Exception, OSError, ValueError) as exc:
            # requests transport errors subclass OSError
            logger.error("ledger_submit_failed", extra={"property_id": property_id, "error": str(exc)})
            raise LedgerUnavailableError(f"Ledger RPC failure: {exc}") from exc

        tx_hash = Web3.to_hex(receipt["transactionHash"])
        if receipt.get("status") == 0:
            logger.error("ledger_submit_failed_receipt", extra={"tx_hash": tx_hash})
            raise LedgerRejectedError(f"Transaction {tx_hash} reverted")

        on_chain_id = self.parse_agreement_created(receipt)
        logger.info(
            "ledger_submit_confirmed",
            extra={"tx_hash": tx_hash, "on_chain_id": on_chain_id, "block_number": receipt.get("blockNumber")},
        )
        return LedgerReceipt(on_chain_id=on_chain_id, tx_hash=tx_hash, block_number=receipt.get("blockNumber"))

    def _send_transaction(self, call: Any) -> TxReceipt:
        w3 = self._web3()
        account = self._account()
        tx_params: Dict[str, Any] = {
            "from": account.address,
            "nonce": w3.eth.get_transaction_count(account.address, "pending"),
        }
        if self._chain_id is not None:
            tx_params["chainId"] = self._chain_id
        transaction = call.build_transaction(tx_params)
        signed = account.sign_transaction(transaction)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        return w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._confirmation_timeout)

    def parse_agreement_created(self, receipt: TxReceipt) -> Optional[int]:
        """Return the id from the first AgreementCreated log, skipping logs of other shapes."""

        events = self._contract().events.AgreementCreated().process_receipt(receipt, errors=DISCARD)
        for event in events:
            return int(event["args"]["id"])
        return None

    def verify(self, on_chain_id: int, content_id: str) -> bool:
        """Read-only check that the contract stores ``content_id`` for ``on_chain_id``."""

        try:
            return bool(self._contract().functions.verifyAgreement(on_chain_id, content_id).call())
        except ContractLogicError as exc:
            raise LedgerRejectedError(f"verifyAgreement reverted: {exc}") from exc
        except (Web3Exception, OSError, ValueError) as exc:
            raise LedgerUnavailableError(f"Ledger RPC failure: {exc}") from exc


_ledger_client: Optional[LedgerClient] = None


def get_ledger_client() -> LedgerClient:
    """Get or create the ledger client singleton."""
    global _ledger_client
    if _ledger_client is None:
        _ledger_client = LedgerClient()
    return _ledger_client
