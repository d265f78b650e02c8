import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from eth_typing import ChecksumAddress
from eth_utils import event_abi_to_log_topic, to_checksum_address, to_hex
from web3.datastructures import AttributeDict
from web3.exceptions import Web3Exception

from plugin_deployment.abis import PLUGIN_REPO_ABI
from plugin_deployment.constants import VERIFICATION_ATTEMPTS, VERIFICATION_DELAY
from plugin_deployment.errors import VersionEventNotFound
from plugin_deployment.events import decode_events, get_event
from plugin_deployment.transactions import (
    check_receipt,
    receipt_block_number,
    receipt_logs,
    receipt_tx_hash,
)

CREATE_VERSION = "createVersion"
VERSION_CREATED = "VersionCreated"


@dataclass(frozen=True)
class VersionRecord:
    release: int
    build: int
    setup_address: ChecksumAddress
    release_metadata_uri: str
    build_metadata_uri: str
    tx_hash: str
    block_number: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "release": self.release,
            "build": self.build,
            "pluginSetup": self.setup_address,
            "releaseMetadata": self.release_metadata_uri,
            "buildMetadata": self.build_metadata_uri,
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
        }


def _decode_metadata(value: bytes) -> str:
    return bytes(value).decode("utf-8", errors="replace")


def extract_version_created(
    logs: Iterable[Dict[str, Any]], repo_address: str
) -> Optional[AttributeDict]:
    """Returns the first VersionCreated event emitted by the plugin repo, if any."""
    event = get_event(PLUGIN_REPO_ABI, VERSION_CREATED)
    events = decode_events(logs, event, emitter=repo_address)
    return events[0] if events else None


def verify_version_created(
    w3,
    tx_hash: str,
    repo_address: str,
    attempts: int = VERIFICATION_ATTEMPTS,
    delay: float = VERIFICATION_DELAY,
) -> AttributeDict:
    """
    Re-reads the receipt of a mined `createVersion` transaction until its
    VersionCreated event shows up. Only this read is retried; the
    transaction itself is never resubmitted.
    """
    for attempt in range(1, attempts + 1):
        try:
            receipt = w3.eth.get_transaction_receipt(tx_hash)
        except Exception as e:
            print(f"(i) Receipt read {attempt}/{attempts} for {tx_hash} failed: {e}")
            receipt = None
        if receipt is not None:
            event = extract_version_created(receipt_logs(receipt), repo_address)
            if event is not None:
                return event
        if attempt < attempts:
            time.sleep(delay)
    raise VersionEventNotFound(tx_hash=tx_hash, repo_address=repo_address)


def publish_version(
    transactor,
    repo,
    w3,
    setup_address: ChecksumAddress,
    release: int,
    build_metadata: bytes,
    release_metadata: bytes,
    attempts: int = VERIFICATION_ATTEMPTS,
    delay: float = VERIFICATION_DELAY,
) -> VersionRecord:
    """
    Publishes a new build of `release` on a plugin repo, pointing at `setup_address`.

    Raises a SubmissionError when the transaction does not succeed, and
    VersionEventNotFound when it was mined but its VersionCreated event
    could not be read back.
    """
    receipt = transactor.transact(
        getattr(repo, CREATE_VERSION),
        release,
        setup_address,
        build_metadata,
        release_metadata,
        raise_on_revert=False,
    )
    receipt = check_receipt(receipt, label=CREATE_VERSION, w3=w3)
    tx_hash = receipt_tx_hash(receipt)

    event = extract_version_created(receipt_logs(receipt), repo.address)
    if event is None:
        print(f"(i) VersionCreated not found in receipt of {tx_hash}; re-reading receipt.")
        event = verify_version_created(
            w3, tx_hash=tx_hash, repo_address=repo.address, attempts=attempts, delay=delay
        )

    record = VersionRecord(
        release=event["args"]["release"],
        build=event["args"]["build"],
        setup_address=to_checksum_address(event["args"]["pluginSetup"]),
        release_metadata_uri=_decode_metadata(release_metadata),
        build_metadata_uri=_decode_metadata(event["args"]["buildMetadata"]),
        tx_hash=tx_hash,
        block_number=receipt_block_number(receipt),
    )
    print(
        f"Published build {record.release}.{record.build} of {repo.address} "
        f"with setup {record.setup_address} (tx {tx_hash})"
    )
    return record


def past_version_created_events(w3, repo_address: str) -> List[AttributeDict]:
    """Returns every VersionCreated event a plugin repo has emitted, oldest first."""
    event = get_event(PLUGIN_REPO_ABI, VERSION_CREATED)
    topic = to_hex(event_abi_to_log_topic(event.abi))
    logs = w3.eth.get_logs(
        {
            "fromBlock": 0,
            "toBlock": "latest",
            "address": to_checksum_address(repo_address),
            "topics": [topic],
        }
    )
    return decode_events(logs, event)


def published_versions(w3, repo_address: str) -> Optional[List[AttributeDict]]:
    """
    Best-effort listing of the builds already published on a plugin repo.
    Returns None when the provider refuses the log query (e.g. a capped block range).
    """
    try:
        return past_version_created_events(w3, repo_address)
    except (Web3Exception, ValueError) as e:
        print(f"(i) Could not list VersionCreated events of {repo_address}: {e}")
        return None
