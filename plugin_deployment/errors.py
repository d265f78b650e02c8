from typing import Any, Optional


class DeploymentError(Exception):
    """Base class for plugin deployment failures."""


class UnsupportedNetwork(DeploymentError, ValueError):
    """Raised when a network name cannot be resolved to a canonical network."""

    def __init__(self, network_name: str):
        self.network_name = network_name
        super().__init__(f"Unsupported network '{network_name}'")


class InvalidAddressInput(DeploymentError, ValueError):
    """Raised when an address-shaped parameter is missing or malformed."""

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value
        super().__init__(f"{name} is missing or not a valid address: '{value}'")


class DeploymentsUnavailable(DeploymentError, ValueError):
    """Raised when a network has no usable OSx deployment bundle."""


#
# Submission
#


class SubmissionError(DeploymentError):
    """The transaction was not submitted or did not succeed on-chain."""


class ReceiptUnavailable(SubmissionError):
    def __init__(self, label: str, tx_hash: Optional[str] = None):
        self.label = label
        self.tx_hash = tx_hash
        super().__init__(f"Transaction receipt is undefined for {label}")


class TransactionReverted(SubmissionError):
    """Raised when a mined transaction has status 0."""

    def __init__(self, label: str, tx_hash: str, transaction: Optional[Any] = None):
        self.label = label
        self.tx_hash = tx_hash
        self.transaction = transaction
        if transaction is None:
            message = f"{label} transaction reverted: hash={tx_hash}"
        else:
            message = (
                f"{label} transaction reverted: hash={tx_hash} status=0; "
                "see output for receipt and transaction info"
            )
        super().__init__(message)


class SimulationFailed(SubmissionError):
    """Raised when a dry-run call of a transaction reverts."""


#
# Recovery
#


class AddressNotRecovered(DeploymentError):
    def __init__(self, tx_hash: str, ens_domain: Optional[str] = None):
        self.tx_hash = tx_hash
        self.ens_domain = ens_domain
        super().__init__(
            f'Event "PluginRepoRegistered" could not be found in transaction {tx_hash} '
            f"and ENS lookup failed"
            + (f" for '{ens_domain}'" if ens_domain else "")
        )


#
# Verification
#


class VerificationError(DeploymentError):
    """
    The transaction was mined, but its effect could not be confirmed locally.
    The on-chain state may already be mutated; do not resubmit.
    """


class VersionEventNotFound(VerificationError):
    def __init__(self, tx_hash: str, repo_address: str):
        self.tx_hash = tx_hash
        self.repo_address = repo_address
        super().__init__(
            f"Failed to get VersionCreated event log for transaction {tx_hash} "
            f"on plugin repo {repo_address}; the version was likely published"
        )
