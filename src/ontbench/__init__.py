__all__ = [
    # Adapter
    "OntologyAdapter",
    "BlockchainInterface",
    # Configuration
    "AdapterConfig",
    "ContractDescriptor",
    "load_adapter_config",
    "load_network_config",
    # Registry
    "ContractRegistry",
    "RegistryEntry",
    # ABI
    "AbiInfo",
    "AbiFunction",
    "AbiParameter",
    "BoundFunction",
    "bind_arguments",
    # Transactions
    "GasConfig",
    "Transaction",
    "TxKind",
    "make_deploy_transaction",
    "make_invoke_transaction",
    "sign_transaction",
    # Status
    "ConfirmationOutcome",
    "TxState",
    "TxStatus",
    # Transport
    "OntologyRpcTransport",
    "Transport",
    "wait_for_next_block",
    # Wallet
    "Account",
    "Wallet",
    "ScryptParams",
    "create_wallet",
    "decrypt_account",
    "unlock_wallet",
    # Errors
    "AdapterError",
    "ArgumentCountMismatch",
    "ConfigError",
    "ContractAlreadyDeployed",
    "ContractNotDeployed",
    "InvalidArgument",
    "InvokeFunctionUndefined",
    "PollTimeout",
    "TransportError",
    "WalletDecryptionFailed",
]

from .errors import (
    AdapterError,
    ArgumentCountMismatch,
    ConfigError,
    ContractAlreadyDeployed,
    ContractNotDeployed,
    InvalidArgument,
    InvokeFunctionUndefined,
    PollTimeout,
    TransportError,
    WalletDecryptionFailed,
)
from .keys.crypto import ScryptParams
from .keys.wallet import Account, Wallet, create_wallet, decrypt_account, unlock_wallet
from .chain.abi import AbiFunction, AbiInfo, AbiParameter, BoundFunction, bind_arguments
from .chain.tx import (
    GasConfig,
    Transaction,
    TxKind,
    make_deploy_transaction,
    make_invoke_transaction,
    sign_transaction,
)
from .chain.status import ConfirmationOutcome, TxState, TxStatus
from .chain.rpc import OntologyRpcTransport, Transport
from .chain.poller import wait_for_next_block
from .registry import ContractRegistry, RegistryEntry
from .config import AdapterConfig, ContractDescriptor, load_adapter_config, load_network_config
from .interface import BlockchainInterface
from .adapter import OntologyAdapter
