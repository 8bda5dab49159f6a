"""
Adapter error hierarchy.

Every error carries an ``exit_code`` so CLI commands can terminate with
``sys.exit(exc.exit_code)``. A failed submission is not an error: it is
reported through the returned ``TxStatus``.
"""

from __future__ import annotations


class AdapterError(RuntimeError):
    exit_code: int = 1


class ConfigError(AdapterError):
    exit_code = 2


class WalletDecryptionFailed(AdapterError):
    exit_code = 3

    def __init__(self, message: str = "decrypt wallet failed") -> None:
        super().__init__(message)


class ContractNotDeployed(AdapterError):
    exit_code = 4

    def __init__(self, name: str) -> None:
        super().__init__(f"the contract {name!r} is not deployed")
        self.name = name


class ContractAlreadyDeployed(AdapterError):
    exit_code = 4

    def __init__(self, name: str) -> None:
        super().__init__(f"the contract {name!r} is already deployed")
        self.name = name


class InvokeFunctionUndefined(AdapterError):
    exit_code = 5


class InvalidArgument(AdapterError):
    exit_code = 5


class ArgumentCountMismatch(InvalidArgument):
    def __init__(self, function: str, expected: int, actual: int) -> None:
        super().__init__(
            f"{function} expects {expected} argument(s), got {actual}"
        )
        self.function = function
        self.expected = expected
        self.actual = actual


class TransportError(AdapterError):
    exit_code = 6


class PollTimeout(AdapterError):
    exit_code = 7

    def __init__(self, baseline: int, timeout: float) -> None:
        super().__init__(
            f"block height did not advance past {baseline} within {timeout}s"
        )
        self.baseline = baseline
        self.timeout = timeout
