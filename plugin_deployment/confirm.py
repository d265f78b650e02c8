import sys
from collections import OrderedDict

from ape.utils import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    sys.exit(-1)


def _continue(prompt: str = "Continue") -> None:
    """Asks the user to continue."""
    answer = input(f"{prompt} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_parameters(parameters: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the constructor arguments for a single contract."""
    if len(parameters) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
    else:
        print(f"\nConstructor parameters for {contract_name}")
        for name, value in parameters.items():
            print(f"\t{name}={value}")
    _continue(prompt=f"Deploy {contract_name}")
    if ZERO_ADDRESS in parameters.values():
        _continue(prompt="Zero Address detected for deployment parameter; Continue?")
