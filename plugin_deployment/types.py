import click
from eth_utils import is_address, to_checksum_address

from plugin_deployment.constants import PLUGIN_ENS_SUBDOMAIN_CHARACTERS


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        if not is_address(value):
            self.fail(f"{value} is not a valid ethereum address", param, ctx)
        return to_checksum_address(value)


class Subdomain(click.ParamType):
    """An ENS label as accepted by the plugin ENS subdomain registrar."""

    name = "subdomain"

    def convert(self, value, param, ctx):
        value = value.strip()
        if not value or any(c not in PLUGIN_ENS_SUBDOMAIN_CHARACTERS for c in value):
            self.fail(
                f"'{value}' is not a valid subdomain; "
                f"allowed characters are '{PLUGIN_ENS_SUBDOMAIN_CHARACTERS}'",
                param,
                ctx,
            )
        return value


class TransactionHash(click.ParamType):
    name = "transaction_hash"

    def convert(self, value, param, ctx):
        value = value.strip()
        digits = value[2:] if value.startswith("0x") else value
        try:
            int(digits, 16)
        except ValueError:
            self.fail(f"{value} is not a valid transaction hash", param, ctx)
        if len(digits) != 64:
            self.fail(f"{value} is not a valid transaction hash", param, ctx)
        return "0x" + digits.lower()
