"""Command-line scanning and address resolution."""

from .addresses import AddressResolver, last_line, split_address
from .scanner import CommandLine, CommandLineScanner, Phase, ScanState, scan_command_line

__all__ = [
    "AddressResolver",
    "CommandLine",
    "CommandLineScanner",
    "Phase",
    "ScanState",
    "last_line",
    "scan_command_line",
    "split_address",
]
