"""CLI output utilities and formatting."""

from colorama import Fore, Style

BANNER = (
    f"{Fore.CYAN}{Style.BRIGHT}lit-ipfs{Style.RESET_ALL} "
    f"{Fore.WHITE}- publish and fetch lit repositories through IPFS{Style.RESET_ALL}\n"
)


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def short(obj_hash: str) -> str:
    return obj_hash[:7]
