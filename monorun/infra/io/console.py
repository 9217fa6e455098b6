"""Console logging helpers for monorun.

Colored single-line status output with optional per-target prefixes.
Each call is a single print, so lines from concurrent targets never split.
"""

from datetime import datetime

# Global verbose setting (can be modified at runtime)
_verbose_enabled: bool = False


def set_verbose(enabled: bool) -> None:
    """Enable or disable verbose output globally."""
    global _verbose_enabled
    _verbose_enabled = enabled


def is_verbose_enabled() -> bool:
    """Check if verbose output is currently enabled."""
    return _verbose_enabled


class Colors:
    """ANSI color codes for terminal output (bright variants)."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    RED = "\033[91m"
    GRAY = "\033[90m"
    WHITE = "\033[97m"
    MUTED = "\033[90m"


# Target color palette for distinguishing concurrent targets
TARGET_COLORS = [
    "\033[96m",  # Bright Cyan
    "\033[93m",  # Bright Yellow
    "\033[95m",  # Bright Magenta
    "\033[92m",  # Bright Green
    "\033[94m",  # Bright Blue
    "\033[97m",  # Bright White
]

_target_color_map: dict[str, str] = {}
_target_color_index = 0


def get_target_color(target: str) -> str:
    """Get a consistent color for a target based on its name."""
    global _target_color_index
    if target not in _target_color_map:
        _target_color_map[target] = TARGET_COLORS[
            _target_color_index % len(TARGET_COLORS)
        ]
        _target_color_index += 1
    return _target_color_map[target]


def _prefix(target: str | None) -> str:
    if not target:
        return ""
    return f"{get_target_color(target)}[{target}]{Colors.RESET} "


def log(
    icon: str,
    message: str,
    color: str = Colors.RESET,
    dim: bool = False,
    target: str | None = None,
) -> None:
    """Timestamped status line with optional target color coding."""
    style = Colors.MUTED if dim else ""
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(
        f"{Colors.GRAY}{timestamp}{Colors.RESET} {_prefix(target)}"
        f"{style}{color}{icon} {message}{Colors.RESET}"
    )


def log_verbose(
    icon: str,
    message: str,
    color: str = Colors.MUTED,
    target: str | None = None,
) -> None:
    """Like log(), but only when verbose output is enabled."""
    if _verbose_enabled:
        log(icon, message, color, target=target)


def print_banner(title: str) -> None:
    """Boxed command banner."""
    width = max(40, len(title) + 6)
    inner = title.center(width - 2)
    print(
        f"\n{Colors.BOLD}{Colors.MAGENTA}╔{'═' * (width - 2)}╗\n"
        f"║{inner}║\n"
        f"╚{'═' * (width - 2)}╝{Colors.RESET}\n"
    )
