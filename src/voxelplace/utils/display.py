"""
User-friendly display utilities for voxelplace.
"""

import time
from datetime import datetime
from typing import Any, Dict, Iterable


class StatusDisplay:
    """Handles status display for different operations."""

    @staticmethod
    def print_header(title: str, width: int = 80):
        """Print a formatted header."""
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        """Print a section header."""
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print configuration in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            print(f"  {key:<20} : {value}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a status message with appropriate emoji."""
        icons = {
            "info": "ℹ️",
            "success": "✅",
            "warning": "⚠️",
            "error": "❌",
            "loading": "⏳",
            "processing": "🔄"
        }
        icon = icons.get(status, "ℹ️")
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        """Print results in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            elif isinstance(value, float):
                print(f"  {key:<20} : {value:.3f}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_lines(lines: Iterable[str], indent: int = 2):
        for line in lines:
            print(" " * indent + line)


class LiveLogger:
    """
    Live console logging with real-time updates.

    Messages are printed only when ``verbose`` is set, but warnings and errors are
    always kept in ``history`` so callers can inspect what went wrong.
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.step_times = {}
        self.history = []

    def _emit(self, message: str, status: str):
        self.history.append((status, message))
        if self.verbose:
            StatusDisplay.print_status(message, status)

    def log_step_start(self, step: int, description: str):
        """Log the start of a step."""
        self.step_times[step] = time.time()
        self._emit(f"Starting Step {step}: {description}", "processing")

    def log_step_end(self, step: int, result: str, success: bool = True):
        """Log the end of a step."""
        elapsed = time.time() - self.step_times.get(step, time.time())
        status = "success" if success else "error"
        self._emit(f"Step {step} completed: {result} ({elapsed:.2f}s)", status)

    def log_action(self, action_name: str, details: str = ""):
        """Log an action being performed."""
        message = f"Executing: {action_name}"
        if details:
            message += f" - {details}"
        self._emit(message, "processing")

    def log_result(self, message: str, success: bool = True):
        """Log a result."""
        self._emit(message, "success" if success else "error")

    def log_info(self, message: str):
        """Log an info message."""
        self._emit(message, "info")

    def log_warning(self, message: str):
        """Log a warning message."""
        self._emit(message, "warning")

    def log_error(self, message: str):
        """Log an error message."""
        self._emit(message, "error")

    def messages(self, status: str):
        return [m for s, m in self.history if s == status]
