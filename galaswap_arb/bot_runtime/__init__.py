from .guards import guarded_call
from .logging import setup_logger
from .loop import run_cycle, run_trading_loop
from .settings import AppSettings

__all__ = [
    "AppSettings",
    "guarded_call",
    "run_cycle",
    "run_trading_loop",
    "setup_logger",
]
