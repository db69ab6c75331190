"""
Wallet verification bot package.

Design goals:
- Keep verify_bot.bot as the stable entrypoint (VerifyBot + run_bot).
- Commands live in verify_bot.commands.*, buttons are routed by verify_bot.dispatch.
"""

from .bot import VerifyBot, run_bot  # re-export for convenience

__all__ = [
    "VerifyBot",
    "run_bot",
]
