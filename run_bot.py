"""
Bot entrypoint.

Operator notes:
- This file should remain extremely small and boring.
- All configuration validation happens inside run_bot().
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from verify_bot.bot import run_bot
from verify_bot.config import ConfigError


def main() -> None:
    try:
        run_bot()
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logging.error("%s", exc)
        sys.exit(1)
    except Exception:
        # Fail loud and early with a clear signal for operators.
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Discord bot failed to start.")
        print("\n❌ Discord bot failed to start.")
        print("   See error above. Most common causes:")
        print("   - DISCORD_TOKEN invalid or revoked")
        print("   - Message Content intent not enabled while VERIFY_LEGACY_PREFIX_ENABLED=true")
        print("   - GUILD_ID set to a server the bot is not in\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
