"""mwlint MCP Server - exposes the linter as MCP tools over stdio."""
import logging
import sys

from mcp.server.fastmcp import FastMCP

from mwlint_server.config import Config
from mwlint_server.core.settings import Settings
from mwlint_server.tools import lint

config = Config.load()

# stdout carries JSON-RPC, so logs go to stderr
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)

logger = logging.getLogger(__name__)

mcp = FastMCP("mwlint")

logger.info(f"mwlint v{config.version} starting...")
logger.info(f"Formula checker: {config.texvccheck_path or 'disabled'}")


def main():
    """Main entry point for the MCP server."""
    try:
        settings = Settings.from_config(config)

        lint.register(mcp, settings)
        logger.info("Tools registered: lint_wikitext, get_lint_examples, get_lint_rules")

        logger.info("Serving MCP on stdio")
        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
