"""lint_wikitext tool implementation."""
import asyncio
import logging

from mwlint_server.core.linter import engine
from mwlint_server.core.settings import Settings

logger = logging.getLogger(__name__)


def register(mcp, settings: Settings):
    """Register lint tools with MCP server."""

    @mcp.tool()
    async def lint_wikitext(source: str) -> dict:
        """
        Lint MediaWiki source code.

        Parses the wikitext, normalizes it (checking <math> formulas when a
        formula checker is configured) and runs every lint rule.

        Rules:
        - heading_hierarchy: headings that skip a level (warning)
        - formatted_heading: bold/italic markup in headings (warning)
        - deprecated_html: <center>, <font>, <big>, <tt>, <strike> (warning)
        - list_depth: lists nested deeper than 3 levels (info)
        - bare_external_link: external links without caption (info)
        - formula_unicode: Unicode symbols in <math> (warning)
        - empty_template_argument: template arguments without value (info)

        Args:
            source: The wikitext to lint

        Returns:
            Either {"Lints": [...]} with one entry per finding (rule,
            severity, position, message, explanation, solution), or
            {"Error": {"ParseError": {...}}} / {"Error": {"TransformationError": {...}}}
            when the source could not be parsed or normalized.

        Example:
            {
                "source": "== Title ==\\n==== Too deep ====\\n"
            }
        """
        logger.info(f"Linting {len(source)} chars")

        # Formula checks may run texvccheck, keep them off the event loop
        result = await asyncio.to_thread(engine.lint_source, source, settings)

        if result.is_error:
            logger.info(f"Lint failed: {result.error}")
        else:
            logger.info(f"Lint complete: {len(result.lints)} finding(s)")

        return result.to_dict()

    @mcp.tool()
    async def get_lint_examples() -> dict:
        """
        Get example inputs for every lint rule.

        Returns:
            Dictionary with "examples": a list of {rule, text, bad, explanation}
            where bad tells whether the text triggers the rule.
        """
        return {"examples": [e.to_dict() for e in engine.collect_examples()]}

    @mcp.tool()
    async def get_lint_rules() -> dict:
        """
        Get list of available lint rules with descriptions.

        Example response:
            {
                "rules": {
                    "heading_hierarchy": "Headings must not skip levels.",
                    ...
                }
            }
        """
        return {"rules": engine.get_available_rules()}
