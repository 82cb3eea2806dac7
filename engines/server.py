"""
SaaS Pricer Calculation Engines - MCP Server

FastMCP server exposing pricing tools:
- COGS Engine: COGS breakdown, margins, break-even, margin thresholds
- Investor Engine: ARR, valuation, milestones, LTV:CAC
- AI Cost Engine: token-based LLM cost estimates
- Report Codec: shareable report tokens
"""

import logging

from backend.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Import the MCP instance and tools from tool modules
# This registers all the tools with the MCP server
from engines.tools.cogs_engine import mcp  # noqa: E402
from engines.tools import ai_cost_engine, investor_engine, report_tools  # noqa: E402, F401


def main():
    """Run the MCP server."""
    logger.info("Starting SaaS Pricer Calculation Engines MCP Server")
    mcp.run()


if __name__ == "__main__":
    main()
