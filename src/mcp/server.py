"""MCP stdio server exposing drill extraction tools to coding assistants."""

import json
import logging
import os
import sys

import httpx
from mcp.server.fastmcp import FastMCP

from src.pipeline.sanitize import sanitize_json_text

# Log to stderr to avoid corrupting MCP stdio transport
logging.basicConfig(
    level=logging.INFO,
    stream=sys.stderr,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_URL = os.environ.get("DRILL_EXTRACTION_API_URL", "http://localhost:8005")

mcp = FastMCP("drill-extraction")


async def _api_post(path: str, payload) -> httpx.Response:
    """Make a POST request to the Drill Extraction API."""
    async with httpx.AsyncClient(base_url=API_URL, timeout=30.0) as client:
        return await client.post(path, json=payload)


@mcp.tool()
async def extract_drills(content: str) -> str:
    """Extract animated drill diagrams from an assistant chat message.

    Args:
        content: Raw message text, possibly containing ```drill-diagram blocks.
    """
    resp = await _api_post("/api/drills/extract", {"content": content})
    if resp.status_code == 413:
        return json.dumps({"error": resp.json().get("detail", "Content too large")})
    resp.raise_for_status()
    return json.dumps(resp.json(), indent=2)


@mcp.tool()
async def normalize_drill(drill_json: str) -> str:
    """Repair and validate a single drill diagram given as JSON text.

    Args:
        drill_json: Drill JSON; line comments and trailing commas are tolerated.
    """
    try:
        payload = json.loads(sanitize_json_text(drill_json))
    except (ValueError, RecursionError) as e:
        return json.dumps({"error": f"Invalid JSON: {e}"})

    resp = await _api_post("/api/drills/normalize", payload)
    if resp.status_code == 422:
        return json.dumps({"error": resp.json().get("detail", "Not a drill")})
    resp.raise_for_status()
    return json.dumps(resp.json(), indent=2)


def main():
    """Run the MCP server on stdio transport."""
    mcp.run(transport="stdio")
