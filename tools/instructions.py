from typing import Any
from core.resources import get_resource_map  # type: ignore


async def get_instructions() -> str:
    """Return the assistant instructions resource content (exact file content)."""
    content = get_resource_map().get("assistant_instructions")
    if content:
        return content
    return "No assistant instructions resource found."


def get_tools() -> dict[str, Any]:
    return {
        "get_instructions": {
            "func": get_instructions,
            "title": "Read assistant instructions",
            "description": (
                "Read how to pick the target GHL account and how the custom field / custom value tools "
                "fit together. Call this first when unsure which tool or location to use."
            ),
        }
    }
