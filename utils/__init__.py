from .response_utils import robust_parse_text
from .tool_response import error, mask_secret, success, to_json

__all__ = ["robust_parse_text", "success", "error", "mask_secret", "to_json"]
