from utils.response_utils import extract_collection, robust_parse_text

__all__ = ["extract_collection", "robust_parse_text"]
