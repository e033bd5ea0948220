from .errors import InputUnavailable, MalformedInput, TurboToolsError, UnbalancedStructure
from .formatting import FormatOpts, Mode
from .html_serialize import serialize_html
from .html_tokenizer import tokenize_html
from .json_serialize import serialize_json
from .json_tokenizer import tokenize_json
from .pipeline import get_pipeline, minify_html, minify_json, transform, unminify_html, unminify_json

__version__ = "0.1.0"

__all__ = [
    "FormatOpts",
    "InputUnavailable",
    "MalformedInput",
    "Mode",
    "TurboToolsError",
    "UnbalancedStructure",
    "get_pipeline",
    "minify_html",
    "minify_json",
    "serialize_html",
    "serialize_json",
    "tokenize_html",
    "tokenize_json",
    "transform",
    "unminify_html",
    "unminify_json",
]
