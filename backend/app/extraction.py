from __future__ import annotations
import json
from typing import Any, Literal

from .errors import ParseError, ShapeError

Kind = Literal["object", "array"]

_DELIMITERS = {"object": ("{", "}"), "array": ("[", "]")}


def extract_json(text: str, kind: Kind) -> Any:
	"""Parse the JSON payload embedded in free-form model output.

	Takes everything from the first opening delimiter of ``kind`` to the last
	matching closing delimiter. Prose or code fences around the payload are
	ignored; two separate payloads in one reply will not parse.
	"""
	opening, closing = _DELIMITERS[kind]
	text = text or ""
	first = text.find(opening)
	last = text.rfind(closing)
	if first == -1 or last == -1 or last < first:
		raise ParseError(f"no JSON {kind} found in completion")
	candidate = text[first : last + 1]
	try:
		return json.loads(candidate)
	except ValueError as err:
		raise ParseError(f"invalid JSON {kind} in completion: {err}") from err


def require_shape(data: Any, kind: Kind) -> Any:
	if kind == "object":
		if not isinstance(data, dict):
			raise ShapeError(f"expected a JSON object, got {type(data).__name__}")
		return data
	if not isinstance(data, list):
		raise ShapeError(f"expected a JSON array, got {type(data).__name__}")
	if not any(isinstance(item, dict) for item in data):
		raise ShapeError("JSON array holds no objects")
	return data
