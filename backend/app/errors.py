from __future__ import annotations


class GenerationError(Exception):
	"""Any failure between sending a prompt and holding a parsed payload."""


class NetworkError(GenerationError):
	"""Transport failure, non-2xx status or unreadable response body."""


class ParseError(GenerationError):
	"""No extractable JSON in the completion text, or the slice is invalid."""


class ShapeError(GenerationError):
	"""Parsed JSON lacks the expected top-level structure."""


class EmptyAnswerError(ValueError):
	def __init__(self, message: str = "Please enter an answer before submitting.") -> None:
		super().__init__(message)
