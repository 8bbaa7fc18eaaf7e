from __future__ import annotations


class GatewayError(Exception):
	"""Base class for errors raised by the gateway core."""


class InvalidInput(GatewayError):
	"""The submitted batch or request parameters cannot be processed."""


class ExternalCallFailure(GatewayError):
	"""The text-completion service failed or returned an unusable reply."""
