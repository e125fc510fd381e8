"""Delivery of final command status to the chat callback URL."""

from __future__ import annotations

from typing import Any, Dict

import requests

from .errors import CallbackDeliveryError


class CallbackNotifier:
    """Posts a status message to a slash command's ``response_url``."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        request_timeout: float = 10.0,
    ) -> None:
        self.session = session or requests.Session()
        self.request_timeout = request_timeout

    def send(self, url: str, text: str, *, ephemeral: bool = False) -> None:
        payload: Dict[str, Any] = {"text": text}
        if ephemeral:
            payload["response_type"] = "ephemeral"
        try:
            response = self.session.post(url, json=payload, timeout=self.request_timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CallbackDeliveryError(f"Could not deliver status to callback: {exc}") from exc


__all__ = ["CallbackNotifier"]
