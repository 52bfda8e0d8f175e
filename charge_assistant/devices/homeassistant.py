"""Interface to the homeassistant instance."""

import logging

import requests  # type: ignore

from charge_assistant.constants import DEFAULT_ENTITY_ID, DEFAULT_REQUEST_TIMEOUT, ROOT_LOGGER_NAME

from . import OnOffState, SwitchController

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


class HomeAssistantError(Exception):
    """Base class for errors while talking to Home Assistant."""


class TransportError(HomeAssistantError):
    """Home Assistant could not be reached."""


class APIError(HomeAssistantError):
    """Home Assistant answered with an error status."""

    def __init__(self, url: str, status: int, reason: str = "", body: str = "") -> None:
        """Create an APIError instance."""
        message = f"Error during communication with Home Assistant. Url={url} Status={status} {reason}".rstrip()
        if body:
            message = f"{message} Body={body.strip()}"
        super().__init__(message)
        self.url = url
        self.status = status
        self.reason = reason
        self.body = body


class Homeassistant(SwitchController):
    """Turn a Home Assistant switch on and off using the REST API."""

    def __init__(
        self,
        url: str,
        token: str,
        entity_id: str = DEFAULT_ENTITY_ID,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        demo_mode: bool = False,
    ) -> None:
        """Create an instance of the Homeassistant class."""
        self._url = url.rstrip("/")
        self._token = token
        self._entity_id = entity_id
        self._timeout = timeout
        self._demo_mode = demo_mode is not None and demo_mode

    @property
    def url(self) -> str:
        """URL of the home assistant instance."""
        return self._url

    @property
    def entity_id(self) -> str:
        """The switch entity which powers the charger."""
        return self._entity_id

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def call_service(self, domain: str, service: str, data: dict) -> requests.Response:
        """Call a service in Home Assistant."""
        url = f"{self._url}/services/{domain}/{service}"
        try:
            response = requests.post(url, headers=self._headers(), json=data, timeout=self._timeout)
        except requests.RequestException as error:
            raise TransportError(f"Failed to send request to Home Assistant at {url}: {error}") from error
        if not 200 <= response.status_code < 300:
            raise APIError(url, response.status_code, response.reason or "", response.text or "")
        return response

    def set_switch(self, on: bool) -> None:
        """Turn the switch on or off."""
        service = f"turn_{OnOffState.from_bool(on)}"
        if self._demo_mode:
            LOGGER.info("Demo mode: skipping switch/%s for %s", service, self._entity_id)
            return
        response = self.call_service("switch", service, {"entity_id": self._entity_id})
        LOGGER.info("Switch control response: %s %s", response.status_code, response.reason)
