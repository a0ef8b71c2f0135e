import json
from typing import Any, Callable, Dict, Optional

import click
import httpx


class ApiError(Exception):
    """The API could not be reached or answered with an error status."""


class CustomerNotFound(Exception):
    pass


class CustomerApiClient:
    """Blocking HTTP client for the customer endpoints.

    Methods return the raw response text; printing and parsing are left to the
    caller.
    """

    def __init__(
        self,
        base_url: str,
        verbose: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
        echo: Callable[[str], None] = click.echo,
    ):
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self.echo = echo
        self._http = httpx.Client(transport=transport)

    def __enter__(self) -> "CustomerApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def list_customers(self) -> str:
        return self._send("GET", self.base_url).text

    def get_customer(self, customer_id: str) -> str:
        return self._send("GET", f"{self.base_url}/{customer_id}").text

    def create_customer(self, payload: Dict[str, Any]) -> str:
        return self._send("POST", self.base_url, payload).text

    def update_customer(self, customer_id: str, payload: Dict[str, Any]) -> str:
        return self._send("PUT", f"{self.base_url}/{customer_id}", payload).text

    def delete_customer(self, customer_id: str) -> None:
        self._send("DELETE", f"{self.base_url}/{customer_id}")

    def _send(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> httpx.Response:
        if self.verbose:
            self.echo(f"\n[DEBUG] Sending {method} request to: {url}")
            if payload is not None:
                self.echo(f"[DEBUG] Request body: {json.dumps(payload)}")

        try:
            response = self._http.request(method, url, json=payload)
        except httpx.HTTPError as exc:
            raise ApiError(str(exc) or type(exc).__name__) from exc

        if self.verbose:
            self.echo(f"[DEBUG] Response code: {response.status_code}")

        if response.status_code == 404:
            raise CustomerNotFound(url)
        if response.status_code >= 400:
            raise ApiError(f"HTTP error code: {response.status_code}")

        if self.verbose:
            if response.status_code == 204:
                self.echo("[DEBUG] No content in response (204)")
            else:
                self.echo(f"[DEBUG] Response: {response.text}")
        return response
