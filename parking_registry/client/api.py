# parking_registry/client/api.py
"""
HTTP client for the registry API.
Unwraps the {success, message, data} envelope; any failure raises ApiError
carrying the server's message verbatim.
"""

from typing import Optional

import requests

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ParkingApiClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            resp = self.session.request(method, f"{self.base_url}{path}",
                                        timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Cannot reach the server: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            raise ApiError(f"Unexpected response (HTTP {resp.status_code})", resp.status_code)

        if not resp.ok or not body.get("success", False):
            raise ApiError(body.get("message") or f"HTTP {resp.status_code}", resp.status_code)
        return body

    def list_vehicles(self) -> list[dict]:
        return self._request("GET", "/vehiculos").get("data", [])

    def get_vehicle(self, record_id: int) -> dict:
        return self._request("GET", f"/vehiculos/{record_id}")["data"]

    def register_entry(self, plate: str, kind: str, owner: str) -> dict:
        payload = {"plate": plate, "kind": kind, "owner": owner}
        return self._request("POST", "/vehiculos", json=payload)["data"]

    def register_exit(self, record_id: int) -> dict:
        return self._request("PUT", f"/vehiculos/{record_id}/salida")["data"]

    def update_vehicle(self, record_id: int, plate: Optional[str] = None,
                       kind: Optional[str] = None, owner: Optional[str] = None) -> dict:
        payload = {k: v for k, v in {"plate": plate, "kind": kind, "owner": owner}.items() if v}
        return self._request("PUT", f"/vehiculos/{record_id}", json=payload)["data"]

    def delete_vehicle(self, record_id: int) -> dict:
        return self._request("DELETE", f"/vehiculos/{record_id}")["data"]

    def history(self, plate: str) -> dict:
        return self._request("GET", f"/vehiculos/historial/{plate}")["data"]

    def statistics(self) -> dict:
        return self._request("GET", "/estadisticas")["data"]
