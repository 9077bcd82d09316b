"""LY loyalty API client.

This module defines a small client wrapper around the loyalty REST API
served by ``loyalty_api``.  It uses the ``requests`` library and
returns ``(data, error)`` tuples instead of raising, so that callers
such as scripts or bots can report failures without try/except blocks
around every call.

The client exposes high‑level methods for the common operations:

* :meth:`list_companies` / :meth:`create_company` – manage companies.
* :meth:`list_programs` / :meth:`create_program` – manage loyalty programs.
* :meth:`register_user` – register a customer, optionally in a program.
* :meth:`add_points` / :meth:`redeem_points` – change a points balance.
* :meth:`create_pass` / :meth:`assign_pass` – issue wallet passes.
* :meth:`dashboard` – fetch the global analytics dashboard.

Responses of the API use the envelope ``{"success": ..., "data": ...}``;
the client unwraps ``data`` on success and turns the ``error`` field of
failed responses into the error dictionary.

Running the module performs a smoke test against a running server::

    LOYALTY_API_URL=http://localhost:3000 python loyalty_client.py
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class LoyaltyAPI:
    """Client for the loyalty API.

    ``base_url`` is the server root, e.g. ``http://localhost:3000``;
    the ``/api/v1`` prefix is added by the client.
    """

    API_PREFIX = "/api/v1"

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the versioned prefix (e.g. ``/users/``).
                Paths starting with ``/health`` are sent to the server root.
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.  On success ``data`` is the
            ``data`` member of the response envelope (or the whole body
            if there is none).  On failure ``data`` is ``None`` and
            ``error`` has the keys ``status_code`` and ``message``.
        """
        prefix = "" if path.startswith("/health") else self.API_PREFIX
        url = f"{self.base_url}{prefix}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        if not response.content:
            return None, None
        body = response.json()
        if isinstance(body, dict) and "data" in body:
            return body["data"], None
        return body, None

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------
    def list_companies(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/companies/")
        return data or [], error

    def get_company(self, company_id: str) -> Result:
        return self._request("GET", f"/companies/{company_id}")

    def create_company(self, name: str, admin_email: str, logo: Optional[str] = None) -> Result:
        payload = {"name": name, "adminEmail": admin_email}
        if logo:
            payload["logo"] = logo
        return self._request("POST", "/companies/", json_body=payload)

    def delete_company(self, company_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/companies/{company_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Loyalty programs
    # ------------------------------------------------------------------
    def list_programs(self, company_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        params = {"companyId": company_id} if company_id else None
        data, error = self._request("GET", "/loyalty-programs/", params=params)
        return data or [], error

    def get_program(self, program_id: str, include_details: bool = False) -> Result:
        params = {"includeDetails": "true"} if include_details else None
        return self._request("GET", f"/loyalty-programs/{program_id}", params=params)

    def create_program(self, company_id: str, name: str, template: str, invite_link: str) -> Result:
        """Create a loyalty program.

        Args:
            company_id: Owning company.
            name: Display name of the program.
            template: One of ``basic``, ``premium``, ``coffee``,
                ``retail``, ``restaurant`` or ``beauty``.
            invite_link: URL customers use to join.
        """
        payload = {"companyId": company_id, "name": name, "template": template, "inviteLink": invite_link}
        return self._request("POST", "/loyalty-programs/", json_body=payload)

    # ------------------------------------------------------------------
    # Users and points
    # ------------------------------------------------------------------
    def register_user(self, payload: Dict[str, Any]) -> Result:
        """Register a customer.

        Args:
            payload: User data, e.g. ``{"name": ..., "email": ...,
                "loyaltyProgramId": ...}``.  Either ``email`` or
                ``phone`` is required.
        Returns:
            A tuple ``(user, error)``.  A duplicate e-mail or phone is
            reported with ``status_code`` 409.
        """
        return self._request("POST", "/users/", json_body=payload)

    def get_user(self, user_id: str) -> Result:
        return self._request("GET", f"/users/{user_id}")

    def get_points(self, user_id: str) -> Result:
        return self._request("GET", f"/users/{user_id}/points")

    def add_points(self, user_id: str, points: int, description: Optional[str] = None) -> Result:
        payload: Dict[str, Any] = {"points": points}
        if description:
            payload["description"] = description
        return self._request("POST", f"/users/{user_id}/points/add", json_body=payload)

    def redeem_points(self, user_id: str, points: int, description: Optional[str] = None) -> Result:
        payload: Dict[str, Any] = {"points": points}
        if description:
            payload["description"] = description
        return self._request("POST", f"/users/{user_id}/points/redeem", json_body=payload)

    # ------------------------------------------------------------------
    # Wallet passes
    # ------------------------------------------------------------------
    def list_passes(self, **filters: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """List passes; keyword filters are ``companyId``, ``loyaltyProgramId`` and ``passType``."""
        data, error = self._request("GET", "/passes/", params=filters or None)
        return data or [], error

    def create_pass(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/passes/", json_body=payload)

    def assign_pass(self, pass_id: str, user_id: str) -> Result:
        return self._request("POST", f"/passes/{pass_id}/assign", json_body={"userId": user_id})

    def user_passes(self, user_id: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/users/{user_id}/passes")
        return data or [], error

    # ------------------------------------------------------------------
    # Analytics and health
    # ------------------------------------------------------------------
    def dashboard(self) -> Result:
        return self._request("GET", "/analytics/dashboard")

    def health(self) -> Result:
        return self._request("GET", "/health")


def main() -> None:
    """Exercise the main endpoints of a running server and log the results."""
    logging.basicConfig(level=logging.INFO)
    api = LoyaltyAPI(base_url=os.getenv("LOYALTY_API_URL", "http://localhost:3000"))

    status, error = api.health()
    if error:
        logger.error("Server is not reachable: %s", error["message"])
        return
    logger.info("Health: %s", status)

    company, error = api.create_company("Smoke Test Cafe", "owner@smoke.test")
    if error:
        logger.error("Could not create company: %s", error["message"])
        return
    program, error = api.create_program(company["id"], "Smoke Test Rewards", "coffee", "https://ly.app/join/smoke")
    if error:
        logger.error("Could not create program: %s", error["message"])
        return
    user, error = api.register_user({
        "name": "Smoke Tester",
        "email": "tester@smoke.test",
        "loyaltyProgramId": program["id"],
    })
    if error:
        logger.error("Could not register user: %s", error["message"])
        return
    api.add_points(user["id"], 100, "Welcome bonus")
    balance, _ = api.redeem_points(user["id"], 30, "Free espresso")
    logger.info("Balance after redemption: %s", balance)
    dashboard, _ = api.dashboard()
    logger.info("Dashboard: %s", dashboard)

    api.delete_company(company["id"])


if __name__ == "__main__":
    main()
