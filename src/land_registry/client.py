"""
RegistryClient SDK — sync client for the land registry API.

Used by scripts and external services to register land, list it for sale,
purchase it, and record verifier decisions.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import httpx


class RegistryClientError(Exception):
    """Raised for non-retryable API errors and exhausted retries."""

    def __init__(self, message: str, status_code: int | None = None, code: str = "CLIENT_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


@dataclass
class ClientUser:
    id: int
    username: str
    email: str
    full_name: str
    role: str
    wallet_address: Optional[str] = None


@dataclass
class ClientLand:
    id: int
    title: str
    status: str
    owner_id: int
    area: int = 0
    address: str = ""
    city: str = ""
    state: str = ""
    property_type: str = ""
    price: Optional[int] = None
    is_for_sale: bool = False
    token_id: Optional[str] = None
    documents: list[str] = field(default_factory=list)


@dataclass
class ClientTransaction:
    id: int
    land_id: int
    from_user_id: int
    to_user_id: int
    price: int
    status: str
    tx_hash: Optional[str] = None
    verified_at: Optional[datetime] = None


@dataclass
class ClientVerificationLog:
    id: int
    land_id: int
    verifier_id: int
    action: str
    reason: Optional[str] = None
    tx_hash: Optional[str] = None
    created_at: Optional[datetime] = None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class RegistryClient:
    """
    Synchronous HTTP client for the land registry.

    Holds one session token; call ``login`` (or pass ``token``) before using
    authenticated endpoints.
    """

    def __init__(
        self,
        server_url: str = "http://localhost:5000",
        token: Optional[str] = None,
        api_prefix: str = "/api",
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_base: float = 0.5,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_prefix = api_prefix.rstrip("/")
        self.token = token
        self.max_retries = max_retries
        self.retry_backoff_base = retry_backoff_base
        self._http = httpx.Client(
            base_url=self.server_url,
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Central HTTP method with retry.

        Retries on timeouts, transport errors, 5xx and 429. Any other 4xx
        raises immediately with the server's ``message``.
        """
        last_error = None
        for attempt in range(self.max_retries):
            try:
                resp = getattr(self._http, method)(
                    f"{self.api_prefix}{path}", headers=self._headers(), **kwargs
                )
                if resp.status_code >= 500 or resp.status_code == 429:
                    last_error = f"HTTP {resp.status_code}"
                    if attempt < self.max_retries - 1:
                        time.sleep(self.retry_backoff_base * (2 ** attempt))
                        continue
                    raise RegistryClientError(
                        f"Server error: {resp.status_code}",
                        status_code=resp.status_code,
                        code="SERVER_ERROR",
                    )
                if resp.status_code >= 400:
                    try:
                        message = resp.json().get("message", "")
                    except ValueError:
                        message = ""
                    raise RegistryClientError(
                        message or f"Client error: {resp.status_code}",
                        status_code=resp.status_code,
                    )
                try:
                    return resp.json()
                except ValueError:
                    raise RegistryClientError(
                        "Invalid JSON response",
                        status_code=resp.status_code,
                        code="JSON_ERROR",
                    )
            except httpx.TimeoutException:
                last_error = "timeout"
            except httpx.HTTPError as e:
                last_error = str(e)
            if attempt < self.max_retries - 1:
                time.sleep(self.retry_backoff_base * (2 ** attempt))

        raise RegistryClientError(
            f"All {self.max_retries} retries exhausted: {last_error}",
            code="CONNECTION_ERROR",
        )

    # ── Parsing ──

    @staticmethod
    def _parse_user(data: dict) -> ClientUser:
        return ClientUser(
            id=data["id"],
            username=data.get("username", ""),
            email=data.get("email", ""),
            full_name=data.get("fullName", ""),
            role=data.get("role", ""),
            wallet_address=data.get("walletAddress"),
        )

    @staticmethod
    def _parse_land(data: dict) -> ClientLand:
        return ClientLand(
            id=data["id"],
            title=data.get("title", ""),
            status=data.get("status", ""),
            owner_id=data.get("ownerId", 0),
            area=data.get("area", 0),
            address=data.get("address", ""),
            city=data.get("city", ""),
            state=data.get("state", ""),
            property_type=data.get("propertyType", ""),
            price=data.get("price"),
            is_for_sale=data.get("isForSale", False),
            token_id=data.get("tokenId"),
            documents=data.get("documents") or [],
        )

    @staticmethod
    def _parse_transaction(data: dict) -> ClientTransaction:
        return ClientTransaction(
            id=data["id"],
            land_id=data.get("landId", 0),
            from_user_id=data.get("fromUserId", 0),
            to_user_id=data.get("toUserId", 0),
            price=data.get("price", 0),
            status=data.get("status", ""),
            tx_hash=data.get("txHash"),
            verified_at=_parse_datetime(data.get("verifiedAt")),
        )

    @staticmethod
    def _parse_log(data: dict) -> ClientVerificationLog:
        return ClientVerificationLog(
            id=data["id"],
            land_id=data.get("landId", 0),
            verifier_id=data.get("verifierId", 0),
            action=data.get("action", ""),
            reason=data.get("reason"),
            tx_hash=data.get("txHash"),
            created_at=_parse_datetime(data.get("createdAt")),
        )

    # ── Session ──

    def login(self, username: str, password: str) -> ClientUser:
        """Log in and keep the session token for later calls."""
        data = self._request("post", "/login", json={"username": username, "password": password})
        self.token = data["token"]
        return self._parse_user(data)

    def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: str = "landowner",
    ) -> ClientUser:
        data = self._request("post", "/register", json={
            "username": username,
            "email": email,
            "password": password,
            "fullName": full_name,
            "role": role,
        })
        self.token = data["token"]
        return self._parse_user(data)

    def me(self) -> ClientUser:
        return self._parse_user(self._request("get", "/user"))

    # ── Lands ──

    def register_land(self, **details: Any) -> ClientLand:
        """Submit a registration; keyword names use the API's camelCase fields."""
        return self._parse_land(self._request("post", "/lands", json=details))

    def get_land(self, land_id: int) -> ClientLand:
        return self._parse_land(self._request("get", f"/lands/{land_id}"))

    def my_lands(self) -> list[ClientLand]:
        return [self._parse_land(d) for d in self._request("get", "/lands/my")]

    def marketplace(self) -> list[ClientLand]:
        return [self._parse_land(d) for d in self._request("get", "/lands/marketplace")]

    def decide_verification(
        self,
        land_id: int,
        approve: bool,
        reason: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ) -> ClientLand:
        body: dict[str, Any] = {"status": "verified" if approve else "rejected"}
        if reason:
            body["reason"] = reason
        if tx_hash:
            body["txHash"] = tx_hash
        return self._parse_land(self._request("patch", f"/lands/{land_id}/status", json=body))

    def set_for_sale(
        self, land_id: int, is_for_sale: bool, price: Optional[int] = None,
    ) -> ClientLand:
        body: dict[str, Any] = {"isForSale": is_for_sale}
        if price is not None:
            body["price"] = price
        return self._parse_land(self._request("patch", f"/lands/{land_id}/sale", json=body))

    # ── Transactions ──

    def purchase(self, land_id: int, price: int) -> ClientTransaction:
        return self._parse_transaction(
            self._request("post", "/transactions", json={"landId": land_id, "price": price})
        )

    def my_transactions(self) -> list[ClientTransaction]:
        return [self._parse_transaction(d) for d in self._request("get", "/transactions/my")]

    def pending_transactions(self) -> list[ClientTransaction]:
        return [
            self._parse_transaction(d)
            for d in self._request("get", "/transactions/pending")
        ]

    def decide_transfer(
        self,
        transaction_id: int,
        approve: bool,
        reason: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ) -> ClientTransaction:
        body: dict[str, Any] = {"status": "completed" if approve else "rejected"}
        if reason:
            body["reason"] = reason
        if tx_hash:
            body["txHash"] = tx_hash
        return self._parse_transaction(
            self._request("patch", f"/transactions/{transaction_id}", json=body)
        )

    # ── Verification logs ──

    def land_history(self, land_id: int) -> list[ClientVerificationLog]:
        return [
            self._parse_log(d)
            for d in self._request("get", f"/verification-logs/land/{land_id}")
        ]

    # ── Lifecycle ──

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()
