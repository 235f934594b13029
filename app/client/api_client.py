"""HTTP client for the Compliance Suite API.

Every call returns an :class:`ApiResponse`; HTTP errors and transport failures are
reported through ``success=False`` instead of raising.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional
import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class ApiResponse:
    success: bool
    data: Any = None
    message: str = ""
    errors: Any = field(default_factory=list)
    status_code: int = 0


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.client = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.auth_token: Optional[str] = None
        self.auth = AuthApi(self)
        self.documents = DocumentsApi(self)
        self.ai = AiApi(self)
        self.users = UsersApi(self)

    def set_auth_token(self, token: Optional[str]) -> None:
        self.auth_token = token

    def _headers(self) -> dict:
        if self.auth_token:
            return {"Authorization": f"Bearer {self.auth_token}"}
        return {}

    def request(self, method: str, url: str, **kwargs) -> ApiResponse:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            response = self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {str(e)}")
            return ApiResponse(success=False, message=str(e) or "An unexpected error occurred", status_code=500)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_success:
            return ApiResponse(
                success=True,
                data=body.get("data", body),
                message=body.get("message", ""),
                status_code=response.status_code,
            )
        return ApiResponse(
            success=False,
            message=body.get("message", "Request failed"),
            errors=body.get("details", []),
            status_code=response.status_code,
        )

    def get(self, url: str, params: Optional[dict] = None) -> ApiResponse:
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        return self.request("GET", url, params=params)

    def post(self, url: str, json: Any = None, **kwargs) -> ApiResponse:
        return self.request("POST", url, json=json, **kwargs)

    def patch(self, url: str, json: Any = None) -> ApiResponse:
        return self.request("PATCH", url, json=json)

    def delete(self, url: str) -> ApiResponse:
        return self.request("DELETE", url)

    def close(self) -> None:
        self.client.close()


class AuthApi:
    def __init__(self, api: ApiClient):
        self.api = api

    def login(self, email: str, password: str) -> ApiResponse:
        result = self.api.post("/api/auth/login", {"email": email, "password": password})
        if result.success:
            self.api.set_auth_token(result.data["token"])
        return result

    def register(self, email: str, password: str, name: str) -> ApiResponse:
        result = self.api.post("/api/auth/register", {"email": email, "password": password, "name": name})
        if result.success:
            self.api.set_auth_token(result.data["token"])
        return result

    def verify_session(self) -> ApiResponse:
        return self.api.get("/api/auth/session")

    def logout(self) -> ApiResponse:
        result = self.api.post("/api/auth/logout")
        self.api.set_auth_token(None)
        return result


class DocumentsApi:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_all(self, **filters) -> ApiResponse:
        return self.api.get("/api/documents", params=filters)

    def get(self, document_id: str) -> ApiResponse:
        return self.api.get(f"/api/documents/{document_id}")

    def create(self, name: str, type: str, **fields) -> ApiResponse:
        return self.api.post("/api/documents", {"name": name, "type": type, **fields})

    def upload(
        self,
        content: bytes,
        filename: str,
        type: str,
        content_type: str = "application/pdf",
        name: Optional[str] = None,
        jurisdiction: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> ApiResponse:
        form = {"type": type}
        if name:
            form["name"] = name
        if jurisdiction:
            form["jurisdiction"] = jurisdiction
        if tags:
            form["tags"] = ",".join(tags)
        return self.api.request(
            "POST",
            "/api/documents/upload",
            data=form,
            files={"file": (filename, content, content_type)},
        )

    def update(self, document_id: str, **fields) -> ApiResponse:
        return self.api.patch(f"/api/documents/{document_id}", fields)

    def delete(self, document_id: str) -> ApiResponse:
        return self.api.delete(f"/api/documents/{document_id}")

    def process(self, document_id: str) -> ApiResponse:
        return self.api.post(f"/api/documents/{document_id}/process")

    def download_url(self, document_id: str) -> ApiResponse:
        return self.api.get(f"/api/documents/{document_id}/download")


class AiApi:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_interactions(self, **filters) -> ApiResponse:
        return self.api.get("/api/interactions", params=filters)

    def get_interaction(self, interaction_id: str) -> ApiResponse:
        return self.api.get(f"/api/interactions/{interaction_id}")

    def delete_interaction(self, interaction_id: str) -> ApiResponse:
        return self.api.delete(f"/api/interactions/{interaction_id}")

    def regulatory_qa(self, query: str, document_ids: Optional[list[str]] = None) -> ApiResponse:
        return self.api.post("/api/regulatory-qa", {"query": query, "documentIds": document_ids})

    def contract_review(self, contract_id: str, regulatory_ids: Optional[list[str]] = None) -> ApiResponse:
        return self.api.post("/api/contract-review", {"contractId": contract_id, "regulatoryIds": regulatory_ids})

    def summarization(self, document_id: str, options: Optional[dict] = None) -> ApiResponse:
        return self.api.post("/api/summarization", {"documentId": document_id, "options": options})

    def comparison(self, document_ids: list[str], comparison_type: str = "both") -> ApiResponse:
        return self.api.post("/api/comparison", {"documentIds": document_ids, "comparisonType": comparison_type})

    def policy_drafting(self, payload: dict) -> ApiResponse:
        return self.api.post("/api/policy-drafting", payload)

    def control_design(self, payload: dict) -> ApiResponse:
        return self.api.post("/api/control-design", payload)

    def alignment_gap(self, payload: dict) -> ApiResponse:
        return self.api.post("/api/alignment-gap", payload)

    def submit_feedback(
        self,
        interaction_id: str,
        rating: int,
        comment: Optional[str] = None,
        review_status: Optional[str] = None,
    ) -> ApiResponse:
        payload = {"interactionId": interaction_id, "rating": rating, "comment": comment}
        if review_status:
            payload["reviewStatus"] = review_status
        return self.api.post("/api/feedback", payload)


class UsersApi:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_current_user(self) -> ApiResponse:
        return self.api.get("/api/users/me")

    def update_profile(self, name: str) -> ApiResponse:
        return self.api.patch("/api/users/me", {"name": name})

    def get_all_users(self, **filters) -> ApiResponse:
        return self.api.get("/api/users", params=filters)

    def get_user(self, user_id: str) -> ApiResponse:
        return self.api.get(f"/api/users/{user_id}")
