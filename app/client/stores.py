"""Client-side state containers mirroring server resources.

Each store holds plain attributes and notifies its subscribers with the set of
attribute names that changed. Records are kept in their wire (camelCase) shape.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from app.client.api_client import AiApi, AuthApi, DocumentsApi

logger = logging.getLogger(__name__)

UI_STATUSES = ("idle", "loading", "processing", "success", "error")

Listener = Callable[["Store", set], None]


class Store:
    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, **changes) -> None:
        changed = {key for key, value in changes.items() if getattr(self, key) != value}
        for key, value in changes.items():
            setattr(self, key, value)
        if changed:
            self._notify(changed)

    def _notify(self, changed: set) -> None:
        for listener in list(self._listeners):
            listener(self, changed)


class UIState(Store):
    def __init__(self):
        super().__init__()
        self.status = "idle"
        self.error: Optional[str] = None
        self.message: Optional[str] = None
        self.events: list[tuple[str, float]] = []

    def set_status(self, status: str) -> None:
        if status not in UI_STATUSES:
            raise ValueError(f"Unknown UI status: {status}")
        self.set(status=status)

    def set_error(self, error: Optional[str]) -> None:
        self.set(error=error)

    def set_message(self, message: Optional[str]) -> None:
        self.set(message=message)

    def reset(self) -> None:
        self.set(status="idle", error=None, message=None)

    def start_loading(self) -> None:
        self.set(status="loading", error=None, message=None)

    def start_processing(self) -> None:
        self.set(status="processing", error=None, message=None)

    def set_success(self, message: Optional[str] = None) -> None:
        self.set(status="success", error=None, message=message or "Operation completed successfully")

    def set_failed(self, error: Optional[str]) -> None:
        self.set(status="error", error=error or "An error occurred", message=None)

    def trigger_event(self, name: str) -> None:
        self.events = [*self.events, (name, time.time())]
        self._notify({"events"})

    def get_last_event_time(self, name: str) -> Optional[float]:
        for event, at in reversed(self.events):
            if event == name:
                return at
        return None


class AuthStore(Store):
    def __init__(self):
        super().__init__()
        self.is_authenticated = False
        self.user: Optional[dict] = None
        self.auth_status = "idle"
        self.auth_error: Optional[str] = None

    def login(self, auth_api: AuthApi, email: str, password: str) -> bool:
        self.set(auth_status="loading", auth_error=None)
        result = auth_api.login(email, password)
        if not result.success:
            self.set(auth_status="error", auth_error=result.message or "Invalid email or password")
            return False
        self.set(is_authenticated=True, user=result.data["user"], auth_status="success")
        return True

    def restore_session(self, auth_api: AuthApi) -> bool:
        self.set(auth_status="loading", auth_error=None)
        result = auth_api.verify_session()
        if not result.success:
            self.set(is_authenticated=False, user=None, auth_status="idle")
            return False
        self.set(is_authenticated=True, user=result.data["user"], auth_status="success")
        return True

    def logout(self, auth_api: Optional[AuthApi] = None) -> None:
        if auth_api is not None:
            auth_api.logout()
        self.set(is_authenticated=False, user=None, auth_status="idle", auth_error=None)

    def set_user(self, user: Optional[dict]) -> None:
        self.set(user=user, is_authenticated=user is not None)

    def set_auth_status(self, status: str, error: Optional[str] = None) -> None:
        self.set(auth_status=status, auth_error=error)

    def has_permission(self, permission: str) -> bool:
        if not self.user:
            return False
        return permission in self.user.get("permissions", [])

    def has_role(self, role) -> bool:
        if not self.user:
            return False
        if isinstance(role, (list, tuple, set)):
            return self.user.get("role") in role
        return self.user.get("role") == role


class DocumentStore(Store):
    def __init__(self):
        super().__init__()
        self.documents: list[dict] = []
        self.filtered_documents: list[dict] = []
        self.selected_document: Optional[dict] = None
        self.upload_status = "idle"
        self.upload_progress = 0
        self.upload_error: Optional[str] = None
        self.processing_status = "idle"
        self.search_query = ""
        self.document_type_filter = "all"
        self.jurisdiction_filter = "all"

    def set_documents(self, documents: list[dict]) -> None:
        self.set(documents=list(documents))
        self.apply_filters()

    def add_document(self, document: dict) -> None:
        self.set(documents=[*self.documents, document])
        self.apply_filters()

    def update_document(self, document: dict) -> None:
        self.set(documents=[document if doc["id"] == document["id"] else doc for doc in self.documents])
        if self.selected_document and self.selected_document["id"] == document["id"]:
            self.set(selected_document=document)
        self.apply_filters()

    def remove_document(self, document_id: str) -> None:
        self.set(documents=[doc for doc in self.documents if doc["id"] != document_id])
        if self.selected_document and self.selected_document["id"] == document_id:
            self.set(selected_document=None)
        self.apply_filters()

    def select_document(self, document_id: Optional[str]) -> None:
        if document_id is None:
            self.set(selected_document=None)
            return
        match = next((doc for doc in self.documents if doc["id"] == document_id), None)
        self.set(selected_document=match)

    def set_upload_status(self, status: str, error: Optional[str] = None) -> None:
        self.set(upload_status=status, upload_error=error)
        if status in ("success", "error"):
            self.set(upload_progress=0)

    def set_upload_progress(self, progress: int) -> None:
        self.set(upload_progress=max(0, min(100, progress)))

    def set_processing_status(self, status: str) -> None:
        self.set(processing_status=status)

    def set_search_query(self, query: str) -> None:
        self.set(search_query=query)
        self.apply_filters()

    def set_document_type_filter(self, document_type: str) -> None:
        self.set(document_type_filter=document_type)
        self.apply_filters()

    def set_jurisdiction_filter(self, jurisdiction: str) -> None:
        self.set(jurisdiction_filter=jurisdiction)
        self.apply_filters()

    def apply_filters(self) -> None:
        filtered = list(self.documents)
        if self.search_query:
            query = self.search_query.lower()
            filtered = [
                doc for doc in filtered
                if query in doc["name"].lower() or any(query in tag.lower() for tag in doc.get("tags", []))
            ]
        if self.document_type_filter != "all":
            filtered = [doc for doc in filtered if doc["type"] == self.document_type_filter]
        if self.jurisdiction_filter != "all":
            filtered = [doc for doc in filtered if doc.get("jurisdiction") == self.jurisdiction_filter]
        self.set(filtered_documents=filtered)

    def load(self, documents_api: DocumentsApi, **filters) -> bool:
        self.set_processing_status("loading")
        result = documents_api.get_all(**filters)
        if not result.success:
            logger.error(f"Failed to load documents: {result.message}")
            self.set_processing_status("error")
            return False
        self.set_documents(result.data["documents"])
        self.set_processing_status("success")
        return True

    def upload(self, documents_api: DocumentsApi, content: bytes, filename: str, type: str, **fields) -> Optional[dict]:
        self.set_upload_status("loading")
        self.set_upload_progress(10)
        result = documents_api.upload(content, filename, type, **fields)
        if not result.success:
            self.set_upload_status("error", result.message)
            return None
        self.set_upload_progress(100)
        document = result.data["document"]
        self.add_document(document)
        self.set_upload_status("success")
        return document


class AiStore(Store):
    def __init__(self):
        super().__init__()
        self.interactions: list[dict] = []
        self.current_interaction: Optional[dict] = None
        self.interaction_status = "idle"
        self.interaction_error: Optional[str] = None
        self.pending_reviews: list[dict] = []
        self.feature_filter = "all"
        self.review_status_filter = "all"

    def add_interaction(self, interaction: dict) -> None:
        pending = self.pending_reviews
        if interaction.get("reviewStatus") == "pending":
            pending = [*pending, interaction]
        self.set(interactions=[*self.interactions, interaction], pending_reviews=pending)

    def remove_interaction(self, interaction_id: str) -> None:
        self.set(
            interactions=[i for i in self.interactions if i["id"] != interaction_id],
            pending_reviews=[i for i in self.pending_reviews if i["id"] != interaction_id],
        )

    def set_current_interaction(self, interaction: Optional[dict]) -> None:
        self.set(current_interaction=interaction)

    def set_interaction_status(self, status: str, error: Optional[str] = None) -> None:
        self.set(interaction_status=status, interaction_error=error)

    def update_interaction(self, interaction_id: str, **updates: Any) -> None:
        interactions = [
            {**i, **updates} if i["id"] == interaction_id else i for i in self.interactions
        ]
        pending = list(self.pending_reviews)
        if "reviewStatus" in updates:
            if updates["reviewStatus"] != "pending":
                pending = [i for i in pending if i["id"] != interaction_id]
            else:
                updated = next((i for i in interactions if i["id"] == interaction_id), None)
                if updated and not any(i["id"] == interaction_id for i in pending):
                    pending.append(updated)
        self.set(interactions=interactions, pending_reviews=pending)

    def set_feature_filter(self, feature: str) -> None:
        self.set(feature_filter=feature)

    def set_review_status_filter(self, review_status: str) -> None:
        self.set(review_status_filter=review_status)

    def submit_review(self, interaction_id: str, review_status: str, feedback: str = "") -> None:
        reviewed_at = datetime.now(timezone.utc).isoformat()
        self.set(
            interactions=[
                {**i, "reviewStatus": review_status, "reviewerFeedback": feedback, "reviewedAt": reviewed_at}
                if i["id"] == interaction_id else i
                for i in self.interactions
            ],
            pending_reviews=[i for i in self.pending_reviews if i["id"] != interaction_id],
        )

    def get_pending_reviews(self) -> list[dict]:
        return [i for i in self.interactions if i.get("reviewStatus") == "pending"]

    def get_filtered_interactions(self) -> list[dict]:
        return [
            i for i in self.interactions
            if (self.feature_filter == "all" or i["featureType"] == self.feature_filter)
            and (self.review_status_filter == "all" or i["reviewStatus"] == self.review_status_filter)
        ]

    def get_interactions_by_user(self, user_id: str) -> list[dict]:
        return [i for i in self.interactions if i["userId"] == user_id]

    def get_interactions_by_feature(self, feature_type: str) -> list[dict]:
        return [i for i in self.interactions if i["featureType"] == feature_type]

    def run_feature(self, ai_api: AiApi, feature: str, *args, **kwargs) -> Optional[dict]:
        """Call one AI feature endpoint and record the resulting interaction."""
        self.set_interaction_status("loading")
        result = getattr(ai_api, feature)(*args, **kwargs)
        if not result.success:
            self.set_interaction_status("error", result.message)
            return None
        interaction = result.data["interaction"]
        self.add_interaction(interaction)
        self.set_current_interaction(interaction)
        self.set_interaction_status("success")
        return result.data

    def review(self, ai_api: AiApi, interaction_id: str, rating: int, comment: str = "",
               review_status: Optional[str] = None) -> bool:
        result = ai_api.submit_feedback(interaction_id, rating, comment or None, review_status)
        if not result.success:
            self.set_interaction_status("error", result.message)
            return False
        self.submit_review(interaction_id, result.data["reviewStatus"], comment)
        return True
