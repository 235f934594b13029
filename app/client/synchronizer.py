import logging
from app.client.stores import AiStore, AuthStore, DocumentStore, UIState

logger = logging.getLogger(__name__)

REVIEWER_ROLES = ("admin", "sme")


class StateSynchronizer:
    """Keeps the client stores consistent with each other.

    Subscribes to every store and applies cross-store effects when the watched
    attributes change. Effects never modify the attribute that triggered them,
    so a change cannot loop back into itself.
    """

    def __init__(self, auth: AuthStore, documents: DocumentStore, ai: AiStore, ui: UIState):
        self.auth = auth
        self.documents = documents
        self.ai = ai
        self.ui = ui
        self._unsubscribers = []

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        if self.running:
            return
        self._unsubscribers = [
            self.auth.subscribe(self._on_auth_change),
            self.documents.subscribe(self._on_documents_change),
            self.ai.subscribe(self._on_ai_change),
            self.ui.subscribe(self._on_ui_change),
        ]
        logger.debug("State synchronizer started")

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.debug("State synchronizer stopped")

    def sync(self) -> None:
        """Apply every effect once against the current store state."""
        self._sync_auth_status()
        self._sync_review_permissions()
        self._sync_pending_reviews()
        self._sync_feature_filter()
        self._sync_ui_error()

    def _on_auth_change(self, store, changed: set) -> None:
        if "auth_status" in changed:
            self._sync_auth_status()
        if "user" in changed:
            self._sync_review_permissions()

    def _on_documents_change(self, store, changed: set) -> None:
        if "upload_status" in changed and self.documents.upload_status == "success":
            self.ui.trigger_event("document-updated")

    def _on_ai_change(self, store, changed: set) -> None:
        if "interactions" in changed or "pending_reviews" in changed:
            self._sync_pending_reviews()
        if "feature_filter" in changed:
            self._sync_feature_filter()

    def _on_ui_change(self, store, changed: set) -> None:
        if "status" in changed:
            self._sync_ui_error()

    def _sync_auth_status(self) -> None:
        if self.auth.auth_status == "loading":
            self.documents.set_processing_status("loading")

    def _sync_review_permissions(self) -> None:
        user = self.auth.user
        if not user:
            return
        if user.get("role") in REVIEWER_ROLES:
            self.ui.trigger_event("review-permissions-granted")
        else:
            self.ui.trigger_event("review-permissions-denied")

    def _sync_pending_reviews(self) -> None:
        tracked = {item["id"] for item in self.ai.pending_reviews}
        for interaction in self.ai.interactions:
            if interaction.get("reviewStatus") == "pending" and interaction["id"] not in tracked:
                self.ai.update_interaction(interaction["id"], reviewStatus="pending")

    def _sync_feature_filter(self) -> None:
        if self.ai.feature_filter != "all":
            self.ui.trigger_event("filter-changed")

    def _sync_ui_error(self) -> None:
        if self.ui.status == "error":
            self.ai.set_interaction_status("error", "An error occurred in the application")
