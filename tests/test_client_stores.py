from types import SimpleNamespace
import pytest
from app.client.api_client import ApiResponse
from app.client.stores import AiStore, AuthStore, DocumentStore, UIState
from app.client.synchronizer import StateSynchronizer


def make_doc(doc_id, name, type="regulation", jurisdiction="EU", tags=None):
    return {"id": doc_id, "name": name, "type": type, "jurisdiction": jurisdiction, "tags": tags or []}


def make_interaction(interaction_id, feature="regulatory-qa", status="pending", user_id="u1"):
    return {"id": interaction_id, "featureType": feature, "reviewStatus": status, "userId": user_id}


@pytest.fixture
def stores():
    return SimpleNamespace(auth=AuthStore(), documents=DocumentStore(), ai=AiStore(), ui=UIState())


@pytest.fixture
def synchronizer(stores):
    sync = StateSynchronizer(stores.auth, stores.documents, stores.ai, stores.ui)
    sync.start()
    yield sync
    sync.stop()


def test_subscribers_receive_changed_keys_only_on_change():
    ui = UIState()
    seen = []
    unsubscribe = ui.subscribe(lambda store, changed: seen.append(changed))

    ui.set_message("Saved")
    ui.set_message("Saved")
    assert seen == [{"message"}]

    unsubscribe()
    ui.set_message("Other")
    assert len(seen) == 1


def test_ui_state_transitions():
    ui = UIState()
    ui.start_loading()
    assert ui.status == "loading"
    ui.set_failed(None)
    assert (ui.status, ui.error) == ("error", "An error occurred")
    ui.set_success()
    assert (ui.status, ui.error, ui.message) == ("success", None, "Operation completed successfully")
    ui.reset()
    assert (ui.status, ui.message) == ("idle", None)
    with pytest.raises(ValueError):
        ui.set_status("sleeping")


def test_ui_events_keep_latest_time():
    ui = UIState()
    assert ui.get_last_event_time("saved") is None
    ui.trigger_event("saved")
    first = ui.get_last_event_time("saved")
    ui.trigger_event("saved")
    assert ui.get_last_event_time("saved") >= first
    assert len(ui.events) == 2


def test_auth_store_login_and_permissions():
    user = {"id": "u1", "role": "sme", "permissions": ["use:ai", "validate:ai"]}
    auth_api = SimpleNamespace(login=lambda email, password: ApiResponse(success=True, data={"user": user, "token": "t"}))
    auth = AuthStore()

    assert auth.login(auth_api, "sme@example.com", "password123")
    assert auth.is_authenticated
    assert auth.auth_status == "success"
    assert auth.has_permission("validate:ai")
    assert not auth.has_permission("manage:users")
    assert auth.has_role("sme")
    assert auth.has_role(["admin", "sme"])

    auth.logout()
    assert auth.user is None
    assert not auth.has_permission("use:ai")


def test_auth_store_login_failure():
    auth_api = SimpleNamespace(login=lambda email, password: ApiResponse(success=False, message="Invalid credentials"))
    auth = AuthStore()
    assert not auth.login(auth_api, "x@example.com", "password123")
    assert (auth.auth_status, auth.auth_error) == ("error", "Invalid credentials")
    assert not auth.is_authenticated


def test_document_store_filters():
    store = DocumentStore()
    store.set_documents([
        make_doc("1", "GDPR", tags=["privacy"]),
        make_doc("2", "Vendor MSA", type="contract", jurisdiction="US"),
        make_doc("3", "CCPA", jurisdiction="US-CA", tags=["Privacy", "california"]),
    ])
    assert len(store.filtered_documents) == 3

    store.set_search_query("privacy")
    assert [doc["id"] for doc in store.filtered_documents] == ["1", "3"]

    store.set_jurisdiction_filter("US-CA")
    assert [doc["id"] for doc in store.filtered_documents] == ["3"]

    store.set_search_query("")
    store.set_jurisdiction_filter("all")
    store.set_document_type_filter("contract")
    assert [doc["id"] for doc in store.filtered_documents] == ["2"]


def test_document_store_selection_follows_updates():
    store = DocumentStore()
    store.set_documents([make_doc("1", "GDPR")])
    store.select_document("1")
    store.update_document(make_doc("1", "EU GDPR"))
    assert store.selected_document["name"] == "EU GDPR"

    store.remove_document("1")
    assert store.selected_document is None
    assert store.filtered_documents == []


def test_document_store_upload_resets_progress():
    document = make_doc("1", "GDPR")
    documents_api = SimpleNamespace(upload=lambda *args, **kwargs: ApiResponse(success=True, data={"document": document}))
    store = DocumentStore()

    assert store.upload(documents_api, b"data", "gdpr.pdf", "regulation") == document
    assert store.upload_status == "success"
    assert store.upload_progress == 0
    assert store.documents == [document]


def test_document_store_upload_failure():
    documents_api = SimpleNamespace(upload=lambda *args, **kwargs: ApiResponse(success=False, message="Too large"))
    store = DocumentStore()
    assert store.upload(documents_api, b"data", "gdpr.pdf", "regulation") is None
    assert (store.upload_status, store.upload_error, store.upload_progress) == ("error", "Too large", 0)


def test_ai_store_pending_reviews():
    store = AiStore()
    store.add_interaction(make_interaction("a"))
    store.add_interaction(make_interaction("b", status="accurate"))
    assert [i["id"] for i in store.pending_reviews] == ["a"]

    store.submit_review("a", "inaccurate", "Wrong article")
    assert store.pending_reviews == []
    reviewed = store.interactions[0]
    assert reviewed["reviewStatus"] == "inaccurate"
    assert reviewed["reviewerFeedback"] == "Wrong article"
    assert reviewed["reviewedAt"]

    store.update_interaction("b", reviewStatus="pending")
    assert [i["id"] for i in store.pending_reviews] == ["b"]

    store.remove_interaction("b")
    assert store.pending_reviews == []
    assert [i["id"] for i in store.get_pending_reviews()] == []


def test_ai_store_queries():
    store = AiStore()
    store.add_interaction(make_interaction("a", feature="summarization", user_id="u1"))
    store.add_interaction(make_interaction("b", status="accurate", user_id="u2"))
    store.add_interaction(make_interaction("c", feature="summarization", status="accurate", user_id="u2"))

    store.set_feature_filter("summarization")
    store.set_review_status_filter("accurate")
    assert [i["id"] for i in store.get_filtered_interactions()] == ["c"]
    assert [i["id"] for i in store.get_interactions_by_user("u2")] == ["b", "c"]
    assert [i["id"] for i in store.get_interactions_by_feature("regulatory-qa")] == ["b"]


def test_ai_store_run_feature():
    interaction = make_interaction("a")
    ai_api = SimpleNamespace(
        regulatory_qa=lambda query: ApiResponse(success=True, data={"interaction": interaction})
    )
    store = AiStore()
    data = store.run_feature(ai_api, "regulatory_qa", "What applies?")
    assert data["interaction"] == interaction
    assert store.current_interaction == interaction
    assert store.interaction_status == "success"
    assert [i["id"] for i in store.pending_reviews] == ["a"]


def test_ai_store_review_uses_server_status():
    ai_api = SimpleNamespace(
        submit_feedback=lambda *args: ApiResponse(success=True, data={"reviewStatus": "needs-review"})
    )
    store = AiStore()
    store.add_interaction(make_interaction("a"))
    assert store.review(ai_api, "a", 3, "Unsure")
    assert store.interactions[0]["reviewStatus"] == "needs-review"
    assert store.pending_reviews == []


def test_sync_auth_loading_marks_documents_loading(stores, synchronizer):
    stores.auth.set_auth_status("loading")
    assert stores.documents.processing_status == "loading"


def test_sync_upload_success_emits_event(stores, synchronizer):
    stores.documents.set_upload_status("success")
    assert stores.ui.get_last_event_time("document-updated") is not None


def test_sync_ui_error_flags_ai_store(stores, synchronizer):
    stores.ui.set_error("Network down")
    assert stores.ai.interaction_status == "idle"

    stores.ui.set_failed("Network down")
    assert stores.ai.interaction_status == "error"
    assert stores.ai.interaction_error == "An error occurred in the application"


def test_sync_feature_filter_emits_event(stores, synchronizer):
    stores.ai.set_feature_filter("all")
    assert stores.ui.get_last_event_time("filter-changed") is None
    stores.ai.set_feature_filter("comparison")
    assert stores.ui.get_last_event_time("filter-changed") is not None


@pytest.mark.parametrize(
    "role, event",
    [
        ("admin", "review-permissions-granted"),
        ("sme", "review-permissions-granted"),
        ("analyst", "review-permissions-denied"),
        ("manager", "review-permissions-denied"),
    ],
)
def test_sync_review_permissions_event(stores, synchronizer, role, event):
    stores.auth.set_user({"id": "u1", "role": role, "permissions": []})
    assert [name for name, _ in stores.ui.events] == [event]


def test_sync_restores_missing_pending_reviews(stores, synchronizer):
    stores.ai.set(interactions=[make_interaction("a"), make_interaction("b", status="accurate")])
    assert [i["id"] for i in stores.ai.pending_reviews] == ["a"]


def test_stopped_synchronizer_applies_nothing(stores, synchronizer):
    synchronizer.stop()
    assert not synchronizer.running
    stores.documents.set_upload_status("success")
    assert stores.ui.events == []

    synchronizer.sync()
    assert stores.ui.events == []
