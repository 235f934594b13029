import pytest
from app.api.feedback import review_status_for_rating
from app.models.ai_interaction import AIInteraction, FeatureType, ReviewStatus
from app.models.user import UserRole


@pytest.fixture
def interaction(db, analyst):
    record = AIInteraction(
        feature_type=FeatureType.SUMMARIZATION,
        user_id=analyst.id,
        prompt="Summarize document: GDPR",
        response="Summary",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.mark.parametrize(
    "rating, expected",
    [
        (5, ReviewStatus.ACCURATE),
        (4, ReviewStatus.ACCURATE),
        (3, ReviewStatus.NEEDS_REVIEW),
        (2, ReviewStatus.INACCURATE),
        (1, ReviewStatus.INACCURATE),
    ],
)
def test_review_status_for_rating(rating, expected):
    assert review_status_for_rating(rating) == expected


def test_sme_feedback_marks_interaction_reviewed(client, db, sme, interaction, headers_for):
    response = client.post(
        "/api/feedback",
        json={"interactionId": interaction.id, "rating": 5, "comment": "Spot on"},
        headers=headers_for(sme),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["reviewStatus"] == "accurate"
    assert body["feedback"]["rating"] == 5
    assert body["feedback"]["userId"] == sme.id

    db.expire_all()
    reviewed = db.get(AIInteraction, interaction.id)
    assert reviewed.review_status == ReviewStatus.ACCURATE
    assert reviewed.reviewer_id == sme.id
    assert reviewed.reviewer_feedback == "Spot on"
    assert reviewed.reviewed_at is not None


def test_explicit_review_status_wins_over_rating(client, sme, interaction, headers_for):
    response = client.post(
        "/api/feedback",
        json={"interactionId": interaction.id, "rating": 5, "reviewStatus": "needs-review"},
        headers=headers_for(sme),
    )
    assert response.json()["reviewStatus"] == "needs-review"


def test_analyst_cannot_submit_feedback(client, analyst, interaction, headers_for):
    response = client.post(
        "/api/feedback", json={"interactionId": interaction.id, "rating": 4}, headers=headers_for(analyst)
    )
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_feedback_rating_out_of_range(client, sme, interaction, headers_for):
    response = client.post(
        "/api/feedback", json={"interactionId": interaction.id, "rating": 6}, headers=headers_for(sme)
    )
    assert response.status_code == 400


def test_feedback_for_missing_interaction(client, sme, headers_for):
    response = client.post(
        "/api/feedback",
        json={"interactionId": "00000000-0000-0000-0000-000000000000", "rating": 3},
        headers=headers_for(sme),
    )
    assert response.status_code == 404


def test_list_feedback_requires_view_reports(client, sme, headers_for):
    assert client.get("/api/feedback", headers=headers_for(sme)).status_code == 403


def test_manager_lists_feedback_with_filters(client, db, make_user, interaction, headers_for):
    sme = make_user(UserRole.SME)
    manager = make_user(UserRole.MANAGER)
    client.post(
        "/api/feedback", json={"interactionId": interaction.id, "rating": 2}, headers=headers_for(sme)
    )

    response = client.get("/api/feedback", headers=headers_for(manager))
    assert response.status_code == 200
    feedback = response.json()["feedback"]
    assert len(feedback) == 1
    assert feedback[0]["interaction"]["featureType"] == "summarization"
    assert feedback[0]["user"]["id"] == sme.id

    response = client.get(
        "/api/feedback", params={"featureType": "regulatory-qa"}, headers=headers_for(manager)
    )
    assert response.json()["feedback"] == []

    response = client.get(
        "/api/feedback", params={"interactionId": interaction.id}, headers=headers_for(manager)
    )
    assert len(response.json()["feedback"]) == 1


def test_feedback_cannot_reset_to_pending(client, sme, interaction, headers_for):
    response = client.post(
        "/api/feedback",
        json={"interactionId": interaction.id, "rating": 3, "reviewStatus": "pending"},
        headers=headers_for(sme),
    )
    assert response.status_code == 400
