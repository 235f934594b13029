# Each entry lists one claim per compared document, by position
COMPARISON_TEMPLATE = {
    "similarities": [
        {
            "aspect": "Data Security Requirements",
            "description": "Both documents require encryption of sensitive data at rest and in transit.",
            "sections": ["Section 4.2", "Article 5.3"]
        },
        {
            "aspect": "Breach Notification",
            "description": "Both documents mandate notification of affected parties after a data breach.",
            "sections": ["Section 7.1", "Article 9.4"]
        }
    ],
    "differences": [
        {
            "aspect": "Notification Timeline",
            "description": "Documents specify different timelines for breach notification.",
            "details": ["Requires notification within 72 hours", "Requires notification within 30 days"]
        },
        {
            "aspect": "Data Subject Rights",
            "description": "Documents have different scopes for data subject rights.",
            "details": ["Includes right to be forgotten", "No specific provision for deletion requests"]
        }
    ],
    "summary": (
        "The compared documents share core principles regarding data security and breach "
        "notification requirements, but differ significantly in implementation timelines and "
        "the scope of individual rights granted to data subjects. Document \"{first}\" has more "
        "stringent requirements for breach notification (72 hours vs 30 days) compared to \"{second}\"."
    )
}
