# Scores are keyed by analysis type: compliance (percent), maturity (1-5), risk (level)
ALIGNMENT_TEMPLATE = {
    "overallScore": {"compliance": 78, "maturity": 3.2, "risk": "Medium"},
    "alignmentAreas": [
        {
            "category": "Data Security",
            "alignmentScore": {"compliance": 85, "maturity": 3.8, "risk": "Low"},
            "details": "Strong alignment in data security policies and controls",
            "matchedItems": [
                {"companyDocIndex": 0, "requirement": "Data Encryption", "implementation": "Encryption Policy"},
                {"companyDocIndex": 1, "requirement": "Access Controls", "implementation": "Role-based Access Control"}
            ]
        },
        {
            "category": "Data Subject Rights",
            "alignmentScore": {"compliance": 60, "maturity": 2.5, "risk": "Medium"},
            "details": "Partial alignment with data subject rights requirements",
            "matchedItems": [
                {"companyDocIndex": 0, "requirement": "Right to Access", "implementation": "Data Subject Access Request Process"}
            ]
        }
    ],
    "gapAreas": [
        {
            "category": "Breach Notification",
            "priority": "High",
            "details": "Gap in breach notification timeline requirements",
            "requirements": [
                {
                    "requirement": "72-hour Notification Timeline",
                    "recommendation": "Update incident response policy to include 72-hour notification requirement"
                }
            ]
        },
        {
            "category": "Data Transfer",
            "priority": "Medium",
            "details": "International data transfer safeguards not adequately addressed",
            "requirements": [
                {
                    "requirement": "Cross-border Data Transfer Safeguards",
                    "recommendation": "Develop policy specific to international data transfers"
                }
            ]
        }
    ],
    "recommendations": [
        "Update incident response policy to include 72-hour breach notification timeline",
        "Develop international data transfer policy",
        "Enhance data subject rights implementation, especially for deletion requests",
        "Consider third-party risk assessment program"
    ]
}
