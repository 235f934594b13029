CONTRACT_REVIEW_TEMPLATE = {
    "overallRiskScore": 7.2,
    "complianceStatus": "Needs Review",
    "complianceIssues": [
        {
            "clause": "Section 4.2",
            "issue": "Data retention policy does not specify duration for personal data storage",
            "regulation": "GDPR Article 5(1)(e)",
            "severity": "High",
            "recommendation": "Specify clear time limits for storage of different data categories"
        },
        {
            "clause": "Section 7.1",
            "issue": "Vague language regarding disclosure to third parties",
            "regulation": "CCPA Section 1798.100",
            "severity": "Medium",
            "recommendation": "Clearly identify categories of third parties and purpose of data sharing"
        },
        {
            "clause": "Section 12",
            "issue": "Breach notification timeline exceeds regulatory requirement",
            "regulation": "GDPR Article 33",
            "severity": "Medium",
            "recommendation": "Reduce notification timeline from 7 days to 72 hours"
        }
    ],
    "sourceCitations": [
        "GDPR Article 5",
        "GDPR Article 33",
        "CCPA Section 1798.100"
    ]
}
