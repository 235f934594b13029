CONTROL_TEMPLATE = {
    "defaults": {
        "controlType": "preventive",
        "riskCategory": "Data Protection",
        "subject": "organizational data"
    },
    "implementation": [
        {"step": "Designate Control Owner", "description": "Assign a senior leader responsible for this control"},
        {"step": "Define Metrics", "description": "Establish key metrics to measure control effectiveness"},
        {"step": "Develop Procedures", "description": "Create detailed procedures for control execution"},
        {"step": "Training", "description": "Train all relevant personnel on control procedures"},
        {"step": "Testing", "description": "Conduct regular testing to verify control effectiveness"}
    ],
    "testingProcedures": [
        "Quarterly review of {control_type} measures",
        "Annual third-party assessment",
        "Ongoing monitoring through automated tools",
        "Regular compliance checks against referenced policies"
    ],
    "relevantSections": ["Section 3.2", "Section 4.5"]
}
