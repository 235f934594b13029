POLICY_TEMPLATE = {
    "structure": [
        "title",
        "purpose",
        "scope",
        "regulatory_background",
        "requirements",
        "implementation",
        "additional_requirements",
        "effective_date",
        "review_cycle"
    ],
    "format": """# {title}

## Policy Purpose
{purpose}

## Scope
{scope}

## Regulatory Background
{regulatory_background}

## Policy Requirements
{requirements}

## Implementation Guidelines
{implementation}
{additional_requirements}
## Effective Date
{effective_date}

## Review Cycle
{review_cycle}
"""
}

POLICY_REQUIREMENTS = """### Data Collection and Processing
1. All data collection must have a lawful basis
2. Data minimization principles must be applied
3. Purpose limitation must be clearly defined

### Data Security
1. All sensitive data must be encrypted at rest and in transit
2. Access controls must implement least privilege principles
3. Regular security assessments must be conducted

### Individual Rights
1. Procedures must be established for data access requests
2. Individuals have the right to correct inaccurate data
3. Data deletion requests must be honored within 30 days"""

POLICY_IMPLEMENTATION = """1. Department heads are responsible for policy implementation
2. Annual training is required for all staff
3. Compliance audits will be conducted quarterly"""
