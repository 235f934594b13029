import copy
import json
from typing import Dict, Optional
from app.models.document import Document
from app.templates.alignment_template import ALIGNMENT_TEMPLATE
from app.templates.comparison_template import COMPARISON_TEMPLATE
from app.templates.contract_review_template import CONTRACT_REVIEW_TEMPLATE
from app.templates.control_template import CONTROL_TEMPLATE
from app.templates.policy_template import POLICY_IMPLEMENTATION, POLICY_REQUIREMENTS, POLICY_TEMPLATE


def document_ref(doc: Document, *fields: str) -> Dict:
    ref = {"id": doc.id, "name": doc.name}
    for field in fields:
        value = getattr(doc, field)
        ref[field] = value.value if hasattr(value, "value") else value
    return ref


class ComplianceAnalyzer:
    """Builds the sample analysis payloads returned by the AI feature endpoints."""

    def __init__(self):
        self.templates = {
            "alignment": ALIGNMENT_TEMPLATE,
            "comparison": COMPARISON_TEMPLATE,
            "contract": CONTRACT_REVIEW_TEMPLATE,
            "control": CONTROL_TEMPLATE,
            "policy": POLICY_TEMPLATE,
        }

    def review_contract(self, contract: Document, regulations: list[Document]) -> Dict:
        template = copy.deepcopy(self.templates["contract"])
        template.pop("sourceCitations")
        template["regulatoryReferences"] = [
            {**document_ref(doc), "relevance": "High"} for doc in regulations
        ]
        return template

    def contract_citations(self) -> list[str]:
        return list(self.templates["contract"]["sourceCitations"])

    def compare(self, documents: list[Document], comparison_type: str) -> Dict:
        template = self.templates["comparison"]
        ids = [doc.id for doc in documents]

        similarities = []
        if comparison_type != "differences":
            for item in template["similarities"]:
                similarities.append({
                    "aspect": item["aspect"],
                    "description": item["description"],
                    "sections": [
                        {"documentId": doc_id, "section": section}
                        for doc_id, section in zip(ids, item["sections"])
                    ],
                })

        differences = []
        if comparison_type != "similarities":
            for item in template["differences"]:
                differences.append({
                    "aspect": item["aspect"],
                    "description": item["description"],
                    "details": [
                        {"documentId": doc_id, "detail": detail}
                        for doc_id, detail in zip(ids, item["details"])
                    ],
                })

        return {
            "documentDetails": [document_ref(doc, "type", "jurisdiction") for doc in documents],
            "similarities": similarities,
            "differences": differences,
            "summary": template["summary"].format(first=documents[0].name, second=documents[1].name),
        }

    def draft_policy(
        self,
        name: str,
        regulations: list[Document],
        industry: Optional[str] = None,
        company_size: Optional[str] = None,
        content_requirements: Optional[str] = None,
    ) -> str:
        template = self.templates["policy"]
        names = ", ".join(doc.name for doc in regulations)
        purpose = f"This policy establishes guidelines for compliance with {names}"
        if industry:
            purpose += f" in the {industry} industry"
        if company_size:
            purpose += f" for {company_size} organizations"

        background = []
        for doc in regulations:
            section = f"### {doc.name}\n"
            if doc.jurisdiction:
                section += f"Jurisdiction: {doc.jurisdiction}\n"
            section += "This regulation covers key requirements for data protection and privacy."
            background.append(section)

        sections = {
            "title": name,
            "purpose": purpose + ".",
            "scope": (
                "This policy applies to all employees, contractors, and third-party vendors "
                "who have access to company systems and data."
            ),
            "regulatory_background": "\n\n".join(background),
            "requirements": POLICY_REQUIREMENTS,
            "implementation": POLICY_IMPLEMENTATION,
            "additional_requirements": (
                f"\n## Additional Requirements\n{content_requirements}\n" if content_requirements else ""
            ),
            "effective_date": "This policy is effective immediately upon approval.",
            "review_cycle": "This policy will be reviewed annually or upon significant regulatory changes.",
        }
        missing = [s for s in template["structure"] if s not in sections]
        if missing:
            raise ValueError(f"Policy sections missing: {', '.join(missing)}")
        return template["format"].format(**sections)

    def design_control(
        self,
        name: str,
        policies: list[Document],
        risk_category: Optional[str] = None,
        control_type: Optional[str] = None,
    ) -> Dict:
        template = self.templates["control"]
        defaults = template["defaults"]
        control_type = control_type or defaults["controlType"]
        subject = risk_category or defaults["subject"]
        policy_names = ", ".join(doc.name for doc in policies)

        return {
            "name": name,
            "controlType": control_type,
            "riskCategory": risk_category or defaults["riskCategory"],
            "description": (
                f"This control provides safeguards for {subject} based on requirements in {policy_names}."
            ),
            "objective": f"To ensure the protection of {subject} through {control_type} measures.",
            "implementation": copy.deepcopy(template["implementation"]),
            "testingProcedures": [
                step.format(control_type=control_type) for step in template["testingProcedures"]
            ],
            "referencedPolicies": [
                {**document_ref(doc), "relevantSections": list(template["relevantSections"])}
                for doc in policies
            ],
        }

    def analyze_alignment(
        self,
        frameworks: list[Document],
        company_documents: list[Document],
        analysis_type: str,
    ) -> Dict:
        template = self.templates["alignment"]
        framework_id = frameworks[0].id if frameworks else None

        def company_doc_id(index: int) -> Optional[str]:
            return company_documents[index].id if index < len(company_documents) else None

        alignment_areas = []
        for area in template["alignmentAreas"]:
            alignment_areas.append({
                "category": area["category"],
                "alignmentScore": area["alignmentScore"][analysis_type],
                "details": area["details"],
                "matchedItems": [
                    {
                        "frameworkId": framework_id,
                        "requirement": item["requirement"],
                        "companyDocId": company_doc_id(item["companyDocIndex"]),
                        "implementation": item["implementation"],
                    }
                    for item in area["matchedItems"]
                ],
            })

        gap_areas = []
        for gap in template["gapAreas"]:
            gap_areas.append({
                "category": gap["category"],
                "priority": gap["priority"],
                "details": gap["details"],
                "requirements": [
                    {"frameworkId": framework_id, **requirement} for requirement in gap["requirements"]
                ],
            })

        return {
            "analysisType": analysis_type,
            "overallScore": template["overallScore"][analysis_type],
            "frameworks": [document_ref(doc, "jurisdiction") for doc in frameworks],
            "companyDocuments": [document_ref(doc, "type") for doc in company_documents],
            "alignmentAreas": alignment_areas,
            "gapAreas": gap_areas,
            "recommendations": list(template["recommendations"]),
        }

    @staticmethod
    def encode(payload: Dict) -> str:
        return json.dumps(payload)
