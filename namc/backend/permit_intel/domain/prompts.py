# permit_intel/domain/prompts.py
from __future__ import annotations

from .types import ContractorProfile, Permit, ProjectEstimateInput

NOT_SPECIFIED = "Not specified"

CHAT_SYSTEM_PROMPT = """You are a knowledgeable construction industry assistant specializing in helping NAMC (National Association of Minority Contractors) members with:

- Construction project analysis and planning
- Permit requirements and building codes
- Cost estimation and budgeting
- Project management and scheduling
- Business development and bidding strategies
- Industry best practices and standards
- Regulatory compliance and safety requirements

Provide practical, actionable advice based on construction industry expertise. Be concise but thorough, and always consider the unique challenges and opportunities facing minority-owned construction businesses."""


def format_money(value: float | None) -> str:
    if value is None:
        return NOT_SPECIFIED
    if float(value).is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}"


def _join(items: tuple[str, ...] | list[str], empty: str = NOT_SPECIFIED) -> str:
    return ", ".join(items) if items else empty


def _profile_block(profile: ContractorProfile | None, *, with_certifications: bool = True) -> str:
    if profile is None:
        return ""
    lines = [
        "CONTRACTOR PROFILE:",
        f"- Specialties: {_join(profile.specialties)}",
        f"- Service Areas: {_join(profile.service_areas)}",
        f"- Team Size: {profile.team_size if profile.team_size else NOT_SPECIFIED}",
    ]
    if with_certifications:
        lines.append(f"- Certifications: {_join(profile.certifications)}")
    return "\n" + "\n".join(lines) + "\n"


def permit_analysis_prompt(permit: Permit, profile: ContractorProfile | None = None) -> str:
    a = permit.address
    contractor = permit.contractor.name if permit.contractor and permit.contractor.name else NOT_SPECIFIED
    owner = permit.owner.name if permit.owner and permit.owner.name else NOT_SPECIFIED

    return f"""You are an expert construction industry analyst. Analyze this building permit and provide insights for construction contractors.

PERMIT DETAILS:
- Permit Number: {permit.permit_number}
- Type: {permit.permit_type}
- Description: {permit.description}
- Valuation: {format_money(permit.valuation)}
- Location: {a.street}, {a.city}, {a.state} {a.zip}
- Contractor: {contractor}
- Owner: {owner}
{_profile_block(profile)}
Please provide a comprehensive analysis in JSON format with the following structure:
{{
  "opportunityScore": number (0-1, how good this opportunity is),
  "complexityScore": number (0-1, how complex the project is),
  "riskFactors": string[] (potential risks and challenges),
  "projectComplexity": "LOW" | "MEDIUM" | "HIGH",
  "competitionLevel": "LOW" | "MEDIUM" | "HIGH",
  "timelineEstimate": number (estimated days to complete),
  "keyRequirements": string[] (main requirements and scope items),
  "recommendations": string[] (actionable advice for the contractor),
  "costRangeEstimate": {{
    "low": number,
    "high": number,
    "confidence": number (0-1)
  }}
}}

Consider factors like:
- Project scope and complexity
- Market conditions in {a.city}, {a.state}
- Permit type and requirements
- Competition likely for this type of work
- Timeline based on project size and complexity
- Regulatory requirements and approvals needed"""


def cost_estimate_prompt(project: ProjectEstimateInput, profile: ContractorProfile | None = None) -> str:
    return f"""You are an expert construction cost estimator. Provide a detailed cost estimate for this construction project.

PROJECT DETAILS:
- Description: {project.description}
- Location: {project.location}
- Type: {project.project_type}
- Scope: {_join(project.scope)}
- Timeline: {project.timeline or NOT_SPECIFIED}
- Special Requirements: {_join(project.special_requirements, empty="None specified")}
{_profile_block(profile, with_certifications=False)}
Provide a comprehensive cost estimate in JSON format:
{{
  "totalEstimate": number,
  "breakdown": [
    {{
      "category": string,
      "amount": number,
      "percentage": number
    }}
  ],
  "confidenceLevel": number (0-1),
  "riskFactors": string[],
  "recommendations": string[],
  "assumptions": string[],
  "timeline": {{
    "phases": [
      {{
        "name": string,
        "duration": number (days),
        "cost": number
      }}
    ],
    "totalDuration": number
  }}
}}

Consider current market rates in {project.location}, material costs, labor costs, permits, and overhead. Break down costs by major categories like materials, labor, permits, equipment, and overhead."""


def opportunity_match_prompt(permit: Permit, profile: ContractorProfile) -> str:
    a = permit.address
    return f"""You are an expert at matching construction opportunities to contractor capabilities. Evaluate how well this permit matches the contractor's profile.

PERMIT DETAILS:
- Type: {permit.permit_type}
- Description: {permit.description}
- Valuation: {format_money(permit.valuation)}
- Location: {a.city}, {a.state}
{_profile_block(profile)}
Provide a match analysis in JSON format:
{{
  "matchScore": number (0-1, overall fit),
  "strengths": string[] (why this is a good match),
  "challenges": string[] (potential obstacles or gaps),
  "recommendations": string[] (how to improve chances of success),
  "conversionProbability": number (0-1, likelihood of winning the project)
}}

Consider:
- Specialty alignment with project requirements
- Geographic proximity and service area coverage
- Team capacity and project size
- Past experience with similar projects
- Competitive advantages
- Market conditions and competition level"""


def permit_to_project(permit: Permit) -> ProjectEstimateInput:
    """Cost prompts take a project; a permit's description doubles as its scope."""
    return ProjectEstimateInput(
        description=permit.description,
        location=f"{permit.address.city}, {permit.address.state}",
        project_type=permit.permit_type,
        scope=(permit.description,),
    )
