import json

from models import Idea

CATEGORIES = [
    "FinTech",
    "HealthTech",
    "EdTech",
    "E-commerce",
    "SaaS",
    "AI/ML",
    "Sustainability",
    "Social Media",
    "Gaming",
    "Food & Beverage",
]

IDEA_FIELDS = ["title", "description", "category", "targetMarket", "problem", "solution"]

CRITERIA_FIELDS = [
    "marketSize",
    "competition",
    "feasibility",
    "profitability",
    "innovation",
    "timeToMarket",
]

EVALUATION_FIELDS = CRITERIA_FIELDS + [
    "overallScore",
    "strengths",
    "weaknesses",
    "recommendations",
    "marketAnalysis",
    "riskAssessment",
]

SYSTEM_PROMPT = """
You are a startup analyst working for an early-stage venture studio.
You generate and assess startup ideas for technical founders.

Rules:
- Answer with a single JSON object and nothing else.
- Use exactly the keys shown in the requested format.
- Keep every text value short and concrete.
- Base your judgment on real-world business logic.
"""


def _clean_category(category: str | None) -> str:
    return (category or "").strip()


def build_idea_prompt(category: str | None = None) -> str:
    """
    Prompt asking for one startup idea, optionally pinned to a category.
    """
    category = _clean_category(category)
    category_prompt = f"in the {category} category" if category else "in any innovative category"

    return f"""Generate a startup idea {category_prompt}. Respond with valid JSON only:

{{
  "title": "Startup name",
  "description": "Brief description",
  "category": {json.dumps(category or "Innovation")},
  "targetMarket": "Target market",
  "problem": "Problem solved",
  "solution": "Solution provided"
}}"""


def build_evaluation_prompt(idea: Idea) -> str:
    """
    Prompt asking for a six-criteria evaluation of ``idea``.
    The weighting behind overallScore is left to the model.
    """
    return f"""Evaluate this startup idea comprehensively. Respond with valid JSON only:

Startup Idea:
- Title: {idea.title}
- Description: {idea.description}
- Category: {idea.category}
- Target Market: {idea.target_market}
- Problem: {idea.problem}
- Solution: {idea.solution}

Provide a detailed evaluation in this exact JSON format:

{{
  "marketSize": 4,
  "competition": 3,
  "feasibility": 5,
  "profitability": 4,
  "innovation": 5,
  "timeToMarket": 3,
  "overallScore": 85,
  "strengths": ["Unique value proposition", "Large addressable market", "Strong technical feasibility"],
  "weaknesses": ["High competition", "Long development time", "Regulatory challenges"],
  "recommendations": ["Focus on MVP development", "Conduct market research", "Build strategic partnerships"],
  "marketAnalysis": "Detailed analysis of the market opportunity, size, and trends",
  "riskAssessment": "Key risks and mitigation strategies"
}}

Rate each criterion from 1-5 where:
- marketSize: 1=Very Small, 5=Huge Market
- competition: 1=No Competition, 5=Highly Competitive
- feasibility: 1=Very Difficult, 5=Highly Feasible
- profitability: 1=Low Profit, 5=High Profit Potential
- innovation: 1=Not Innovative, 5=Highly Innovative
- timeToMarket: 1=Very Long, 5=Very Quick

Calculate overallScore as percentage (0-100) based on weighted average of all criteria.
reminder : Return a JSON object only, no text before or after."""
