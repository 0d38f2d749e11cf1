from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Idea(CamelModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str
    category: str
    target_market: str = Field(alias="targetMarket")
    problem: str
    solution: str


class Evaluation(CamelModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    idea_id: Optional[str] = Field(default=None, alias="ideaId")
    market_size: int = Field(ge=1, le=5, alias="marketSize")
    competition: int = Field(ge=1, le=5)
    feasibility: int = Field(ge=1, le=5)
    profitability: int = Field(ge=1, le=5)
    innovation: int = Field(ge=1, le=5)
    time_to_market: int = Field(ge=1, le=5, alias="timeToMarket")
    overall_score: int = Field(ge=0, le=100, alias="overallScore")
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]
    market_analysis: str = Field(alias="marketAnalysis")
    risk_assessment: str = Field(alias="riskAssessment")


class ScoreSummary(CamelModel):
    label: str
    band: str
    reference_score: int = Field(ge=0, le=100, alias="referenceScore")
    criteria_bands: Dict[str, str] = Field(alias="criteriaBands")


class SessionSnapshot(CamelModel):
    configured: bool
    idea: Optional[Idea] = None
    evaluation: Optional[Evaluation] = None
    score: Optional[ScoreSummary] = None
    generating: bool = False
    evaluating: bool = False
    error: Optional[str] = None
    diagnostic: Optional[str] = None


class IdeaRequest(CamelModel):
    category: Optional[str] = None


class CredentialInput(CamelModel):
    api_key: str = Field(alias="apiKey")


class CredentialStatus(CamelModel):
    configured: bool
    warning: Optional[str] = None


class ConnectionCheckResponse(CamelModel):
    success: bool
    message: str
    details: Dict[str, Optional[str]] = {}


class CategoryListResponse(CamelModel):
    categories: List[str]
