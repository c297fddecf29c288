from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from typing import List, Optional

# -------- Request side --------

class ResumeUpload(BaseModel):
    name: str
    content_type: Optional[str] = None
    data: bytes = b""

class ResumeDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    extracted_text: str

# -------- Model output --------
# Strict, frozen and closed: whatever the LLM sends back is checked as-is, never coerced.

class CandidateMatch(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True, extra="forbid", populate_by_name=True)

    candidate_name: StrictStr = Field(alias="candidateName", description="Name extracted from resume")
    match_score: StrictInt = Field(alias="matchScore", ge=0, le=100, description="Match score as a percentage")
    key_strengths: List[StrictStr] = Field(alias="keyStrengths", description="Key strengths that match the job requirements")
    gaps_identified: List[StrictStr] = Field(alias="gapsIdentified", description="Skills or experience gaps compared to job requirements")
    recommendation: StrictStr = Field(description="Brief recommendation for this candidate")

class ScreeningResult(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True, extra="forbid", populate_by_name=True)

    matches: List[CandidateMatch] = Field(description="Candidate matches in the order the model returned them")
    summary: StrictStr = Field(description="Overall summary of the screening results and top candidates")
    comparison_analysis: StrictStr = Field(alias="comparisonAnalysis", description="Comparison of candidates against each other and the job requirements")

# -------- Ranking --------

class RankedMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    match: CandidateMatch
    is_top_match: bool
