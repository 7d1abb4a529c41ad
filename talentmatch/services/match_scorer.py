"""
Match Scorer Gateway - job/candidate fit scoring via the OpenAI API.

The gateway turns a (job text, candidate text) pair into a normalized
ScoreResult. It never raises: every oracle failure (network, quota, auth,
overload, malformed JSON) collapses into score 0 with a Hebrew explanation
and a typed OracleErrorKind, so callers can treat every pair the same way.

A score of 0 therefore means either "poor fit" or "scorer unavailable";
the two are only distinguishable through ``error_kind`` on the in-memory
result, never in stored matches.
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from openai import OpenAI
from pydantic import BaseModel, Field, ValidationError, field_validator

from talentmatch.core.config import Settings

logger = logging.getLogger(__name__)


class OracleErrorKind(str, enum.Enum):
    """Why a scoring call produced no usable score."""
    QUOTA_EXHAUSTED = "QUOTA_EXHAUSTED"
    AUTHENTICATION = "AUTHENTICATION"
    OVERLOADED = "OVERLOADED"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    MISSING_API_KEY = "MISSING_API_KEY"
    UNKNOWN = "UNKNOWN"


class MalformedOracleResponse(Exception):
    """The oracle answered, but not with the JSON object we asked for."""
    pass


# Substrings looked for in the oracle's raw error text, checked in this order
_QUOTA_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")
_AUTH_MARKERS = ("401", "UNAUTHENTICATED", "API key", "cred")
_OVERLOAD_MARKERS = ("503", "overloaded")

_FAILURE_MESSAGES = {
    OracleErrorKind.QUOTA_EXHAUSTED: "⚠️ שגיאת מערכת: הגעת למכסת השימוש (Quota Exceeded). המערכת עמוסה, אנא נסה שוב בעוד דקה.",
    OracleErrorKind.AUTHENTICATION: "⚠️ שגיאת הרשאה: מפתח ה-API אינו תקין או שאינו מוגדר. בדוק את קובץ ה-Env.",
    OracleErrorKind.OVERLOADED: "⚠️ שגיאת מערכת: השרת עמוס כרגע. אנא נסה שוב מאוחר יותר.",
    OracleErrorKind.MALFORMED_RESPONSE: "⚠️ שגיאה: התשובה ממודל ה-AI אינה בפורמט תקין.",
    OracleErrorKind.MISSING_API_KEY: "⚠️ שגיאת הרשאה: מפתח ה-API אינו מוגדר.",
}


def describe_error(exc: Optional[BaseException]) -> str:
    """Readable one-line text for an arbitrary exception."""
    if exc is None:
        return "Unknown Error"
    message = str(exc).strip()
    return message or exc.__class__.__name__


def classify_oracle_error(exc: BaseException) -> OracleErrorKind:
    """
    Translate an opaque transport/SDK error into a typed error kind.

    This is the only place that inspects error text. Parse and schema
    failures are typed directly; everything else is matched on substrings
    of the error message.
    """
    if isinstance(exc, (json.JSONDecodeError, MalformedOracleResponse, ValidationError)):
        return OracleErrorKind.MALFORMED_RESPONSE

    message = describe_error(exc)
    if any(marker in message for marker in _QUOTA_MARKERS):
        return OracleErrorKind.QUOTA_EXHAUSTED
    if any(marker in message for marker in _AUTH_MARKERS):
        return OracleErrorKind.AUTHENTICATION
    if any(marker in message for marker in _OVERLOAD_MARKERS):
        return OracleErrorKind.OVERLOADED
    return OracleErrorKind.UNKNOWN


def failure_reasoning(kind: OracleErrorKind, exc: Optional[BaseException] = None) -> str:
    """User-facing (Hebrew) explanation stored in place of a real reasoning."""
    if kind in _FAILURE_MESSAGES:
        return _FAILURE_MESSAGES[kind]
    return f"⚠️ שגיאה: {describe_error(exc)}"


@dataclass(frozen=True)
class ScoreResult:
    score: int
    reasoning: str
    error_kind: Optional[OracleErrorKind] = None

    @property
    def failed(self) -> bool:
        return self.error_kind is not None


@dataclass(frozen=True)
class DualScoreResult(ScoreResult):
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)


class OracleMatchPayload(BaseModel):
    """JSON object the oracle must return for a match request."""
    # NaN and Infinity are valid JSON to json.loads but not a usable score
    score: float = Field(allow_inf_nan=False)
    reasoning: str

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return max(0.0, min(100.0, v))


class OracleDualPayload(OracleMatchPayload):
    pros: List[str] = []
    cons: List[str] = []


MATCH_SYSTEM_PROMPT = """You are an expert HR Recruiter.
You score how well a candidate fits a job posting. Be consistent: the same
inputs must always receive the same score.

Output strictly valid JSON:
{
    "score": (integer 0-100 indicating the fit),
    "reasoning": "A concise 1-sentence summary in Hebrew"
}"""

DUAL_SYSTEM_PROMPT = """You are a senior HR AI.
1. ANALYZE the Job Requirements.
2. ANALYZE the Candidate's skills and experience.
3. COMPARE them.

Output strictly valid JSON:
{
    "score": (integer 0-100),
    "reasoning": "Short explanation in Hebrew",
    "pros": ["strength in Hebrew", "..."],
    "cons": ["gap in Hebrew", "..."]
}"""


def build_match_prompt(job_text: str, candidate_text: str) -> str:
    return f"""Analyze the match between the following Job Description and Candidate Resume.

JOB DESCRIPTION:
{job_text}

--------------------------------------------------------
CANDIDATE RESUME SUMMARY:
{candidate_text}

--------------------------------------------------------
Return the JSON object described in your instructions."""


def build_dual_prompt(job_text: str, candidate_text: str) -> str:
    return f"""Analyze the compatibility between the Job Description and the Candidate Resume provided below.

--- JOB DESCRIPTION SOURCE ---
Job Text: {job_text}

--- CANDIDATE RESUME SOURCE ---
Resume Text: {candidate_text}

Return the JSON object described in your instructions."""


class MatchScorer:
    """
    Gateway to the scoring oracle.

    Holds one OpenAI client for the lifetime of the application; create it in
    the app lifespan and close it on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.2,
        client: Optional[OpenAI] = None
    ):
        self.model = model
        self.temperature = temperature
        if client is not None:
            self._client = client
        elif api_key:
            self._client = OpenAI(api_key=api_key)
        else:
            self._client = None
            logger.warning("OPENAI_API_KEY is not set; every match will score 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "MatchScorer":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def _complete(self, system_prompt: str, user_prompt: str, model: Optional[str]) -> dict:
        response = self._client.chat.completions.create(
            model=model or self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            response_format={"type": "json_object"},
            temperature=self.temperature
        )

        content = response.choices[0].message.content
        if not content:
            raise MalformedOracleResponse("Empty response from OpenAI")
        return json.loads(content)

    def score(self, job_text: str, candidate_text: str, model: Optional[str] = None) -> ScoreResult:
        """
        Score one (job, candidate) pair.

        Args:
            job_text: Job description sent verbatim
            candidate_text: Resume/profile text sent verbatim
            model: Optional model override for this call

        Returns:
            ScoreResult with an int score in [0, 100]; score 0 and an
            error_kind when the oracle could not be used.
        """
        if self._client is None:
            kind = OracleErrorKind.MISSING_API_KEY
            return ScoreResult(score=0, reasoning=failure_reasoning(kind), error_kind=kind)

        try:
            data = self._complete(MATCH_SYSTEM_PROMPT, build_match_prompt(job_text, candidate_text), model)
            payload = OracleMatchPayload.model_validate(data)
        except Exception as e:
            kind = classify_oracle_error(e)
            logger.warning(f"Match analysis failed ({kind.value}): {describe_error(e)}")
            return ScoreResult(score=0, reasoning=failure_reasoning(kind, e), error_kind=kind)

        return ScoreResult(score=int(round(payload.score)), reasoning=payload.reasoning)

    def score_with_insights(self, job_text: str, candidate_text: str, model: Optional[str] = None) -> DualScoreResult:
        """
        Score a pair and also ask for strengths and gaps.

        Same degradation contract as score(); pros/cons are empty on failure.
        """
        if self._client is None:
            kind = OracleErrorKind.MISSING_API_KEY
            return DualScoreResult(score=0, reasoning=failure_reasoning(kind), error_kind=kind)

        try:
            data = self._complete(DUAL_SYSTEM_PROMPT, build_dual_prompt(job_text, candidate_text), model)
            payload = OracleDualPayload.model_validate(data)
        except Exception as e:
            kind = classify_oracle_error(e)
            logger.warning(f"Dual match analysis failed ({kind.value}): {describe_error(e)}")
            return DualScoreResult(score=0, reasoning=failure_reasoning(kind, e), error_kind=kind)

        return DualScoreResult(
            score=int(round(payload.score)),
            reasoning=payload.reasoning,
            pros=list(payload.pros),
            cons=list(payload.cons),
        )
