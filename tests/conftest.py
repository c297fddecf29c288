import os

os.environ.setdefault("ENVIRONMENT", "testing")

import json
import pytest

from resume_screener.models.ai_settings import LLMSettings


class CannedCompletionClient:
    """Completion client returning fixed text and recording every call"""

    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    def complete(self, prompt, options):
        self.calls.append((prompt, options))
        if self.error is not None:
            raise self.error
        return self.text


def screening_payload(*matches, summary="Summary", comparison="Comparison"):
    return {"matches": list(matches), "summary": summary, "comparisonAnalysis": comparison}


def candidate(name, score, strengths=None, gaps=None, recommendation="Consider"):
    return {
        "candidateName": name,
        "matchScore": score,
        "keyStrengths": strengths if strengths is not None else ["Relevant experience"],
        "gapsIdentified": gaps if gaps is not None else [],
        "recommendation": recommendation,
    }


GO_KAFKA_RESPONSE = """Here is my analysis of the two candidates.

```json
%s
```

Let me know if you need anything else.""" % json.dumps(screening_payload(
    candidate(
        "Jane Backend", 88,
        strengths=["6 years of Go", "Kafka-based distributed systems", "Production on-call ownership"],
        gaps=["No Kubernetes mentioned"],
        recommendation="Strongly recommend for interview",
    ),
    candidate(
        "Sam Frontend", 22,
        strengths=["Solid React skills"],
        gaps=["Limited backend experience", "No Go experience", "Only 1 year of experience"],
        recommendation="Not a fit for this role",
    ),
    summary="Jane Backend is the clear top candidate.",
    comparison="Jane Backend is the strongest candidate overall; Sam Frontend lacks backend depth.",
), indent=2)


@pytest.fixture
def settings():
    return LLMSettings(api_key="test-key", timeout=5)


@pytest.fixture
def make_client():
    return CannedCompletionClient


@pytest.fixture
def payload_factory():
    return screening_payload


@pytest.fixture
def candidate_factory():
    return candidate


@pytest.fixture
def go_kafka_response():
    return GO_KAFKA_RESPONSE
