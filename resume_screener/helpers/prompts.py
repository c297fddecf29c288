from typing import Sequence

from resume_screener.models.models import ResumeDocument

SCREENING_PROMPT = """You are an expert HR recruiter analyzing resumes against job requirements.

Job Description:
{job_description}

Resumes to analyze:
{resumes}

Analyze each resume and provide:
1. A match score (0-100) based on how well the candidate fits the job requirements
2. Key strengths that align with the job
3. Identified gaps or missing qualifications
4. A brief recommendation

Then provide a detailed comparison analysis showing:
- Which candidate is the best fit overall
- How candidates differ in key competencies
- Specific strengths and weaknesses of each candidate relative to others
- Whether this is a clear winner or if candidates are comparable

Return the analysis as a JSON object with the following structure:
{{
  "matches": [
    {{
      "candidateName": "string",
      "matchScore": number,
      "keyStrengths": ["string"],
      "gapsIdentified": ["string"],
      "recommendation": "string"
    }}
  ],
  "summary": "string with overall summary",
  "comparisonAnalysis": "detailed comparison of all candidates"
}}

Focus on practical matches and be honest about gaps. The summary should highlight the top candidates. The comparison should clearly indicate who is the strongest candidate for this role.
"""

RESUME_BLOCK = "\n--- Resume {index}: {name} ---\n{text}"


def build_screening_prompt(job_description: str, documents: Sequence[ResumeDocument]) -> str:
    resumes = "\n".join(
        RESUME_BLOCK.format(index=i, name=doc.name, text=doc.extracted_text)
        for i, doc in enumerate(documents, start=1)
    )
    return SCREENING_PROMPT.format(job_description=job_description, resumes=resumes)
