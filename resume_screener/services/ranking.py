import csv
from datetime import date
from pathlib import Path
from typing import List, Optional

import pandas as pd

from resume_screener.models.models import CandidateMatch, RankedMatch, ScreeningResult

TOP_MATCH_THRESHOLD = 80
LIST_DELIMITER = "; "
CSV_COLUMNS = ["Rank", "Candidate Name", "Match Score", "Key Strengths", "Gaps Identified", "Recommendation"]


def is_top_match(match: CandidateMatch) -> bool:
    return match.match_score >= TOP_MATCH_THRESHOLD


def rank_matches(result: ScreeningResult) -> List[RankedMatch]:
    # sorted() is stable: equal scores keep the model's order
    ordered = sorted(result.matches, key=lambda m: m.match_score, reverse=True)
    return [
        RankedMatch(rank=i, match=m, is_top_match=is_top_match(m))
        for i, m in enumerate(ordered, start=1)
    ]


def export_filename(on: Optional[date] = None) -> str:
    on = on or date.today()
    return f"resume-screening-results-{on.isoformat()}.csv"


def ranked_frame(ranked: List[RankedMatch]) -> pd.DataFrame:
    data = [{
        "Rank": r.rank,
        "Candidate Name": r.match.candidate_name,
        "Match Score": f"{r.match.match_score}%",
        "Key Strengths": LIST_DELIMITER.join(r.match.key_strengths),
        "Gaps Identified": LIST_DELIMITER.join(r.match.gaps_identified),
        "Recommendation": r.match.recommendation,
    } for r in ranked]
    return pd.DataFrame(data, columns=CSV_COLUMNS)


def matches_to_csv(ranked: List[RankedMatch]) -> str:
    """Every cell quoted; embedded quotes are doubled."""
    return ranked_frame(ranked).to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def write_csv_report(result: ScreeningResult, report_dir: str, on: Optional[date] = None) -> Path:
    Path(report_dir).mkdir(parents=True, exist_ok=True)
    path = Path(report_dir) / export_filename(on)
    path.write_text(matches_to_csv(rank_matches(result)), encoding="utf-8")
    return path


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_markdown(result: ScreeningResult) -> str:
    ranked = rank_matches(result)
    md_lines = ["# Resume Screening - Candidate Rankings", ""]
    summary = result.summary.strip()
    md_lines.append(f"**Summary**: {summary}\n" if summary else "*(No summary available)*\n")

    if ranked:
        md_lines += [
            "| Rank | Candidate | Score | Top Match |",
            "|---:|---|---:|---|",
        ]
        for r in ranked:
            badge = "yes" if r.is_top_match else ""
            md_lines.append(f"| {r.rank} | {_cell(r.match.candidate_name)} | {r.match.match_score}% | {badge} |")
        md_lines.append("\n---\nDetails:")
        for r in ranked:
            m = r.match
            md_lines.append(f"\n## {r.rank}. {m.candidate_name} ({m.match_score}%)")
            md_lines.append(f"- **Strengths**: {LIST_DELIMITER.join(m.key_strengths) or 'none listed'}")
            md_lines.append(f"- **Gaps**: {LIST_DELIMITER.join(m.gaps_identified) or 'none identified'}")
            md_lines.append(f"- **Recommendation**: {m.recommendation}")
    else:
        md_lines.append("> No candidates were returned.\n")

    comparison = result.comparison_analysis.strip()
    if comparison:
        md_lines += ["\n---\n## Comparison", comparison]
    return "\n".join(md_lines) + "\n"
