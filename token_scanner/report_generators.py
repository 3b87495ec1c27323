"""
Report generation utilities for different output formats.
"""

import os
import re
import json
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, List

from jinja2 import Template

from .config import BOLD, RESET, GREY, GREEN, YELLOW, RED
from .git_analysis import summarize_token_changes
from .models import CommitInfo, ScanResult
from .utils import log, remove_ansi_colors

TOP_TOKENS_LIMIT = 10

# =============================================================================
# REPORT ASSEMBLY
# =============================================================================

def summarize_results(results: List[ScanResult]) -> Dict[str, Any]:
    """
    Cross-repository summary: files, average coverage, usage by category and
    team, and the most used tokens.
    """
    all_tokens = [token for result in results for token in result.tokens_found]

    tokens_by_category = OrderedDict()
    for token in all_tokens:
        category = token.category.category if token.category else "uncategorized"
        tokens_by_category[category] = tokens_by_category.get(category, 0) + token.total_count

    team_usage = OrderedDict()
    for result in results:
        team = result.repository.team or "unassigned"
        team_usage[team] = team_usage.get(team, 0) + result.total_usage

    top_tokens = sorted(all_tokens, key=lambda t: t.total_count, reverse=True)[:TOP_TOKENS_LIMIT]

    return {
        "total_files": sum(result.summary.total_files for result in results),
        "average_coverage": (
            round(sum(result.coverage for result in results) / len(results), 2) if results else 0
        ),
        "tokens_by_category": dict(tokens_by_category),
        "team_usage": dict(team_usage),
        "top_tokens": [
            {
                "name": token.token_name,
                "usage": token.total_count,
                "category": token.category.category if token.category else None,
            }
            for token in top_tokens
        ],
    }


def build_report(results: List[ScanResult]) -> Dict[str, Any]:
    """Builds the JSON-serializable report for a list of repository results."""
    return {
        "scan_date": datetime.now().isoformat(),
        "total_repositories": len(results),
        "total_tokens_found": sum(result.total_usage for result in results),
        "total_unique_tokens": len({token.token_name for result in results for token in result.tokens_found}),
        "repositories": [result.to_dict() for result in results],
        "summary": summarize_results(results),
    }


def write_json_report(results: List[ScanResult], output_path: str) -> str:
    """
    Writes the report as token-scan-<timestamp>.json.

    Args:
        results (List[ScanResult]): Repository results.
        output_path (str): Report directory, created if missing.

    Returns:
        str: Path of the written report.
    """
    os.makedirs(output_path, exist_ok=True)
    timestamp = re.sub(r"[:.]", "-", datetime.now().isoformat())
    report_file = os.path.join(output_path, f"token-scan-{timestamp}.json")
    with open(report_file, "w", encoding="utf-8") as f:
        json.dump(build_report(results), f, indent=2)
    log(f"{GREEN}📊 Scan report generated: {report_file}{RESET}")
    return report_file


HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Token Usage Report</title>
    <style>
        body { font-family: Arial, sans-serif; background: #f8f8f8; color: #222; }
        .container { max-width: 900px; margin: 2em auto; background: #fff; padding: 2em; border-radius: 8px; box-shadow: 0 2px 8px #0001; }
        h1 { color: #2d5be3; }
        table { border-collapse: collapse; width: 100%; margin-bottom: 1em; }
        th, td { text-align: left; padding: 0.4em 0.6em; border-bottom: 1px solid #eee; }
        .section { margin-bottom: 2em; }
        .errors { background: #fdecea; padding: 1em; border-radius: 6px; }
        .timestamp { color: #888; font-size: 0.9em; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Token Usage Report</h1>
        <div class="timestamp">Generated: {{ timestamp }}</div>
        <div class="section">
            <h2>Overview</h2>
            <p>{{ report.total_repositories }} repositories, {{ report.total_tokens_found }} token usages,
               {{ report.total_unique_tokens }} unique tokens, average coverage {{ report.summary.average_coverage }}%</p>
        </div>
        {% if report.summary.top_tokens %}
        <div class="section">
            <h2>Top Tokens</h2>
            <table>
                <tr><th>Token</th><th>Usage</th><th>Category</th></tr>
                {% for token in report.summary.top_tokens %}
                <tr><td>{{ token.name }}</td><td>{{ token.usage }}</td><td>{{ token.category or "" }}</td></tr>
                {% endfor %}
            </table>
        </div>
        {% endif %}
        {% for repo in report.repositories %}
        <div class="section">
            <h2>{{ repo.repository.name }}</h2>
            <p>{{ repo.summary.scanned_files }}/{{ repo.summary.total_files }} files scanned,
               {{ repo.total_usage }} usages, coverage {{ repo.coverage }}%</p>
            {% if repo.patterns %}
            <table>
                <tr><th>Pattern</th><th>Usage</th><th>Complexity</th></tr>
                {% for pattern in repo.patterns %}
                <tr><td>{{ pattern.pattern_name }}</td><td>{{ pattern.usage_count }}</td><td>{{ pattern.complexity }}</td></tr>
                {% endfor %}
            </table>
            {% endif %}
            {% if repo.errors %}
            <div class="errors">
                {% for error in repo.errors %}<div>{{ error }}</div>{% endfor %}
            </div>
            {% endif %}
        </div>
        {% endfor %}
    </div>
</body>
</html>
'''


def generate_html_report(results: List[ScanResult], output_path: str) -> str:
    """Generate an HTML report of the scan and return its path."""
    template = Template(HTML_TEMPLATE, autoescape=True)
    html = template.render(
        timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        report=build_report(results),
    )

    os.makedirs(output_path, exist_ok=True)
    out_path = os.path.join(output_path, "token-scan-report.html")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(html)
    log(f"{GREEN}HTML report generated at: {out_path}{RESET}")
    return out_path

# =============================================================================
# TERMINAL OUTPUT
# =============================================================================

def _to_markdown(text: str) -> str:
    text = text.replace(BOLD, "**").replace(RESET, "**")
    return remove_ansi_colors(text)


def format_scan_summary(results: List[ScanResult], markdown=False) -> str:
    """Format scan results for display."""
    lines = [f"\n{BOLD}🎨 Token Usage Scan{RESET}", f"{GREY}================================{RESET}"]

    if not results:
        lines.append(f"{YELLOW}No repositories scanned.{RESET}")

    for result in results:
        summary = result.summary
        lines.append(f"\n{BOLD}📂 {result.repository.name}{RESET}")
        lines.append(f"Files: {summary.scanned_files}/{summary.total_files} scanned")
        lines.append(f"Token usages: {result.total_usage} ({summary.unique_tokens} unique)")
        lines.append(f"Coverage: {result.coverage}%")
        if summary.most_used_token:
            lines.append(f"Most used token: {summary.most_used_token}")
        if summary.tokens_by_tier:
            tiers = ", ".join(f"{tier} {count}" for tier, count in summary.tokens_by_tier.items())
            lines.append(f"By tier: {tiers}")

        for pattern in result.patterns[:5]:
            lines.append(f"  🧩 {pattern.pattern_name}: {pattern.usage_count} ({pattern.complexity.value})")

        if result.errors:
            lines.append(f"{RED}⚠️  {len(result.errors)} errors:{RESET}")
            for error in result.errors[:3]:
                lines.append(f"  • {error}")
            if len(result.errors) > 3:
                lines.append(f"  ... and {len(result.errors) - 3} more")

    result_text = "\n".join(lines)
    if markdown:
        result_text = _to_markdown(result_text)
    return result_text


def format_commit_changes(commits: List[CommitInfo], markdown=False) -> str:
    """Format detected commits and their token changes for display."""
    if not commits:
        result = f"\n{GREEN}✅ No token changes detected.{RESET}"
    else:
        lines = [f"\n{BOLD}🔄 Token Changes: {len(commits)} commits{RESET}"]
        for commit in commits:
            lines.append(f"\n{GREY}{commit.short_hash}{RESET} {commit.message} ({commit.author}, {commit.date})")
            for change in commit.changes:
                lines.append(f"  📄 {change.type.value}: {change.file}")

        records = summarize_token_changes(commits)
        if records:
            lines.append(f"\n{BOLD}Token updates:{RESET}")
            for record in records:
                color = YELLOW if record.severity == "warning" else GREY
                if record.type == "updated":
                    detail = f"{record.old_value} → {record.new_value}"
                else:
                    detail = record.new_value or record.old_value or ""
                lines.append(f"  {color}{record.type:<8}{RESET} {record.token_name} {detail} [{record.category}]")
        result = "\n".join(lines)

    if markdown:
        result = _to_markdown(result)
    return result
