"""
Main application entry point and CLI handling.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .config import (
    RED, RESET, YELLOW, load_config, set_verbose, get_configured_design_system_path,
    get_configured_diff_lookahead, get_configured_lookback_hours, get_configured_output_path,
    get_configured_pointer_file, get_configured_repositories, get_team_repositories,
)
from .exceptions import ConfigurationError
from .git_analysis import FileCommitPointerStore, GitChangeDetector, summarize_token_changes
from .models import RepositoryConfig
from .report_generators import build_report, format_commit_changes, format_scan_summary, generate_html_report, write_json_report
from .scanner import TokenScanner, repositories_from_config
from .utils import warn


def resolve_repositories(config: Dict[str, Any], directory: Optional[str] = None, team: Optional[str] = None) -> List[RepositoryConfig]:
    """
    Determine which repositories to scan.

    An explicit directory is scanned on its own as a local repository;
    otherwise the configured repositories are used, optionally filtered by team.
    """
    if directory:
        path = os.path.abspath(directory)
        return [RepositoryConfig(location=path, name=os.path.basename(path.rstrip(os.sep)) or path)]

    entries = get_team_repositories(config, team) if team else get_configured_repositories(config)
    return repositories_from_config(entries)


def run_change_detection(config: Dict[str, Any], recent_hours: Optional[int] = None,
                         json_output=False, markdown=False) -> Optional[str]:
    """
    Detect token changes in the design system repository and format them.

    With recent_hours the last N hours are reported and the pointer stays
    where it is; otherwise the commits since the last processed one are.
    """
    design_system_path = get_configured_design_system_path(config)
    if not design_system_path:
        warn(f"{YELLOW}⚠️  No design system path configured (set DESIGN_SYSTEM_PATH or design_system_path).{RESET}")
        return None

    detector = GitChangeDetector(
        design_system_path,
        pointer_store=FileCommitPointerStore(get_configured_pointer_file(config)),
        lookback_hours=get_configured_lookback_hours(config),
        lookahead=get_configured_diff_lookahead(config),
    )
    if recent_hours is not None:
        commits = detector.get_recent_changes(recent_hours)
    else:
        commits = detector.get_changes_since_last_scan()

    if json_output:
        return json.dumps({
            "commits": [commit.to_dict() for commit in commits],
            "token_changes": [record.to_dict() for record in summarize_token_changes(commits)],
        }, indent=2)
    return format_commit_changes(commits, markdown=markdown)

# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv=None):
    """Main entry point for the Token Scanner."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Token Scanner - Design Token Usage Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  token-scanner                          # Scan all configured repositories
  token-scanner ../website               # Scan one local directory
  token-scanner --team marketing         # Scan one team's repositories
  token-scanner --preset canon           # Use the Canon token formats
  token-scanner --markdown --no-report   # Markdown summary, no JSON artifact
  token-scanner --changes                # Token changes since the last scan
  token-scanner --recent 48              # Token changes in the last 48 hours"""
    )
    parser.add_argument('directory', nargs='?', default=None,
                        help='Local directory to scan instead of the configured repositories')
    parser.add_argument('--config', default=None,
                        help='Path to the JSON configuration file')
    parser.add_argument('--team', default=None,
                        help='Only scan repositories owned by this team')
    parser.add_argument('--preset', default=None,
                        help='Token format preset (default, canon)')
    parser.add_argument('--json', action='store_true',
                        help='Output results in JSON format')
    parser.add_argument('--markdown', action='store_true',
                        help='Output results in Markdown format')
    parser.add_argument('--html-report', action='store_true',
                        help='Generate an HTML report')
    parser.add_argument('--no-report', action='store_true',
                        help='Do not write the JSON report file')
    parser.add_argument('--changes', action='store_true',
                        help='Detect token changes since the last processed commit')
    parser.add_argument('--recent', type=int, metavar='HOURS', default=None,
                        help='Detect token changes from the last HOURS hours')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress progress output')

    args = parser.parse_args(argv)
    set_verbose(not args.quiet)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"{RED}✖ {e}{RESET}", file=sys.stderr)
        return

    # Change detection modes
    if args.changes or args.recent is not None:
        output = run_change_detection(config, recent_hours=args.recent,
                                      json_output=args.json, markdown=args.markdown)
        if output:
            print(output)
        return

    try:
        repositories = resolve_repositories(config, args.directory, args.team)
        scanner = TokenScanner.from_config(config, preset=args.preset)
    except ConfigurationError as e:
        print(f"{RED}✖ {e}{RESET}", file=sys.stderr)
        return

    if not repositories:
        warn(f"{YELLOW}⚠️  No repositories to scan. Pass a directory or configure repositories.{RESET}")
        return

    results = scanner.scan_all_repositories(repositories)

    output_path = get_configured_output_path(config)
    if not args.no_report:
        write_json_report(results, output_path)
    if args.html_report:
        generate_html_report(results, output_path)

    if args.json:
        print(json.dumps(build_report(results), indent=2))
    else:
        print(format_scan_summary(results, markdown=args.markdown))


if __name__ == "__main__":
    main()
