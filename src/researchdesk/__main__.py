"""Entry point: python -m researchdesk [researches|templates|research <id>]

- No args / "researches": List researches
- "templates":            List templates
- "research <id>":        Show one research, its template and its entries
"""

from __future__ import annotations

import logging
import sys
from collections import Counter

from researchdesk.config import load_config
from researchdesk.core import ResearchDesk


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_desk() -> ResearchDesk:
    config = load_config()
    _setup_logging(config.log_level)
    return ResearchDesk(config)


def _run_researches() -> int:
    desk = _build_desk()
    researches = desk.researches.find_all()
    if not researches:
        print("No researches found.")
        return 0
    for research in researches:
        tags = ", ".join(research.tags)
        print(f"{research.id}\t{research.name}\t{research.status}\t{research.template}\t{tags}")
    return 0


def _run_templates() -> int:
    desk = _build_desk()
    templates = desk.templates.find_all()
    if not templates:
        print("No templates found.")
        return 0
    for template in templates:
        print(
            f"{template.key}\t{template.name}\t"
            f"{len(template.categories)} categories\t{len(template.entry_types)} entry types"
        )
    return 0


def _run_research(research_id: str) -> int:
    desk = _build_desk()
    research = desk.researches.get(research_id)
    if research is None:
        print(f"Research not found: {research_id}")
        return 1

    template = desk.templates.get_template(research.template)
    template_label = template.name if template else "template not found"
    print(f"ID:          {research.id}")
    print(f"Name:        {research.name}")
    print(f"Description: {research.description or 'None'}")
    print(f"Status:      {research.status}")
    print(f"Template:    {research.template} ({template_label})")
    print(f"Tags:        {', '.join(research.tags) or 'None'}")
    print(f"Entry dirs:  {', '.join(research.entry_dirs) or 'None'}")
    print(f"Path:        {research.path or 'Not set'}")

    entries = desk.entries.find_all(research_id)
    print(f"\nEntries ({len(entries)}):")
    for entry in entries:
        print(f"  {entry.entry_id}\t{entry.category}/{entry.entry_type}\t{entry.status}\t{entry.title}")
    if entries:
        by_status = Counter(entry.status for entry in entries)
        print("\nBy status: " + ", ".join(f"{k}={v}" for k, v in sorted(by_status.items())))
    return 0


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "researches"

    if cmd == "researches":
        sys.exit(_run_researches())
    elif cmd == "templates":
        sys.exit(_run_templates())
    elif cmd == "research" and len(sys.argv) > 2:
        sys.exit(_run_research(sys.argv[2]))
    else:
        print("Usage: python -m researchdesk [researches|templates|research <id>]")
        print("  researches     List researches (default)")
        print("  templates      List templates")
        print("  research <id>  Show one research with its entries")
        sys.exit(1)


if __name__ == "__main__":
    main()
