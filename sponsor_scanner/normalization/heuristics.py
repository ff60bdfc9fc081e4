"""Keyword heuristics that derive JobRecord fields from posting text.

These are plain substring checks over lower-cased text; there is no
language understanding involved. All functions are pure.
"""

from typing import Optional, Sequence

from sponsor_scanner.domain.models import ApplyOption, DetectedExtensions, WorkSetting

JOB_TYPE_LABELS = ("full-time", "part-time", "contract", "internship", "temporary")

# Checked in order; the first term found in any option wins
APPLY_LINK_PRIORITIES = ("career", "jobs", "workday", "greenhouse", "lever", "bamboohr")


def extract_work_setting(description: Optional[str], extensions: Optional[Sequence[str]]) -> WorkSetting:
    """Classify the work arrangement from description and extension labels.

    Example:
        >>> extract_work_setting("Remote with monthly office visits", [])
        <WorkSetting.HYBRID: 'Hybrid'>
    """
    text = f"{description or ''} {' '.join(extensions or [])}".lower()

    mentions_remote = "remote" in text
    mentions_office = "onsite" in text or "office" in text

    if mentions_remote and mentions_office:
        return WorkSetting.HYBRID
    if mentions_remote:
        return WorkSetting.REMOTE
    if mentions_office or "on-site" in text:
        return WorkSetting.ONSITE

    return WorkSetting.NOT_SPECIFIED


def extract_job_type(extensions: Optional[Sequence[str]]) -> str:
    """Find the first schedule label mentioned in the extensions.

    Returns:
        Label with its first letter capitalized (e.g. 'Full-time'), or ''
    """
    for extension in extensions or []:
        lowered = extension.lower()
        for label in JOB_TYPE_LABELS:
            if label in lowered:
                return label[0].upper() + label[1:]

    return ""


def extract_posting_time(
    detected: Optional[DetectedExtensions], extensions: Optional[Sequence[str]]
) -> str:
    """Posting time: the provider's posted_at, else the first extension label."""
    if detected is not None and detected.posted_at:
        return detected.posted_at
    if extensions:
        return extensions[0] or ""
    return ""


def select_apply_link(options: Optional[Sequence[ApplyOption]]) -> str:
    """Pick the most useful application link.

    Prefers links pointing at a company careers page or a known ATS, falling
    back to the first option. Returns '' when there are no options.
    """
    if not options:
        return ""

    for term in APPLY_LINK_PRIORITIES:
        for option in options:
            if term in option.title.lower() or term in option.link.lower():
                return option.link

    return options[0].link
