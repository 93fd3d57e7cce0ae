"""
Localized text summaries of portfolio records.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from portfolio_terminal.api.models import (
    Education,
    Experience,
    Project,
    Skill,
    UserProfile,
)
from portfolio_terminal.i18n import Translations


def _parse_date(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: str, t: Translations) -> str:
    parsed = _parse_date(value)
    return parsed.strftime(t["date_format"]) if parsed else value


def format_year(value: str) -> str:
    parsed = _parse_date(value)
    return str(parsed.year) if parsed else value


def _description_bullets(description: Optional[str]) -> List[str]:
    if not description:
        return []
    return [f"   • {line.strip()}" for line in description.splitlines() if line.strip()]


def skills_summary(skills: Sequence[Skill], t: Translations) -> List[str]:
    texts = t["responses"]["skills"]
    if not skills:
        return list(texts["no_skills"])

    by_category: Dict[str, List[Skill]] = {}
    for skill in skills:
        by_category.setdefault(skill.category, []).append(skill)

    output = [texts["title"], ""]
    for category, members in by_category.items():
        output.append(f"📂 {category}:")
        for skill in members:
            output.append(f"  {skill.name} {'⭐' * skill.level}")
        output.append("")
    output.append(texts["footer"])
    return output


def projects_summary(projects: Sequence[Project], t: Translations) -> List[str]:
    texts = t["responses"]["projects"]
    if not projects:
        return list(texts["no_projects"])

    output = [texts["title"], ""]
    for index, project in enumerate(projects):
        output.append(f"📋 {project.title}")
        if project.description:
            output.append(f"   {project.description}")
        if project.technologies:
            output.append(f"   {texts['tech_stack']}: {', '.join(project.technologies)}")
        if project.live_url:
            output.append(f"   🔗 {project.live_url}")
        if project.github_url:
            output.append(f"   🐙 {project.github_url}")
        if index < len(projects) - 1:
            output.append("")
    output.extend(["", texts["footer"]])
    return output


def experience_summary(experiences: Sequence[Experience], t: Translations) -> List[str]:
    texts = t["responses"]["experience"]
    if not experiences:
        return list(texts["no_experience"])

    output = [texts["title"], ""]
    for index, exp in enumerate(experiences):
        output.append(f"🏢 {exp.company}")
        output.append(f"   {exp.position}")
        start = format_date(exp.start_date, t)
        end = format_date(exp.end_date, t) if exp.end_date else texts["current"]
        output.append(f"   📅 {start} - {end}")
        output.extend(_description_bullets(exp.description))
        if index < len(experiences) - 1:
            output.append("")
    output.extend(["", texts["footer"]])
    return output


def education_summary(education: Sequence[Education], t: Translations) -> List[str]:
    texts = t["responses"]["education"]
    if not education:
        return list(texts["no_education"])

    output = [texts["title"], ""]
    for index, edu in enumerate(education):
        output.append(f"🎓 {edu.title}")
        output.append(f"   {edu.institution}")
        start = format_year(edu.start_date)
        end = format_year(edu.end_date) if edu.end_date else texts["current"]
        output.append(f"   📅 {start} - {end}")
        output.extend(_description_bullets(edu.description))
        if index < len(education) - 1:
            output.append("")
    output.extend(["", texts["footer"]])
    return output


def profile_summary(profile: Optional[UserProfile], t: Translations) -> List[str]:
    texts = t["responses"]["about"]
    if profile is None:
        return list(texts["no_profile"])

    output: List[str] = []
    if profile.name:
        output.extend([f"🧑‍💻 {profile.name}", ""])
    if profile.role_title:
        output.append(f"💼 {profile.role_title}")
    if profile.role_subtitle:
        output.append(profile.role_subtitle)
    if profile.about_me:
        output.extend(["", profile.about_me])
    if profile.status:
        output.extend(["", f"{texts['status']}: {profile.status}"])
    return output or list(texts["no_profile"])


def whoami_summary(profile: Optional[UserProfile], t: Translations) -> List[str]:
    fallback = list(t["commands"]["whoami"]["fallback"])
    if profile is None:
        return fallback

    output: List[str] = []
    if profile.role_title:
        output.append(profile.role_title)
    if profile.role_subtitle:
        output.append(profile.role_subtitle)
    if profile.about_me:
        output.extend(["", profile.about_me])
    return output or fallback


def contact_summary(profile: Optional[UserProfile], t: Translations) -> List[str]:
    texts = t["responses"]["contact"]
    if profile is None:
        return list(texts["no_contact"])

    output = [texts["title"], ""]
    if profile.email:
        output.append(f"📧 {texts['email']}: {profile.email}")
    if profile.phone:
        output.append(f"📱 {texts['phone']}: {profile.phone}")
    if profile.location:
        output.append(f"📍 {texts['location']}: {profile.location}")
    if profile.linkedin_url:
        output.append(f"💼 LinkedIn: {profile.linkedin_url}")
    if profile.github_url:
        output.append(f"🐙 GitHub: {profile.github_url}")
    output.extend(["", texts["footer"]])
    return output
