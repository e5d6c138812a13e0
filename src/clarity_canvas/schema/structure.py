"""Clarity profile structure: sections, subsections and field keys."""

from __future__ import annotations

from enum import Enum


class SectionKey(str, Enum):
    """The six top-level profile sections."""

    INDIVIDUAL = "individual"
    ROLE = "role"
    ORGANIZATION = "organization"
    GOALS = "goals"
    NETWORK = "network"
    PROJECTS = "projects"


# section -> (display name, {subsection -> (display name, field keys)}), in display order
PROFILE_STRUCTURE: dict[SectionKey, tuple[str, dict[str, tuple[str, tuple[str, ...]]]]] = {
    SectionKey.INDIVIDUAL: (
        "Individual",
        {
            "background": (
                "Background & Identity",
                ("career", "education", "expertise", "experience_years", "industry"),
            ),
            "thinking": (
                "Thinking Style",
                ("decision_making", "problem_solving", "risk_tolerance", "learning_style"),
            ),
            "working": (
                "Working Style",
                ("collaboration_preference", "communication_style", "work_pace", "autonomy_level"),
            ),
            "values": (
                "Values & Motivations",
                ("core_values", "motivations", "mission", "passions"),
            ),
        },
    ),
    SectionKey.ROLE: (
        "Role",
        {
            "responsibilities": (
                "Core Responsibilities",
                ("title", "primary_duties", "key_metrics", "team_size"),
            ),
            "scope": (
                "Scope & Authority",
                ("decision_authority", "budget_control", "strategic_input", "execution_focus"),
            ),
            "constraints": (
                "Constraints & Challenges",
                ("time_constraints", "resource_constraints", "organizational_constraints", "skill_gaps"),
            ),
        },
    ),
    SectionKey.ORGANIZATION: (
        "Organization",
        {
            "fundamentals": (
                "Company Fundamentals",
                ("company_name", "org_industry", "stage", "size", "founded", "location"),
            ),
            "product": (
                "Product & Strategy",
                ("core_product", "value_proposition", "business_model", "competitive_advantage"),
            ),
            "market": (
                "Market Position",
                ("target_market", "customer_segments", "market_size", "competitive_landscape"),
            ),
            "financials": (
                "Financial Context",
                ("funding_status", "runway", "revenue_stage", "burn_rate"),
            ),
        },
    ),
    SectionKey.GOALS: (
        "Goals",
        {
            "immediate": (
                "Immediate Objectives",
                ("current_focus", "this_week", "this_month", "blockers"),
            ),
            "medium": (
                "Medium-term Aspirations",
                ("quarterly_goals", "annual_goals", "milestones"),
            ),
            "metrics": (
                "Success Metrics",
                ("north_star", "kpis", "success_definition", "validation_level"),
            ),
            "strategy": (
                "Strategic Direction",
                ("growth_strategy", "profitability_priority", "exit_vision"),
            ),
        },
    ),
    SectionKey.NETWORK: (
        "Network",
        {
            "stakeholders": (
                "Key Stakeholders",
                ("investors", "board", "key_customers", "key_partners"),
            ),
            "team": (
                "Team & Reports",
                ("direct_reports", "key_collaborators", "cross_functional"),
            ),
            "support": (
                "Support Network",
                ("advisors", "mentors", "peer_network", "help_needed"),
            ),
        },
    ),
    SectionKey.PROJECTS: (
        "Projects",
        {
            "active": (
                "Active Initiatives",
                ("current_projects", "project_priorities", "resource_allocation"),
            ),
            "upcoming": (
                "Upcoming Priorities",
                ("planned_projects", "next_quarter", "backlog"),
            ),
            "completed": (
                "Recent Completions",
                ("recent_wins", "lessons_learned", "portfolio"),
            ),
        },
    ),
}

FIELD_DISPLAY_NAMES: dict[str, str] = {
    # Individual
    "career": "Career Path",
    "education": "Education",
    "expertise": "Areas of Expertise",
    "experience_years": "Years of Experience",
    "industry": "Industry Background",
    "decision_making": "Decision Making Style",
    "problem_solving": "Problem Solving Approach",
    "risk_tolerance": "Risk Tolerance",
    "learning_style": "Learning Style",
    "collaboration_preference": "Collaboration Preference",
    "communication_style": "Communication Style",
    "work_pace": "Work Pace",
    "autonomy_level": "Autonomy Level",
    "core_values": "Core Values",
    "motivations": "Key Motivations",
    "mission": "Personal Mission",
    "passions": "Passions & Interests",
    # Role
    "title": "Job Title",
    "primary_duties": "Primary Duties",
    "key_metrics": "Key Metrics Owned",
    "team_size": "Team Size",
    "decision_authority": "Decision Authority",
    "budget_control": "Budget Control",
    "strategic_input": "Strategic Input",
    "execution_focus": "Execution Focus",
    "time_constraints": "Time Constraints",
    "resource_constraints": "Resource Constraints",
    "organizational_constraints": "Organizational Constraints",
    "skill_gaps": "Skill Gaps",
    # Organization
    "company_name": "Company Name",
    "org_industry": "Industry",
    "stage": "Company Stage",
    "size": "Company Size",
    "founded": "Year Founded",
    "location": "Headquarters Location",
    "core_product": "Core Product/Service",
    "value_proposition": "Value Proposition",
    "business_model": "Business Model",
    "competitive_advantage": "Competitive Advantage",
    "target_market": "Target Market",
    "customer_segments": "Customer Segments",
    "market_size": "Market Size",
    "competitive_landscape": "Competitive Landscape",
    "funding_status": "Funding Status",
    "runway": "Runway",
    "revenue_stage": "Revenue Stage",
    "burn_rate": "Burn Rate",
    # Goals
    "current_focus": "Current Focus",
    "this_week": "This Week",
    "this_month": "This Month",
    "blockers": "Current Blockers",
    "quarterly_goals": "Quarterly Goals",
    "annual_goals": "Annual Goals",
    "milestones": "Key Milestones",
    "north_star": "North Star Metric",
    "kpis": "Key KPIs",
    "success_definition": "Success Definition",
    "validation_level": "Validation Level",
    "growth_strategy": "Growth Strategy",
    "profitability_priority": "Profitability Priority",
    "exit_vision": "Exit Vision",
    # Network
    "investors": "Investors",
    "board": "Board Members",
    "key_customers": "Key Customers",
    "key_partners": "Key Partners",
    "direct_reports": "Direct Reports",
    "key_collaborators": "Key Collaborators",
    "cross_functional": "Cross-functional Teams",
    "advisors": "Advisors",
    "mentors": "Mentors",
    "peer_network": "Peer Network",
    "help_needed": "Help Needed",
    # Projects
    "current_projects": "Current Projects",
    "project_priorities": "Project Priorities",
    "resource_allocation": "Resource Allocation",
    "planned_projects": "Planned Projects",
    "next_quarter": "Next Quarter Focus",
    "backlog": "Project Backlog",
    "recent_wins": "Recent Wins",
    "lessons_learned": "Lessons Learned",
    "portfolio": "Project Portfolio",
}
