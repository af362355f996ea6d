"""Bundled catalog served when the registry cannot be reached."""

from skillshelf.types import Plugin, Skill

FALLBACK_PLUGINS: tuple[Plugin, ...] = (
    Plugin(
        id="c761e569-b7fb-4463-b5a4-b5f7f579680a",
        name="frontend-design",
        description=(
            "Create distinctive, production-grade frontend interfaces "
            "with high design quality."
        ),
        owner="anthropics",
        repo="claude-code-plugins",
        downloads=2791,
        stars=53917,
        category="development",
        namespace="@anthropics/claude-code-plugins",
    ),
    Plugin(
        id="b050a15f-4682-41c5-aa6f-b0e555896a12",
        name="compounding-engineering",
        description="AI-powered development tools that get smarter with every use.",
        owner="EveryInc",
        repo="every-marketplace",
        downloads=1396,
        stars=2354,
        category="ai-powered",
        tags=("ai-powered", "workflow-automation"),
        namespace="@EveryInc/every-marketplace",
    ),
    Plugin(
        id="c07e9b41-81e5-4999-9460-6d4a34f19491",
        name="feature-dev",
        description=(
            "Comprehensive feature development workflow with specialized agents."
        ),
        owner="anthropics",
        repo="claude-code-plugins",
        downloads=1377,
        stars=53917,
        category="development",
        namespace="@anthropics/claude-code-plugins",
    ),
)

FALLBACK_SKILLS: tuple[Skill, ...] = (
    Skill(
        id="4c08e453-73f3-4c10-9dbc-2174ed8e3f11",
        name="frontend-design",
        description=(
            "Create distinctive, production-grade frontend interfaces "
            "with high design quality."
        ),
        owner="anthropics",
        repo="claude-code",
        downloads=8702,
        stars=52420,
        install_identifier="@anthropics/claude-code/frontend-design",
        raw_file_url=(
            "https://raw.githubusercontent.com/anthropics/claude-code/main/"
            "plugins/frontend-design/skills/frontend-design/SKILL.md"
        ),
    ),
    Skill(
        id="7ddc88c4-47d8-4cc2-9263-94f08dced4f8",
        name="prompt-engineering-patterns",
        description=(
            "Master advanced prompt engineering techniques to maximize "
            "LLM performance."
        ),
        owner="wshobson",
        repo="agents",
        downloads=886,
        stars=20969,
        install_identifier="@wshobson/agents/prompt-engineering-patterns",
        raw_file_url=(
            "https://raw.githubusercontent.com/wshobson/agents/main/"
            "skills/prompt-engineering-patterns/SKILL.md"
        ),
    ),
    Skill(
        id="a1299c1e-12ab-44af-a931-d7fa0254de10",
        name="brainstorming",
        description=(
            "You MUST use this before any creative work - creating features, "
            "building components."
        ),
        owner="obra",
        repo="superpowers",
        downloads=825,
        stars=14889,
        install_identifier="@obra/superpowers/brainstorming",
        raw_file_url=(
            "https://raw.githubusercontent.com/obra/superpowers/main/"
            "skills/brainstorming/SKILL.md"
        ),
    ),
)
