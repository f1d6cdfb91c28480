"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取 Markdown 文本：
会话的系统指令、开场白以及一次性生成任务的用户提示模板。
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent

_PROMPT_FILES = {
    "sales-assistant": "sales_assistant_system.md",
    "solution-strategist": "solution_strategist_system.md",
}


def _read(locale: str, fname: str) -> str:
    return (PROMPTS_DIR / locale / fname).read_text(encoding="utf-8").strip()


def load_system_prompt(agent_type: str, locale: str = "en") -> str:
    """根据 Agent 类型和语言加载系统提示词文本。"""

    try:
        fname = _PROMPT_FILES[agent_type]
    except KeyError:
        raise KeyError(f"Unknown agent type: {agent_type!r}")
    return _read(locale, fname)


def load_greeting(locale: str = "en") -> str:
    return _read(locale, "sales_assistant_greeting.md")


def render_solution_request(industry: str, challenge: str, locale: str = "en") -> str:
    """用行业与挑战填充一次性方案生成的用户提示。"""

    template = _read(locale, "solution_request.md")
    return template.format(industry=industry, challenge=challenge)
