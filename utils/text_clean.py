"""
文本清洗工具（用于聊天消息展示，不参与标题去重）

INSPIRE 的标题 / 摘要里常见行内公式，如 "$\mathbb{Z}_2$ topological order"，
聊天里看原始 LaTeX 很吃力，这里做一个尽量保留信息的粗略转写。
"""

import re


_INLINE_MATH = re.compile(r'\$\$(.+?)\$\$|\$(.+?)\$', re.S)
_COMMAND_WITH_ARG = re.compile(r'\\[a-zA-Z]+\{([^{}]*)\}')
_BARE_COMMAND = re.compile(r'\\([a-zA-Z]+)')


def _plain_math(expr: str) -> str:
    """$\\mathrm{GeV}$ → GeV，$\\alpha_s$ → alpha_s"""
    # 嵌套命令由内向外展开
    prev = None
    while prev != expr:
        prev, expr = expr, _COMMAND_WITH_ARG.sub(r'\1', expr)
    expr = _BARE_COMMAND.sub(r'\1', expr)
    return expr.replace('{', '').replace('}', '').replace('~', ' ')


def _replace_math(match) -> str:
    return _plain_math(match.group(1) or match.group(2))


def clean_title(title: str) -> str:
    """清理论文标题（去除多余空白和换行，展开行内公式）"""
    text = _INLINE_MATH.sub(_replace_math, title)
    return re.sub(r'\s+', ' ', text).strip()


def clean_abstract(abstract: str) -> str:
    """清理摘要文本"""
    text = _INLINE_MATH.sub(_replace_math, abstract)
    return re.sub(r'\s+', ' ', text).strip()


def truncate(text: str, max_len: int = 200, suffix: str = "...") -> str:
    """安全截断文本"""
    if len(text) <= max_len:
        return text
    return text[:max_len - len(suffix)] + suffix
