# utils/text_utils.py

import html

def escape_html(text) -> str:
    return html.escape(str(text), quote=True)

def truncate(text: str, max_len: int = 64) -> str:
    return text if len(text) <= max_len else text[:max_len - 1] + "…"

def short_id(task_id: str, length: int = 8) -> str:
    return task_id[:length]
