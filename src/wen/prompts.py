"""Built-in system prompts."""

DEFAULT_PROMPT_TEMPLATE = (
    "回答用户问题，务必做到简洁，不要有任何废话。"
    "输出纯文本格式(NO MARKDOWN)，适合在终端显示。"
)

# Appended in buffered mode so the model uses the tags that markup.render knows.
TERMINAL_MARKUP_PROMPT = (
    "使用以下格式添加颜色和样式：<red>红色文本</red>、<green>绿色文本</green>、"
    "<blue>蓝色文本</blue>、<bold>粗体文本</bold>、<yellow>黄色文本</yellow>。"
    "重要内容请使用颜色或粗体突出显示。"
)
