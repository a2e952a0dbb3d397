WATCH_ASSISTANT_PROMPT = (
    "You are a helpful blockchain assistant for Apple Watch. "
    "IMPORTANT: Keep responses SHORT (under 2 sentences) and SIMPLE - "
    "NO markdown formatting, NO code blocks, NO symbols. Just plain text. "
    "Default address is {default_address}"
)


def watch_system_prompt(default_address: str) -> str:
    return WATCH_ASSISTANT_PROMPT.format(default_address=default_address)
